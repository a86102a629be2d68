# /quadriparlanti/main.py

import logging
import os
from contextlib import asynccontextmanager

# --- Core FastAPI Imports ---
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from dotenv import load_dotenv

# --- Application-specific Imports ---
from .core.exceptions import AppError, ConfigurationError, LocaleNotFoundError, SessionRedirect
from .core.http_errors import to_http_exception
from .routers import (
    auth_router,
    teachers_router,
    reviews_router,
    pages_router,
    admin_pages_router,
    teacher_pages_router,
)

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Quadriparlanti backend starting")
    yield


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="Quadriparlanti Backend",
    description="Teacher management and work review for the Quadriparlanti school portal.",
    version="1.0.0",
    lifespan=lifespan,
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Exception Handlers ---
@app.exception_handler(SessionRedirect)
async def session_redirect_handler(request: Request, exc: SessionRedirect):
    return RedirectResponse(exc.location, status_code=303)


@app.exception_handler(LocaleNotFoundError)
async def locale_not_found_handler(request: Request, exc: LocaleNotFoundError):
    return JSONResponse(status_code=404, content={"detail": f"Lingua non supportata: {exc.locale}"})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("ERROR configuration: %s", exc.message)
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    http_error = to_http_exception(exc)
    return JSONResponse(status_code=http_error.status_code, content={"detail": http_error.detail})


# --- API Router Inclusion ---
app.include_router(auth_router.router, prefix="/api/auth", tags=["Auth"])
app.include_router(teachers_router.router, prefix="/api/teachers", tags=["Teachers"])
app.include_router(reviews_router.router, prefix="/api/reviews", tags=["Reviews"])


# --- Health Check Endpoint ---
@app.get("/health", tags=["Health Check"])
async def health_check():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Quadriparlanti backend is running!", "version": app.version}


# --- Server-rendered pages (registered last: their paths start with a locale parameter) ---
app.include_router(pages_router.router)
app.include_router(admin_pages_router.router)
app.include_router(teacher_pages_router.router)
