# /tests/conftest.py

import os

# Configuration is read from the environment on first use, so it must be in
# place before anything touches get_settings().
os.environ["BACKEND_URL"] = "sqlite://"
os.environ["BACKEND_API_KEY"] = "test-signing-key"
os.environ["SITE_URL"] = "http://testserver"
os.environ.pop("SMTP_HOST", None)

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quadriparlanti.core import security
from quadriparlanti.core.config import get_settings
from quadriparlanti.db.base import Base
from quadriparlanti.db.database import get_db
from quadriparlanti.db.models.user_model import AuthAccount, User
from quadriparlanti.db.models.work_models import Work, WorkAttachment, WorkLink
from quadriparlanti.main import app
from quadriparlanti.models.auth_model import Identity
from quadriparlanti.services.database_service import BackendService


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """PBKDF2 at production strength would make every login test slow."""
    monkeypatch.setattr(security, "PASSWORD_HASH_ITERATIONS", 1000)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# --- Database Fixtures ---

@pytest.fixture
def session_factory():
    """
    A fresh in-memory SQLite database for EACH test. StaticPool keeps a single
    connection so that every session sees the same database.
    """
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def backend(db_session):
    """A BackendService bound to the test database."""
    return BackendService(db_session)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# --- Data Factories ---

@pytest.fixture
def make_user(db_session):
    """Creates an auth account plus its profile, the way teacher creation does."""
    def _make_user(email, role="docente", status="active", name="Mario Rossi", password="password123", confirmed=True, created_at=None):
        now = datetime.now(timezone.utc)
        account = AuthAccount(
            email=email,
            password_hash=security.hash_password(password),
            email_confirmed_at=now if confirmed else None,
            user_metadata={},
        )
        db_session.add(account)
        db_session.flush()
        user = User(id=account.id, email=email, name=name, role=role, status=status, created_at=created_at or now)
        db_session.add(user)
        db_session.commit()
        return user
    return _make_user


@pytest.fixture
def make_work(db_session):
    def _make_work(creator, title="La Divina Commedia illustrata", status="pending_review", submitted_days_ago=1, links=(), attachments=0):
        submitted_at = datetime.now(timezone.utc) - timedelta(days=submitted_days_ago)
        work = Work(
            title_it=title,
            description_it="Un percorso illustrato tra i canti dell'Inferno.",
            class_name="3A",
            teacher_name=creator.name,
            school_year="2024-25",
            status=status,
            created_by=creator.id,
            created_at=submitted_at,
            submitted_at=submitted_at,
        )
        db_session.add(work)
        db_session.flush()
        for url, link_type in links:
            db_session.add(WorkLink(work_id=work.id, url=url, link_type=link_type))
        for index in range(attachments):
            db_session.add(WorkAttachment(
                work_id=work.id,
                file_name=f"pagina-{index}.pdf",
                file_size_bytes=1024,
                file_type="pdf",
                mime_type="application/pdf",
                storage_path=f"works/{work.id}/pagina-{index}.pdf",
            ))
        db_session.commit()
        return work
    return _make_work


@pytest.fixture
def admin_user(make_user):
    return make_user("admin@liceo.it", role="admin", name="Anna Admin")


@pytest.fixture
def teacher_user(make_user):
    return make_user("docente@liceo.it", name="Mario Rossi")


def identity_for(user) -> Identity:
    return Identity(id=user.id, email=user.email, role=user.role, status=user.status, name=user.name)


@pytest.fixture
def admin_identity(admin_user):
    return identity_for(admin_user)


@pytest.fixture
def teacher_identity(teacher_user):
    return identity_for(teacher_user)


@pytest.fixture
def login_as(client):
    """Puts a valid session cookie for the given user on the test client."""
    def _login_as(user):
        token = security.create_access_token(subject=user.id, email=user.email, role=user.role)
        client.cookies.set(get_settings().session_cookie_name, token)
        return token
    return _login_as
