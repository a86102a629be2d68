# /quadriparlanti/presentation.py

"""
Template environment and the small formatting helpers the templates use.

Templates only render data that has already been fetched; any value they
need to derive (a link's domain, how long a work has waited, which page
numbers to show) is computed by a helper registered here.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union
from urllib.parse import urlparse

from fastapi import Request
from fastapi.templating import Jinja2Templates

from .core.i18n import Translator

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

OVERDUE_AFTER_DAYS = 3
PAGINATION_WINDOW = 5
DEFAULT_LINK_TITLE = "External Resource"


def link_domain(url: str) -> str:
    """Host name of a link without its 'www.' prefix; the raw value when it is not a URL."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return url
    if not hostname:
        return url
    return hostname.replace("www.", "", 1)


def link_icon(link_type: Optional[str]) -> str:
    return "document" if link_type and "drive" in link_type else "globe"


def link_title(title: Optional[str]) -> str:
    return title or DEFAULT_LINK_TITLE


def _moment(value: Union[datetime, str, None]) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def days_waiting(work, now: Optional[datetime] = None) -> int:
    """Whole days since a work entered the queue (submission, else creation)."""
    now = now or datetime.now(timezone.utc)
    since = _moment(getattr(work, "submitted_at", None)) or _moment(getattr(work, "created_at", None))
    if since is None:
        return 0
    return max((now - since).days, 0)


def is_overdue(work, now: Optional[datetime] = None) -> bool:
    return days_waiting(work, now) > OVERDUE_AFTER_DAYS


def pending_stats(works: Sequence, now: Optional[datetime] = None) -> Dict[str, int]:
    waits = [days_waiting(w, now) for w in works]
    return {
        "total": len(waits),
        "average_days": round(sum(waits) / len(waits)) if waits else 0,
        "overdue": sum(1 for days in waits if days > OVERDUE_AFTER_DAYS),
    }


def page_numbers(current_page: int, total_pages: int) -> List[Union[int, str]]:
    """
    Page links for the pagination bar. Up to five pages are listed in full;
    beyond that the first and last pages frame the neighbours of the current
    one, with '...' marking the gaps.
    """
    if total_pages <= PAGINATION_WINDOW:
        return list(range(1, total_pages + 1))

    pages: List[Union[int, str]] = [1]
    if current_page > 3:
        pages.append("...")
    start = max(2, current_page - 1)
    end = min(total_pages - 1, current_page + 1)
    pages.extend(range(start, end + 1))
    if current_page < total_pages - 2:
        pages.append("...")
    pages.append(total_pages)
    return pages


def current_year() -> int:
    return datetime.now().year


def format_date(value: Union[datetime, str, None], fmt: str = "%d/%m/%Y") -> str:
    moment = _moment(value)
    return moment.strftime(fmt) if moment else "-"


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["link_domain"] = link_domain
templates.env.filters["link_icon"] = link_icon
templates.env.filters["link_title"] = link_title
templates.env.filters["days_waiting"] = days_waiting
templates.env.filters["is_overdue"] = is_overdue
templates.env.filters["format_date"] = format_date
templates.env.globals["pending_stats"] = pending_stats
templates.env.globals["page_numbers"] = page_numbers
templates.env.globals["current_year"] = current_year


def render(request: Request, name: str, locale: str, status_code: int = 200, **context):
    """Renders a page template with the locale's translator available as `t`."""
    context.setdefault("identity", None)
    return templates.TemplateResponse(
        request=request,
        name=name,
        context={"locale": locale, "t": Translator(locale), **context},
        status_code=status_code,
    )
