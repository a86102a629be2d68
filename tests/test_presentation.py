# /tests/test_presentation.py

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from quadriparlanti import presentation
from quadriparlanti.core.i18n import Translator
from quadriparlanti.presentation import days_waiting, is_overdue, link_domain, page_numbers, pending_stats, templates

NOW = datetime(2024, 11, 20, 9, 0, tzinfo=timezone.utc)


def _queued(days_ago: float, **fields):
    data = {
        "id": f"work-{days_ago}",
        "title_it": "Il ciclo dell'acqua",
        "description_it": "Esperimenti in laboratorio.",
        "class_name": "2B",
        "school_year": "2024-25",
        "teacher_name": "Mario Rossi",
        "teacher_full_name": "Mario Rossi",
        "attachment_count": 1,
        "link_count": 0,
        "submitted_at": datetime.now(timezone.utc) - timedelta(days=days_ago),
        "created_at": datetime.now(timezone.utc) - timedelta(days=days_ago),
    }
    data.update(fields)
    return SimpleNamespace(**data)


def _render(name, **context):
    return templates.get_template(name).render(t=Translator("it"), locale="it", **context)


# --- Link helpers ---

@pytest.mark.parametrize("url, expected", [
    ("https://www.youtube.com/watch?v=abc", "youtube.com"),
    ("https://drive.google.com/file/d/1", "drive.google.com"),
    ("non un url", "non un url"),
])
def test_link_domain(url, expected):
    assert link_domain(url) == expected


def test_link_card_shows_domain_type_and_fallback_title():
    link = SimpleNamespace(url="https://www.vimeo.com/123", link_type="vimeo", custom_label=None, preview_title=None)
    html = _render("components/link_card.html", link=link)
    assert 'data-component="link-card"' in html
    assert "vimeo.com" in html
    assert "VIMEO" in html
    assert "External Resource" in html
    assert "link-card__icon--globe" in html


def test_link_card_prefers_custom_label_and_uses_document_icon_for_drive():
    link = SimpleNamespace(url="https://drive.google.com/x", link_type="drive", custom_label="Relazione finale", preview_title="Doc")
    html = _render("components/link_card.html", link=link)
    assert "Relazione finale" in html
    assert "link-card__icon--document" in html


# --- Waiting time ---

def test_days_waiting_uses_submission_date():
    work = SimpleNamespace(submitted_at=NOW - timedelta(days=4, hours=2), created_at=NOW - timedelta(days=10))
    assert days_waiting(work, NOW) == 4
    assert is_overdue(work, NOW)


def test_three_days_is_not_yet_overdue():
    work = SimpleNamespace(submitted_at=NOW - timedelta(days=3, hours=5), created_at=None)
    assert not is_overdue(work, NOW)


def test_pending_stats():
    works = [
        SimpleNamespace(submitted_at=NOW - timedelta(days=1), created_at=None),
        SimpleNamespace(submitted_at=NOW - timedelta(days=5), created_at=None),
        SimpleNamespace(submitted_at=NOW - timedelta(days=6), created_at=None),
    ]
    assert pending_stats(works, NOW) == {"total": 3, "average_days": 4, "overdue": 2}
    assert pending_stats([], NOW) == {"total": 0, "average_days": 0, "overdue": 0}


# --- Pending list ---

def test_pending_list_empty_state():
    html = _render("components/pending_works_list.html", works=[])
    assert "No Works Pending Review" in html
    assert 'data-component="work-card"' not in html


def test_pending_list_renders_one_card_per_work():
    html = _render("components/pending_works_list.html", works=[_queued(1), _queued(5)])
    assert "Pending Works (2)" in html
    assert html.count('data-component="work-card"') == 2
    assert html.count("Overdue</span>") == 1
    assert "Submitted 1 day ago" in html
    assert "Submitted 5 days ago" in html


# --- Pagination ---

@pytest.mark.parametrize("current, total, expected", [
    (1, 1, [1]),
    (2, 5, [1, 2, 3, 4, 5]),
    (1, 10, [1, 2, "...", 10]),
    (5, 10, [1, "...", 4, 5, 6, "...", 10]),
    (10, 10, [1, "...", 9, 10]),
])
def test_page_numbers(current, total, expected):
    assert page_numbers(current, total) == expected


def test_pagination_hidden_for_single_page():
    result = SimpleNamespace(page=1, totalPages=1, total=3, limit=10)
    html = _render("components/pagination.html", result=result, filters=SimpleNamespace(search=None, status=None, limit=10))
    assert "<nav" not in html


# --- Footer and formatting ---

def test_footer_shows_current_year():
    html = _render("components/footer.html")
    assert f"&copy; {datetime.now().year}" in html
    assert 'href="/login"' in html


def test_format_date_handles_missing_values():
    assert presentation.format_date(None) == "-"
    assert presentation.format_date(datetime(2024, 3, 7, tzinfo=timezone.utc)) == "07/03/2024"
