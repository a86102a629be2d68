# /tests/test_teachers_router.py

import pytest

from quadriparlanti.core import security
from quadriparlanti.db.models.user_model import User


@pytest.fixture
def admin_headers(admin_user):
    token = security.create_access_token(subject=admin_user.id, email=admin_user.email, role="admin")
    return {"Authorization": f"Bearer {token}"}


# --- Teachers API ---

def test_create_teacher(client, admin_headers):
    payload = {"email": "nuova@liceo.it", "name": "Nuova Docente", "sendInvitation": True}
    response = client.post("/api/teachers", json=payload, headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "nuova@liceo.it"
    assert body["status"] == "invited"


def test_create_teacher_validation_errors(client, admin_headers):
    response = client.post("/api/teachers", json={"email": "sbagliata", "name": "X"}, headers=admin_headers)

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["errors"] == {"email": ["Email non valida"], "name": ["Nome deve avere almeno 2 caratteri"]}
    assert detail["message"] == "Email non valida"


def test_create_teacher_duplicate_email(client, admin_headers, teacher_user):
    response = client.post("/api/teachers", json={"email": "docente@liceo.it", "name": "Doppione"}, headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["detail"] == {"message": "Email già in uso", "code": "EMAIL_IN_USE"}


def test_list_teachers_paginated(client, admin_headers, make_user):
    for i in range(3):
        make_user(f"d{i}@liceo.it", name=f"Docente {i}")

    response = client.get("/api/teachers?page=2&limit=2", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert (body["total"], body["page"], body["limit"], body["totalPages"]) == (3, 2, 2, 2)
    assert len(body["teachers"]) == 1


def test_list_teachers_rejects_bad_filters(client, admin_headers):
    response = client.get("/api/teachers?limit=500", headers=admin_headers)
    assert response.status_code == 422
    assert "limit" in response.json()["detail"]["errors"]


def test_stats(client, admin_headers, teacher_user):
    response = client.get("/api/teachers/stats", headers=admin_headers)
    assert response.json() == {"total": 1, "active": 1, "inactive": 0, "suspended": 0, "invited": 0}


def test_get_unknown_teacher(client, admin_headers):
    response = client.get("/api/teachers/missing", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Docente non trovato"


def test_patch_updates_only_given_fields(client, admin_headers, teacher_user):
    response = client.patch(f"/api/teachers/{teacher_user.id}", json={"bio": "Matematica e fisica"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["bio"] == "Matematica e fisica"
    assert response.json()["name"] == "Mario Rossi"


def test_delete_soft_then_hard(client, admin_headers, teacher_user, db_session):
    teacher_id = teacher_user.id
    soft = client.delete(f"/api/teachers/{teacher_id}", headers=admin_headers)
    assert soft.status_code == 204
    db_session.expire_all()
    assert db_session.get(User, teacher_id).status == "inactive"

    hard = client.delete(f"/api/teachers/{teacher_id}?hard=true", headers=admin_headers)
    assert hard.status_code == 204
    db_session.expire_all()
    assert db_session.get(User, teacher_id) is None


def test_hard_delete_with_works_conflicts(client, admin_headers, teacher_user, make_work):
    make_work(teacher_user)
    response = client.delete(f"/api/teachers/{teacher_user.id}?hard=true", headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "HAS_WORKS"


def test_invitation_not_delivered_suggests_link(client, admin_headers, teacher_user):
    response = client.post(f"/api/teachers/{teacher_user.id}/invitation", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"].startswith("Email non inviata")


def test_invite_link(client, admin_headers, teacher_user):
    response = client.post(f"/api/teachers/{teacher_user.id}/invite-link", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["link_type"] == "magiclink"
    assert response.json()["link"].startswith("http://testserver/auth/callback?token=")


def test_export_csv(client, admin_headers, teacher_user):
    response = client.get("/api/teachers/export", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "docenti.csv" in response.headers["content-disposition"]
    lines = response.text.strip().splitlines()
    assert lines[0] == "Nome,Email,Stato,Creato il,Ultimo accesso"
    assert lines[1].startswith("Mario Rossi,docente@liceo.it,active,")


# --- Reviews API ---

def test_review_queue_and_reject_flow(client, admin_headers, teacher_user, make_work):
    work = make_work(teacher_user)

    queue = client.get("/api/reviews/queue", headers=admin_headers).json()
    assert queue["total"] == 1
    assert queue["works"][0]["teacher_email"] == "docente@liceo.it"

    too_short = client.post(f"/api/reviews/{work.id}/reject", json={"comments": "No"}, headers=admin_headers)
    assert too_short.status_code == 422
    assert "comments" in too_short.json()["detail"]["errors"]

    rejected = client.post(
        f"/api/reviews/{work.id}/reject",
        json={"comments": "Manca la bibliografia finale."},
        headers=admin_headers,
    )
    assert rejected.status_code == 200
    assert rejected.json()["work"]["status"] == "needs_revision"

    history = client.get(f"/api/reviews/{work.id}/history", headers=admin_headers).json()
    assert [entry["action"] for entry in history] == ["rejected"]


def test_approve_without_body(client, admin_headers, teacher_user, make_work):
    work = make_work(teacher_user)
    response = client.post(f"/api/reviews/{work.id}/approve", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Lavoro approvato con successo"


# --- Auth API ---

def test_login_sets_session_cookie(client, teacher_user):
    response = client.post("/api/auth/login", json={"email": "docente@liceo.it", "password": "password123"})

    assert response.status_code == 200
    assert response.json()["role"] == "docente"
    assert "session" in response.cookies

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["profile"]["email"] == "docente@liceo.it"


def test_login_bad_credentials(client, teacher_user):
    response = client.post("/api/auth/login", json={"email": "docente@liceo.it", "password": "sbagliata"})
    assert response.status_code == 401


def test_me_without_session(client):
    assert client.get("/api/auth/me").status_code == 401
