# /tests/test_session_gate.py

from quadriparlanti.core import security


def test_password_page_without_session_redirects_to_invalid_token(client):
    response = client.get("/it/reset-password", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login?error=invalid_token"


def test_set_password_page_without_session_redirects_to_invalid_token(client):
    response = client.get("/it/set-password", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login?error=invalid_token"


def test_admin_page_without_session_redirects_to_login_with_return_path(client):
    response = client.get("/it/admin/teachers", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/it/login?redirect=%2Fit%2Fadmin%2Fteachers"


def test_teacher_on_admin_page_is_sent_to_teacher_dashboard(client, teacher_user, login_as):
    login_as(teacher_user)
    response = client.get("/it/admin/works/pending", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/it/teacher"


def test_suspended_admin_is_treated_as_non_admin(client, make_user, login_as):
    login_as(make_user("sospeso@liceo.it", role="admin", status="suspended"))
    response = client.get("/it/admin/teachers", follow_redirects=False)
    assert response.headers["location"] == "/it/teacher"


def test_admin_reaches_admin_pages(client, admin_user, login_as):
    login_as(admin_user)
    response = client.get("/it/admin/teachers")
    assert response.status_code == 200
    assert "Gestione docenti" in response.text


def test_teacher_reaches_own_dashboard(client, teacher_user, login_as):
    login_as(teacher_user)
    response = client.get("/it/teacher")
    assert response.status_code == 200
    assert "Ciao, Mario Rossi" in response.text


def test_tampered_session_cookie_counts_as_no_session(client, admin_user):
    token = security.create_access_token(subject=admin_user.id, email=admin_user.email, role="admin")
    client.cookies.set("session", token[:-4] + "abcd")
    response = client.get("/it/admin/teachers", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"].startswith("/it/login?redirect=")


def test_link_token_cannot_be_used_as_session(client, admin_user):
    token = security.create_link_token(subject=admin_user.id, email=admin_user.email, link_type="magiclink")
    response = client.get("/api/teachers", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


# --- API gate ---

def test_api_without_token_is_unauthorized(client):
    response = client.get("/api/teachers")
    assert response.status_code == 401
    assert response.json() == {"detail": "Non autenticato"}


def test_api_with_teacher_token_is_forbidden(client, teacher_user):
    token = security.create_access_token(subject=teacher_user.id, email=teacher_user.email, role="docente")
    response = client.get("/api/teachers/stats", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403
    assert response.json() == {"detail": "Permessi insufficienti"}


def test_api_accepts_bearer_token(client, admin_user):
    token = security.create_access_token(subject=admin_user.id, email=admin_user.email, role="admin")
    response = client.get("/api/teachers", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


# --- Locales ---

def test_unsupported_locale_is_not_found(client):
    response = client.get("/xx/login")
    assert response.status_code == 404


def test_login_without_locale_goes_to_default_locale(client):
    response = client.get("/login?error=invalid_token", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "/it/login?error=invalid_token"
