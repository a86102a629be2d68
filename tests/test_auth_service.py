# /tests/test_auth_service.py

import pytest

from quadriparlanti.core import security
from quadriparlanti.core.exceptions import AuthenticationError
from quadriparlanti.db.models.user_model import AuthAccount, User
from quadriparlanti.models.auth_model import Identity, LoginInput, ResetPasswordInput, SetPasswordInput
from quadriparlanti.services import auth_service, notification_service


def _link_token(user, link_type):
    return security.create_link_token(subject=user.id, email=user.email, link_type=link_type)


# --- Login ---

def test_login_returns_role_and_session_token(backend, db_session, admin_user):
    result = auth_service.login(LoginInput(email="ADMIN@liceo.it", password="password123"), backend)

    assert result.role.value == "admin"
    assert security.decode_token(result.access_token)["sub"] == admin_user.id
    db_session.expire_all()
    assert db_session.get(User, admin_user.id).last_login_at is not None


def test_login_with_wrong_password(backend, teacher_user):
    with pytest.raises(AuthenticationError) as exc_info:
        auth_service.login(LoginInput(email="docente@liceo.it", password="sbagliata"), backend)
    assert exc_info.value.message == "Credenziali non valide. Verifica email e password."


def test_login_with_unknown_email(backend):
    with pytest.raises(AuthenticationError):
        auth_service.login(LoginInput(email="nessuno@liceo.it", password="password123"), backend)


@pytest.mark.parametrize("status", ["inactive", "suspended", "invited"])
def test_login_refused_for_non_active_accounts(backend, make_user, status):
    make_user("bloccato@liceo.it", status=status)
    with pytest.raises(AuthenticationError) as exc_info:
        auth_service.login(LoginInput(email="bloccato@liceo.it", password="password123"), backend)
    assert exc_info.value.message == auth_service.INACTIVE_ACCOUNT_MESSAGE


# --- Current user ---

def test_current_user_carries_the_profile(backend, teacher_identity):
    current = auth_service.get_current_user(teacher_identity, backend)
    assert current.email == "docente@liceo.it"
    assert current.profile.name == "Mario Rossi"


def test_current_user_without_identity(backend):
    assert auth_service.get_current_user(None, backend) is None


# --- Passwords ---

def test_password_reset_for_unknown_email_is_silent(backend, mocker):
    send_reset = mocker.patch.object(notification_service, "send_password_reset_email")
    result = auth_service.request_password_reset(ResetPasswordInput(email="ignoto@liceo.it"), backend)
    assert result.message == "Email di reset inviata. Controlla la tua casella di posta."
    send_reset.assert_not_called()


def test_update_password_activates_invited_teacher(backend, db_session, make_user):
    invited = make_user("invitato@liceo.it", status="invited", confirmed=False)
    data = SetPasswordInput(newPassword="nuovapass1", confirmPassword="nuovapass1")

    result = auth_service.update_password(
        Identity(id=invited.id, email=invited.email, role="docente", status="invited"), data, backend
    )

    assert result.message == "Password aggiornata con successo."
    db_session.expire_all()
    assert db_session.get(User, invited.id).status == "active"
    assert security.verify_password("nuovapass1", db_session.get(AuthAccount, invited.id).password_hash)


def test_update_password_keeps_other_statuses(backend, db_session, teacher_identity, teacher_user):
    data = SetPasswordInput(newPassword="nuovapass1", confirmPassword="nuovapass1")
    auth_service.update_password(teacher_identity, data, backend)
    db_session.expire_all()
    assert db_session.get(User, teacher_user.id).status == "active"


def test_update_password_without_identity(backend):
    data = SetPasswordInput(newPassword="nuovapass1", confirmPassword="nuovapass1")
    with pytest.raises(AuthenticationError) as exc_info:
        auth_service.update_password(None, data, backend)
    assert exc_info.value.message == "Non autenticato."


# --- Emailed links ---

def test_invite_link_leads_to_set_password_and_confirms_email(backend, db_session, make_user):
    invited = make_user("invitato@liceo.it", status="invited", confirmed=False)

    access_token, destination = auth_service.exchange_link(_link_token(invited, "invite"), "/it/set-password", backend)

    assert destination == "/it/set-password"
    assert security.decode_token(access_token)["sub"] == invited.id
    db_session.expire_all()
    assert db_session.get(AuthAccount, invited.id).email_confirmed_at is not None


def test_magic_link_honours_safe_next_path(backend, teacher_user):
    _, destination = auth_service.exchange_link(_link_token(teacher_user, "magiclink"), "/it/teacher?tab=works", backend)
    assert destination == "/it/teacher?tab=works"


def test_magic_link_ignores_external_next_path(backend, admin_user):
    _, destination = auth_service.exchange_link(_link_token(admin_user, "magiclink"), "//evil.example.com", backend)
    assert destination == "/it/admin"


def test_recovery_link_without_next_goes_to_reset_password(backend, teacher_user):
    _, destination = auth_service.exchange_link(_link_token(teacher_user, "recovery"), None, backend)
    assert destination == "/it/reset-password"


def test_link_for_suspended_teacher_is_refused(backend, make_user):
    suspended = make_user("sospeso@liceo.it", status="suspended")
    with pytest.raises(AuthenticationError):
        auth_service.exchange_link(_link_token(suspended, "magiclink"), None, backend)


def test_session_token_is_not_an_action_link(backend, teacher_user):
    token = security.create_access_token(subject=teacher_user.id, email=teacher_user.email, role="docente")
    with pytest.raises(AuthenticationError):
        auth_service.exchange_link(token, None, backend)
