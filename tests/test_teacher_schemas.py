# /tests/test_teacher_schemas.py

import pytest

from quadriparlanti.core.exceptions import FormValidationError
from quadriparlanti.models.auth_model import LoginInput, SetPasswordInput
from quadriparlanti.models.review_model import CreateReviewInput
from quadriparlanti.models.teacher_model import (
    CreateTeacherForm,
    CreateTeacherInput,
    TeacherFilters,
    UpdateTeacherForm,
    UpdateTeacherInput,
    UserStatus,
)
from quadriparlanti.models.validation import validate_form

WORK_ID = "0b7c7c1e-4a5f-4c39-9b0e-2f3a1d6e8c11"


def _errors(model_cls, data):
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(model_cls, data)
    return exc_info.value.field_errors


# --- Create dialog ---

def test_create_form_accepts_valid_input():
    form = validate_form(CreateTeacherForm, {"email": "mario.rossi@liceo.it", "name": "Mario Rossi", "sendInvitation": True})
    assert form.email == "mario.rossi@liceo.it"
    assert form.bio is None


def test_create_form_minimal_input_defaults_to_sending_invitation():
    form = validate_form(CreateTeacherForm, {"email": "a@b.com", "name": "Jo"})
    assert form.sendInvitation is True


def test_create_form_rejects_malformed_email():
    errors = _errors(CreateTeacherForm, {"email": "non-una-email", "name": "Mario Rossi"})
    assert errors == {"email": ["Email non valida"]}


def test_create_form_reports_only_the_missing_field():
    errors = _errors(CreateTeacherForm, {"email": "mario.rossi@liceo.it"})
    assert list(errors) == ["name"]
    assert errors["name"] == ["Nome deve avere almeno 2 caratteri"]


def test_create_form_collects_every_invalid_field():
    errors = _errors(CreateTeacherForm, {"email": "", "name": "M", "bio": "x" * 501})
    assert errors["email"] == ["Email richiesta"]
    assert errors["name"] == ["Nome deve avere almeno 2 caratteri"]
    assert errors["bio"] == ["Bio deve avere massimo 500 caratteri"]


def test_name_longer_than_100_characters_is_rejected():
    errors = _errors(CreateTeacherForm, {"email": "mario.rossi@liceo.it", "name": "M" * 101})
    assert errors == {"name": ["Nome deve avere massimo 100 caratteri"]}


# --- Create input ---

def test_password_is_required_without_invitation():
    errors = _errors(CreateTeacherInput, {"email": "mario.rossi@liceo.it", "name": "Mario Rossi", "sendInvitation": False})
    assert errors == {"password": ["Password richiesta quando non si invia un invito"]}


def test_short_password_is_rejected():
    errors = _errors(CreateTeacherInput, {
        "email": "mario.rossi@liceo.it", "name": "Mario Rossi", "sendInvitation": False, "password": "corta",
    })
    assert errors == {"password": ["Password deve avere almeno 8 caratteri"]}


def test_password_is_optional_with_invitation():
    data = validate_form(CreateTeacherInput, {"email": "mario.rossi@liceo.it", "name": "Mario Rossi"})
    assert data.sendInvitation is True
    assert data.password is None


# --- Edit dialog ---

def test_update_form_rejects_unknown_status():
    errors = _errors(UpdateTeacherForm, {"name": "Mario Rossi", "status": "banned"})
    assert errors == {"status": ["Stato non valido"]}


def test_update_form_does_not_allow_invited_status():
    errors = _errors(UpdateTeacherForm, {"name": "Mario Rossi", "status": "invited"})
    assert errors == {"status": ["Stato non valido"]}


def test_update_form_rejects_bad_image_url():
    errors = _errors(UpdateTeacherForm, {"name": "Mario Rossi", "status": "active", "profile_image_url": "not a url"})
    assert errors == {"profile_image_url": ["URL non valido"]}


def test_update_form_accepts_empty_image_url():
    form = validate_form(UpdateTeacherForm, {"name": "Mario Rossi", "status": "suspended", "profile_image_url": ""})
    assert form.status == UserStatus.SUSPENDED
    assert form.profile_image_url == ""


def test_update_input_tracks_only_supplied_fields():
    data = validate_form(UpdateTeacherInput, {"bio": "Insegno lettere."})
    assert data.model_dump(exclude_unset=True) == {"bio": "Insegno lettere."}


def test_update_input_rejects_unknown_role():
    errors = _errors(UpdateTeacherInput, {"role": "studente"})
    assert errors == {"role": ["Ruolo non valido"]}


# --- Filters ---

def test_filters_default_to_first_page_of_ten():
    filters = TeacherFilters()
    assert (filters.page, filters.limit, filters.search, filters.status) == (1, 10, None, None)


def test_filters_treat_blank_search_as_absent():
    assert validate_form(TeacherFilters, {"search": "   "}).search is None


@pytest.mark.parametrize("data", [{"page": "0"}, {"limit": "101"}, {"status": "deleted"}])
def test_filters_reject_out_of_range_values(data):
    errors = _errors(TeacherFilters, data)
    assert list(errors) == list(data)


# --- Auth and review inputs ---

def test_login_requires_both_fields():
    errors = _errors(LoginInput, {})
    assert errors == {"email": ["Email non valida"], "password": ["La password è obbligatoria"]}


def test_set_password_requires_matching_confirmation():
    errors = _errors(SetPasswordInput, {"newPassword": "password123", "confirmPassword": "password124"})
    assert errors == {"confirmPassword": ["Le password non corrispondono"]}


def test_rejection_needs_more_than_ten_characters_of_comments():
    errors = _errors(CreateReviewInput, {"work_id": WORK_ID, "action": "rejected", "comments": "  Da rifare  "})
    assert errors == {"comments": ["I commenti sono obbligatori per il rifiuto (minimo 10 caratteri)"]}


def test_rejection_with_exactly_ten_characters_is_rejected():
    errors = _errors(CreateReviewInput, {"work_id": WORK_ID, "action": "rejected", "comments": "0123456789"})
    assert "comments" in errors


def test_approval_comments_are_optional():
    review = validate_form(CreateReviewInput, {"work_id": WORK_ID, "action": "approved"})
    assert review.comments is None
