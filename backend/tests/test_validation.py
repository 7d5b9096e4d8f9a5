import pytest

from notetaker.errors import ValidationFailed
from notetaker.models.validation import (
    validate_note_create,
    validate_note_update,
    validate_registration,
)


def fields_of(exc_info):
    return [d["field"] for d in exc_info.value.details]


def test_note_create_trims_both_fields():
    data = validate_note_create({"title": "  hi ", "content": "\tthere\n"})
    assert data.title == "hi"
    assert data.content == "there"


def test_title_of_200_chars_is_accepted():
    assert len(validate_note_create({"title": "a" * 200, "content": "c"}).title) == 200


def test_title_of_201_chars_is_rejected():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_note_create({"title": "a" * 201, "content": "c"})
    assert fields_of(exc_info) == ["title"]


def test_whitespace_only_content_is_rejected():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_note_create({"title": "t", "content": "   \n\t "})
    assert fields_of(exc_info) == ["content"]
    assert exc_info.value.details[0]["message"] == "Content is required"


def test_content_limit():
    validate_note_create({"title": "t", "content": "c" * 50_000})
    with pytest.raises(ValidationFailed):
        validate_note_create({"title": "t", "content": "c" * 50_001})


def test_missing_fields_are_all_reported():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_note_create({})
    assert sorted(fields_of(exc_info)) == ["content", "title"]


def test_non_string_title_is_rejected():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_note_create({"title": 42, "content": "c"})
    assert fields_of(exc_info) == ["title"]


def test_non_object_payload_is_rejected():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_note_create(["title", "content"])
    assert fields_of(exc_info) == [""]


def test_update_keeps_only_sent_fields():
    assert validate_note_update({"title": " New "}).changes() == {"title": "New"}
    assert validate_note_update({"content": "x"}).changes() == {"content": "x"}
    assert validate_note_update({}).changes() == {}


def test_update_unknown_keys_are_ignored():
    assert validate_note_update({"title": "t", "owner_user_id": "evil"}).changes() == {"title": "t"}


@pytest.mark.parametrize("payload", [{"title": ""}, {"title": "   "}, {"content": ""}, {"title": None}])
def test_update_present_but_empty_is_a_violation(payload):
    with pytest.raises(ValidationFailed) as exc_info:
        validate_note_update(payload)
    assert fields_of(exc_info) == list(payload)


def test_registration_accepts_valid_input():
    data = validate_registration({"email": "ann@example.com", "password": "Secret123", "name": ""})
    assert str(data.email) == "ann@example.com"
    assert data.name == ""


SHORT = "Password must be at least 8 characters"
LONG = "Password must be less than 100 characters"
WEAK = "Password must contain at least one uppercase letter, one lowercase letter, and one number"


@pytest.mark.parametrize("password, messages", [
    ("alllowercase1", [WEAK]),
    ("ALLUPPERCASE1", [WEAK]),
    ("NoDigitsHere", [WEAK]),
    ("Aa1", [SHORT]),
    ("A1" + "a" * 99, [LONG]),
    ("abc", [SHORT, WEAK]),
    ("", [SHORT, WEAK]),
    ("a" * 101, [LONG, WEAK]),
])
def test_registration_reports_each_broken_password_rule(password, messages):
    with pytest.raises(ValidationFailed) as exc_info:
        validate_registration({"email": "ann@example.com", "password": password})
    assert exc_info.value.details == [{"field": "password", "message": m} for m in messages]


def test_registration_rejects_bad_email():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_registration({"email": "not-an-email", "password": "Secret123"})
    assert fields_of(exc_info) == ["email"]
    assert exc_info.value.details[0]["message"] == "Invalid email format"


def test_registration_rejects_overlong_email():
    email = "a" * 250 + "@example.com"
    with pytest.raises(ValidationFailed) as exc_info:
        validate_registration({"email": email, "password": "Secret123"})
    assert fields_of(exc_info) == ["email", "email"]
    assert {"field": "email", "message": "Email must be less than 255 characters"} in exc_info.value.details


def test_registration_empty_email_is_both_missing_and_malformed():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_registration({"email": "", "password": "Secret123"})
    assert exc_info.value.details == [
        {"field": "email", "message": "Email is required"},
        {"field": "email", "message": "Invalid email format"},
    ]


def test_registration_collects_every_field():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_registration({"name": "n" * 101})
    assert sorted(fields_of(exc_info)) == ["email", "name", "password"]


def test_registration_rule_violations_across_fields_come_in_field_order():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_registration({"email": "nope", "password": "abc", "name": "n" * 101})
    assert fields_of(exc_info) == ["email", "password", "password", "name"]


def test_registration_missing_password_is_reported_once():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_registration({"email": "ann@example.com"})
    assert exc_info.value.details == [{"field": "password", "message": "Password is required"}]


def test_registration_non_object_payload_is_rejected():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_registration("ann@example.com")
    assert fields_of(exc_info) == [""]
