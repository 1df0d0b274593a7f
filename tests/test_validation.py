# tests/test_validation.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from taskboard.models import TaskPriority, TaskStatus
from taskboard.validation import (
    validate_login,
    validate_registration,
    validate_task_fields,
)

NOW = datetime(2030, 5, 1, 12, 0, 0)


def fields_of(errors):
    return [e.field for e in errors]


def test_valid_task_is_cleaned():
    cleaned, errors = validate_task_fields(
        {"title": "  Buy milk  ", "priority": "high", "status": "in-progress"}, now=NOW
    )
    assert errors == []
    assert cleaned == {
        "title": "Buy milk",
        "priority": TaskPriority.HIGH,
        "status": TaskStatus.IN_PROGRESS,
    }


def test_title_required_on_create():
    _, errors = validate_task_fields({}, now=NOW)
    assert fields_of(errors) == ["title"]


def test_title_length_bounds():
    for title in ("ab", "x" * 101):
        _, errors = validate_task_fields({"title": title}, now=NOW)
        assert fields_of(errors) == ["title"]

    for title in ("abc", "x" * 100):
        _, errors = validate_task_fields({"title": title}, now=NOW)
        assert errors == []


def test_title_is_trimmed_before_length_check():
    _, errors = validate_task_fields({"title": "  ab  "}, now=NOW)
    assert fields_of(errors) == ["title"]


def test_description_limit():
    _, errors = validate_task_fields({"title": "Task", "description": "d" * 501}, now=NOW)
    assert fields_of(errors) == ["description"]

    cleaned, errors = validate_task_fields({"title": "Task", "description": "d" * 500}, now=NOW)
    assert errors == []
    assert len(cleaned["description"]) == 500


def test_enum_membership():
    _, errors = validate_task_fields(
        {"title": "Task", "status": "done", "priority": "urgent"}, now=NOW
    )
    assert fields_of(errors) == ["status", "priority"]


def test_all_violations_reported_together():
    _, errors = validate_task_fields(
        {"title": "x", "dueDate": (NOW - timedelta(days=1)).isoformat(), "priority": "nope"},
        now=NOW,
    )
    assert set(fields_of(errors)) == {"title", "dueDate", "priority"}


def test_due_date_boundary():
    _, errors = validate_task_fields({"title": "Task", "dueDate": NOW.isoformat()}, now=NOW)
    assert errors == []

    _, errors = validate_task_fields(
        {"title": "Task", "dueDate": (NOW - timedelta(seconds=1)).isoformat()}, now=NOW
    )
    assert fields_of(errors) == ["dueDate"]

    cleaned, errors = validate_task_fields(
        {"title": "Task", "dueDate": (NOW + timedelta(days=3)).isoformat()}, now=NOW
    )
    assert errors == []
    assert cleaned["due_date"] == NOW + timedelta(days=3)


def test_due_date_unparseable():
    _, errors = validate_task_fields({"title": "Task", "dueDate": "next tuesday"}, now=NOW)
    assert fields_of(errors) == ["dueDate"]
    assert errors[0].message == "Due date must be a valid date"


def test_partial_only_checks_supplied_fields():
    cleaned, errors = validate_task_fields({"status": "completed"}, partial=True, now=NOW)
    assert errors == []
    assert cleaned == {"status": TaskStatus.COMPLETED}


def test_partial_can_clear_optional_fields():
    cleaned, errors = validate_task_fields(
        {"description": None, "dueDate": None}, partial=True, now=NOW
    )
    assert errors == []
    assert cleaned == {"description": None, "due_date": None}


def test_owner_never_in_cleaned_output():
    cleaned, _ = validate_task_fields({"title": "Task", "owner": 99, "user": 99}, now=NOW)
    assert "owner" not in cleaned
    assert "owner_id" not in cleaned


def test_due_date_formats_are_normalized_to_utc():
    cases = {
        "2030-05-02": datetime(2030, 5, 2),
        "2030-05-02T10:00:00Z": datetime(2030, 5, 2, 10, 0, 0),
        "2030-05-02T12:00:00+02:00": datetime(2030, 5, 2, 10, 0, 0),
    }
    for raw, expected in cases.items():
        cleaned, errors = validate_task_fields({"title": "Task", "dueDate": raw}, now=NOW)
        assert errors == []
        assert cleaned["due_date"] == expected


@pytest.mark.parametrize("raw", ["9999-12-31T23:59:59-05:00", "0001-01-01T00:00:00+01:00"])
def test_due_date_outside_calendar_in_utc_is_invalid(raw):
    _, errors = validate_task_fields({"title": "Task", "dueDate": raw}, now=NOW)
    assert fields_of(errors) == ["dueDate"]
    assert errors[0].message == "Due date must be a valid date"


def test_registration_rejects_password_over_bcrypt_limit():
    _, errors = validate_registration(
        {"username": "carol", "email": "carol@example.com", "password": "x" * 73}
    )
    assert fields_of(errors) == ["password"]
    assert errors[0].message == "Password is too long"


def test_registration_collects_every_error():
    _, errors = validate_registration({"username": "a", "email": "not-an-email", "password": "123"})
    assert fields_of(errors) == ["username", "email", "password"]


def test_registration_normalizes_email():
    cleaned, errors = validate_registration(
        {"username": "carol", "email": "Carol@Example.COM", "password": "secret123"}
    )
    assert errors == []
    assert cleaned["email"] == "carol@example.com"


def test_login_requires_both_fields():
    _, errors = validate_login({})
    assert fields_of(errors) == ["email", "password"]
