"""Validation pipeline tests — statuses, ids, keys, emails, passwords."""

import uuid

import pytest

from issuehub.errors import BadRequest
from issuehub.validation import (
    CANONICAL_STATUSES,
    normalize_email,
    normalize_org_key,
    normalize_status,
    parse_id,
    parse_optional_id,
    require_text,
    validate_password,
)


# ═══════════════════════════════════════════════════════════
# Status
# ═══════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    "given, expected",
    [
        ("todo", "todo"),
        ("in_progress", "in_progress"),
        ("in_review", "in_review"),
        ("backlog", "in_review"),
        ("done", "done"),
        ("  done  ", "done"),
    ],
)
def test_status_normalization(given, expected):
    assert normalize_status(given) == expected
    assert normalize_status(given) in CANONICAL_STATUSES


@pytest.mark.parametrize("bad", ["", None, "DONE", "closed", "in progress", "Backlog"])
def test_unknown_status_rejected(bad):
    with pytest.raises(BadRequest, match="Invalid status"):
        normalize_status(bad)


def test_backlog_never_canonical():
    assert "backlog" not in CANONICAL_STATUSES


# ═══════════════════════════════════════════════════════════
# Text, email, password
# ═══════════════════════════════════════════════════════════


def test_require_text_trims():
    assert require_text("  hello ", "title") == "hello"


def test_require_text_blank():
    with pytest.raises(BadRequest, match="title is required"):
        require_text("   ", "title")


def test_require_text_max_length():
    assert require_text(" " + "t" * 500 + " ", "title", 500) == "t" * 500
    with pytest.raises(BadRequest, match="title must be at most 500 characters"):
        require_text("t" * 501, "title", 500)


def test_email_too_long():
    with pytest.raises(BadRequest, match="Invalid email"):
        normalize_email("a" * 250 + "@example.com")


def test_email_lowercased_and_trimmed():
    assert normalize_email("  Bob@Example.COM ") == "bob@example.com"


@pytest.mark.parametrize("bad", ["", "no-at-sign", None])
def test_invalid_email(bad):
    with pytest.raises(BadRequest, match="Invalid email"):
        normalize_email(bad)


def test_short_password():
    with pytest.raises(BadRequest, match="at least 8"):
        validate_password("short")


def test_password_kept_verbatim():
    assert validate_password(" spaced out ") == " spaced out "


# ═══════════════════════════════════════════════════════════
# Organization keys
# ═══════════════════════════════════════════════════════════


def test_key_uppercased():
    assert normalize_org_key("acme") == "ACME"


def test_key_length_checked_after_uppercasing():
    key = normalize_org_key("straße")
    assert key == "STRASSE"
    assert len(key) <= 8


# "ß" upper-cases to "SS": eight of them become sixteen characters
@pytest.mark.parametrize("bad", ["A", "TOOLONGKEY", "", "ßßßßßßßß"])
def test_key_length(bad):
    with pytest.raises(BadRequest):
        normalize_org_key(bad)


# ═══════════════════════════════════════════════════════════
# Identifiers
# ═══════════════════════════════════════════════════════════


def test_parse_id():
    value = uuid.uuid4()
    assert parse_id(str(value)) == value


def test_parse_id_bad_shape():
    with pytest.raises(BadRequest, match="Invalid organization_id"):
        parse_id("not-a-uuid", "organization_id")


def test_parse_id_missing():
    with pytest.raises(BadRequest, match="organization_id is required"):
        parse_id(None, "organization_id")


@pytest.mark.parametrize("absent", [None, "", "  "])
def test_optional_id_absent(absent):
    assert parse_optional_id(absent, "parent_issue_id") is None


def test_optional_id_bad_shape_not_ignored():
    with pytest.raises(BadRequest, match="Invalid parent_issue_id"):
        parse_optional_id("xyz", "parent_issue_id")
