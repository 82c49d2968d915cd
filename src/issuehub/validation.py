"""Input normalization and validation.

Learn: Request schemas are deliberately loose (plain strings, optional
ids) so that every structural rule lives here and fails with the same
BadRequest → 400, instead of some rules surfacing as pydantic 422s.
Services call these helpers after authorization and before touching
cross-references:

    authenticate → authorize → validate structure/format
                 → validate cross-references → mutate

Status values go through one table. "backlog" is a legacy alias kept
for old clients and always stored as "in_review"; changing this table
breaks stored data and clients, so treat it as a public contract.
"""

import uuid
from typing import Optional

from issuehub.errors import BadRequest

STATUS_ALIASES: dict[str, str] = {
    "todo": "todo",
    "in_progress": "in_progress",
    "in_review": "in_review",
    # legacy alias
    "backlog": "in_review",
    "done": "done",
}

CANONICAL_STATUSES = frozenset(STATUS_ALIASES.values())

MIN_PASSWORD_LENGTH = 8
ORG_KEY_MIN_LENGTH = 2
ORG_KEY_MAX_LENGTH = 8

# Match the column widths in db/models.py
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
TITLE_MAX_LENGTH = 500


def normalize_status(value: Optional[str]) -> str:
    """Map a client status (canonical or legacy) to its canonical value."""
    status = STATUS_ALIASES.get((value or "").strip())
    if status is None:
        raise BadRequest("Invalid status")
    return status


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def require_text(
    value: Optional[str], field: str, max_length: Optional[int] = None
) -> str:
    """Return the trimmed value, or fail if nothing is left (or too much)."""
    if is_blank(value):
        raise BadRequest(f"{field} is required")
    text = value.strip()
    if max_length is not None and len(text) > max_length:
        raise BadRequest(f"{field} must be at most {max_length} characters")
    return text


def normalize_email(value: Optional[str]) -> str:
    email = (value or "").strip().lower()
    if not email or "@" not in email or len(email) > EMAIL_MAX_LENGTH:
        raise BadRequest("Invalid email")
    return email


def validate_password(value: Optional[str]) -> str:
    """Signup-only password rule. Returned untrimmed: spaces are significant."""
    if is_blank(value):
        raise BadRequest("password is required")
    if len(value) < MIN_PASSWORD_LENGTH:
        raise BadRequest(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    return value


def normalize_org_key(value: Optional[str]) -> str:
    key = require_text(value, "key").upper()
    if not ORG_KEY_MIN_LENGTH <= len(key) <= ORG_KEY_MAX_LENGTH:
        raise BadRequest(
            f"key must be {ORG_KEY_MIN_LENGTH}-{ORG_KEY_MAX_LENGTH} characters"
        )
    return key


def parse_id(value: Optional[str], field: str = "id") -> uuid.UUID:
    """Parse a client-supplied resource id. Bad shape is never ignored."""
    if isinstance(value, uuid.UUID):
        return value
    if is_blank(value):
        raise BadRequest(f"{field} is required")
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        raise BadRequest(f"Invalid {field}")


def parse_optional_id(value: Optional[str], field: str) -> Optional[uuid.UUID]:
    """Like parse_id, but None or blank means "not provided"."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_id(value, field)
