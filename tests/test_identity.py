"""Identity extractor tests — the Authorization header failure table."""

import uuid

import pytest

from issuehub.auth.dependencies import extract_user_id
from issuehub.auth.jwt import create_access_token
from issuehub.errors import (
    AuthFailure,
    InvalidCredential,
    MalformedCredential,
    MissingCredential,
)


def test_valid_bearer_header():
    user_id = uuid.uuid4()
    token = create_access_token(user_id)
    assert extract_user_id(f"Bearer {token}") == user_id


def test_scheme_is_case_insensitive():
    user_id = uuid.uuid4()
    token = create_access_token(user_id)
    assert extract_user_id(f"bearer {token}") == user_id


@pytest.mark.parametrize("header", [None, "", "   "])
def test_missing_header(header):
    with pytest.raises(MissingCredential):
        extract_user_id(header)


@pytest.mark.parametrize(
    "header",
    ["Bearer", "tokenonly", "Bearer  doublespace", "Bearer a b"],
)
def test_malformed_header(header):
    with pytest.raises(MalformedCredential):
        extract_user_id(header)


def test_wrong_scheme():
    token = create_access_token(uuid.uuid4())
    with pytest.raises(InvalidCredential, match="Expected Bearer"):
        extract_user_id(f"Basic {token}")


def test_bad_token():
    with pytest.raises(InvalidCredential):
        extract_user_id("Bearer not-a-token")


def test_expired_token():
    token = create_access_token(uuid.uuid4(), expires_hours=-1)
    with pytest.raises(InvalidCredential, match="expired"):
        extract_user_id(f"Bearer {token}")


def test_token_from_other_secret():
    token = create_access_token(uuid.uuid4(), secret="some-other-secret-some-other-secret")
    with pytest.raises(InvalidCredential):
        extract_user_id(f"Bearer {token}")


def test_every_failure_is_401():
    for exc in (MissingCredential(), MalformedCredential(), InvalidCredential()):
        assert isinstance(exc, AuthFailure)
        assert exc.status_code == 401
