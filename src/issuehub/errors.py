"""Error taxonomy shared by the auth core, validation, and services.

Learn: Every failure the core can produce is one of these classes.
Each carries the HTTP status the transport maps it to and a short,
human-readable message. Services raise them; main.py installs one
exception handler that renders them as {"detail": message}.

    MissingCredential / MalformedCredential / InvalidCredential → 401
    Forbidden   → 403 (authenticated but not permitted)
    NotFound    → 404 (absent, or outside the caller's visible set)
    BadRequest  → 400 (structure, format, cross-reference failures)
    InternalError → 500 (storage or signing failure; never leaks detail)
"""


class IssueHubError(Exception):
    """Base class for all client-visible failures."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthFailure(IssueHubError):
    """Any failure of the identity extractor. Always maps to 401."""

    status_code = 401
    default_message = "Unauthorized"


class MissingCredential(AuthFailure):
    default_message = "Missing Authorization header"


class MalformedCredential(AuthFailure):
    default_message = "Invalid Authorization header"


class InvalidCredential(AuthFailure):
    default_message = "Invalid token"


class Forbidden(IssueHubError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(IssueHubError):
    status_code = 404
    default_message = "Not found"


class BadRequest(IssueHubError):
    status_code = 400
    default_message = "Bad request"


class InternalError(IssueHubError):
    status_code = 500
    default_message = "Internal server error"
