"""issuehub — multi-tenant issue tracking API.

Users sign up, create organizations, invite members by email, and
track hierarchical issues inside each organization. Every request is
authenticated with a bearer JWT and authorized against the caller's
organization membership.
"""

__version__ = "0.1.0"
