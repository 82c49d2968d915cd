"""Resource authorization rules.

Learn: One table, one function. Every route names the Action it is
about to perform and hands over the caller's OrgAccess (from the
membership oracle); authorize() either returns or raises Forbidden.

    CREATE_ORGANIZATION                  any authenticated user
    ADD_MEMBER, DELETE_ORGANIZATION      owner only
    everything else                      member of the organization

Existence checks (NotFound) happen before authorize() is called; see
the service layer for which flows disclose existence and which filter
by membership instead.
"""

import enum
import uuid
from typing import Optional

from issuehub.auth.membership import OrgAccess
from issuehub.errors import BadRequest, Forbidden


class Action(str, enum.Enum):
    CREATE_ORGANIZATION = "organization.create"
    ADD_MEMBER = "organization.add_member"
    READ_ORGANIZATION = "organization.read"
    LIST_MEMBERS = "organization.list_members"
    DELETE_ORGANIZATION = "organization.delete"
    CREATE_ISSUE = "issue.create"
    UPDATE_ISSUE = "issue.update"
    DELETE_ISSUE = "issue.delete"
    READ_ISSUE = "issue.read"
    LIST_ISSUES = "issue.list"
    SEARCH_ISSUES = "issue.search"


OWNER_ONLY: dict[Action, str] = {
    Action.ADD_MEMBER: "Only the owner can add members",
    Action.DELETE_ORGANIZATION: "Only the owner can delete the organization",
}

NOT_A_MEMBER = "Not a member of this organization"


def authorize(action: Action, access: Optional[OrgAccess] = None) -> None:
    """Raise Forbidden unless the caller may perform `action`."""
    if action is Action.CREATE_ORGANIZATION:
        return

    if access is None:
        raise Forbidden(NOT_A_MEMBER)

    if action in OWNER_ONLY:
        if not access.is_owner:
            raise Forbidden(OWNER_ONLY[action])
        return

    if not access.is_member:
        raise Forbidden(NOT_A_MEMBER)


def check_assignee(access: OrgAccess, assignee_id: Optional[uuid.UUID]) -> None:
    """An assignee, if given, must be in the organization's member set."""
    if assignee_id is not None and not access.has_member(assignee_id):
        raise BadRequest("assignee_id must be a member of the organization")
