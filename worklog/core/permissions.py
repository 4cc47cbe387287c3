"""
Role and ownership checks applied by route handlers before repository calls.

Rules, first match wins:

1. No caller: authentication error.
2. Role changes and deletion on one's own account: always forbidden.
3. Self-service: a caller may view and update their own profile and manage
   their own work records.
4. ADMIN may do anything; MANAGER may manage other users but has no rights on
   their work records.
5. Everything else is forbidden.
"""

from enum import Enum
from typing import Optional

from worklog.core.errors import AuthenticationError, ErrorCode, PermissionDeniedError
from worklog.core.logging import get_logger
from worklog.models.role import Role
from worklog.models.user import User

logger = get_logger(__name__)


class Action(str, Enum):
    """Operations subject to authorization."""

    USER_ADD = "user:add"
    USER_LIST = "user:list"
    USER_VIEW = "user:view"
    USER_UPDATE = "user:update"
    USER_CHANGE_ROLE = "user:change_role"
    USER_DELETE = "user:delete"
    RECORD_ADD = "record:add"
    RECORD_LIST = "record:list"
    RECORD_VIEW = "record:view"
    RECORD_UPDATE = "record:update"
    RECORD_DELETE = "record:delete"


_FORBIDDEN_ON_SELF = frozenset({Action.USER_CHANGE_ROLE, Action.USER_DELETE})

_SELF_SERVICE = frozenset(
    {
        Action.USER_VIEW,
        Action.USER_UPDATE,
        Action.RECORD_ADD,
        Action.RECORD_LIST,
        Action.RECORD_VIEW,
        Action.RECORD_UPDATE,
        Action.RECORD_DELETE,
    }
)

_USER_MANAGEMENT = frozenset(
    {
        Action.USER_ADD,
        Action.USER_LIST,
        Action.USER_VIEW,
        Action.USER_UPDATE,
        Action.USER_CHANGE_ROLE,
        Action.USER_DELETE,
    }
)

_ROLE_GRANTS: dict[Role, frozenset[Action]] = {
    Role.ADMIN: frozenset(Action),
    Role.MANAGER: _USER_MANAGEMENT,
    Role.USER: frozenset(),
}


def is_allowed(caller: Optional[User], action: Action, owner_id: Optional[int] = None) -> bool:
    """
    Decide whether ``caller`` may perform ``action``.

    Args:
        caller: The authenticated user
        action: What the caller wants to do
        owner_id: The user the target resource belongs to (the user itself for
            profile actions, the record owner for work records); None for
            collection-wide actions

    Raises:
        AuthenticationError: If there is no caller
    """
    if caller is None or caller.id is None:
        raise AuthenticationError(ErrorCode.AUTH_ERROR, "Not authenticated")

    is_self = owner_id is not None and owner_id == caller.id

    if is_self and action in _FORBIDDEN_ON_SELF:
        return False
    if is_self and action in _SELF_SERVICE:
        return True
    return action in _ROLE_GRANTS[caller.role]


def authorize(caller: Optional[User], action: Action, owner_id: Optional[int] = None) -> None:
    """
    Raise unless ``caller`` may perform ``action``.

    Raises:
        AuthenticationError: If there is no caller
        PermissionDeniedError: If the rules forbid the action
    """
    if not is_allowed(caller, action, owner_id):
        logger.warning(f"User {caller.id} denied {action.value} on owner {owner_id}")  # type: ignore[union-attr]
        raise PermissionDeniedError(f"{action.value} not allowed")


def record_list_filter(caller: User, requested_user_id: Optional[int]) -> Optional[int]:
    """
    The user filter to apply when ``caller`` lists work records.

    Callers who may not list everybody's records only ever see their own.
    """
    if is_allowed(caller, Action.RECORD_LIST, requested_user_id):
        return requested_user_id
    return caller.id
