"""
User management routes.
Every handler runs the permission check before touching the repository.
"""

from fastapi import APIRouter

from worklog.api.deps import CurrentUser, Users
from worklog.core.errors import ErrorCode, NotFoundError
from worklog.core.logging import get_logger
from worklog.core.permissions import Action, authorize
from worklog.models.role import Role
from worklog.models.user import User, UserPatch
from worklog.schemas.user import OperationResult, UserCreate, UserResponse, UserUpdate

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse)
def add_user(user_in: UserCreate, current_user: CurrentUser, users: Users) -> UserResponse:
    """Add a user with any role. Admins and managers only."""
    authorize(current_user, Action.USER_ADD)

    user = User()
    user.name = user_in.name
    user.email = user_in.email
    user.set_password(user_in.password)
    if user_in.working_hours:
        user.working_hours = user_in.working_hours
    user.role = user_in.role if user_in.role else Role.USER

    added = users.add(user)
    logger.info(f"User {added.id} added by {current_user.id}")
    return UserResponse.from_entity(added)


@router.get("", response_model=list[UserResponse])
def get_all_users(current_user: CurrentUser, users: Users) -> list[UserResponse]:
    """List every user. Admins and managers only."""
    authorize(current_user, Action.USER_LIST)
    return [UserResponse.from_entity(user) for user in users.get_all()]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, current_user: CurrentUser, users: Users) -> UserResponse:
    """Get a user's profile: one's own, or anybody's for admins and managers."""
    authorize(current_user, Action.USER_VIEW, owner_id=user_id)

    user = users.get(user_id)
    if user is None:
        raise NotFoundError(ErrorCode.USER_NOT_FOUND, f"User {user_id} not found")
    return UserResponse.from_entity(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_in: UserUpdate,
    current_user: CurrentUser,
    users: Users,
) -> UserResponse:
    """
    Change the fields present in the body.
    Nobody can change their own role.
    """
    authorize(current_user, Action.USER_UPDATE, owner_id=user_id)

    changes = user_in.model_dump(exclude_unset=True)
    if "role" in changes:
        authorize(current_user, Action.USER_CHANGE_ROLE, owner_id=user_id)

    patch = UserPatch.from_changes(changes)
    return UserResponse.from_entity(users.update(user_id, patch))


@router.delete("/{user_id}", response_model=OperationResult)
def delete_user(user_id: int, current_user: CurrentUser, users: Users) -> OperationResult:
    """Delete another user. Admins and managers only; never oneself."""
    authorize(current_user, Action.USER_DELETE, owner_id=user_id)

    users.delete(user_id)
    logger.info(f"User {user_id} deleted by {current_user.id}")
    return OperationResult()
