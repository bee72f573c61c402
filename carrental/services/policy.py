"""
Authorization policy.

Every role or ownership decision in the app goes through `authorize`, so
routes and services never compare roles themselves.
"""
from carrental.exceptions import ForbiddenError
from carrental.utils.constants import Role


class Action:
    CAR_CREATE = "car:create"
    CAR_UPDATE = "car:update"
    CAR_DELETE = "car:delete"
    RENTAL_CREATE = "rental:create"
    RENTAL_LIST = "rental:list"
    RENTAL_LIST_ALL = "rental:list_all"
    RENTAL_READ = "rental:read"
    RENTAL_SET_STATUS = "rental:set_status"
    RENTAL_DELETE = "rental:delete"
    USER_LIST = "user:list"
    USER_READ = "user:read"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"
    USER_SET_ROLE = "user:set_role"


ADMIN_ONLY = frozenset({
    Action.CAR_CREATE,
    Action.CAR_UPDATE,
    Action.CAR_DELETE,
    Action.RENTAL_LIST_ALL,
    Action.RENTAL_SET_STATUS,
    Action.RENTAL_DELETE,
    Action.USER_LIST,
    Action.USER_DELETE,
    Action.USER_SET_ROLE,
})

OWNER_OR_ADMIN = frozenset({
    Action.RENTAL_READ,
    Action.USER_READ,
    Action.USER_UPDATE,
})

ANY_AUTHENTICATED = frozenset({
    Action.RENTAL_CREATE,
    Action.RENTAL_LIST,
})


def is_admin(caller: dict | None) -> bool:
    return bool(caller) and caller.get("role") == Role.ADMIN


def _owner_id(resource: dict | None) -> str | None:
    """A rental is owned through `user_id`; a user record owns itself."""
    if not resource:
        return None
    owner = resource.get("user_id") or resource.get("_id")
    return str(owner) if owner is not None else None


def is_allowed(caller: dict | None, action: str, resource: dict | None = None) -> bool:
    if not caller:
        return False
    if is_admin(caller):
        return True
    if action in ADMIN_ONLY:
        return False
    if action in ANY_AUTHENTICATED:
        return True
    if action in OWNER_OR_ADMIN:
        owner = _owner_id(resource)
        return owner is not None and owner == str(caller.get("_id"))
    # Unknown actions are denied.
    return False


def authorize(caller: dict | None, action: str, resource: dict | None = None) -> None:
    """Raise ForbiddenError unless `caller` may perform `action` on `resource`."""
    if not is_allowed(caller, action, resource):
        raise ForbiddenError()
