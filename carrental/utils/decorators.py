from functools import wraps

from flask import current_app, g, request

from carrental.exceptions import InvalidTokenError, UnauthenticatedError
from carrental.services.policy import authorize
from carrental.utils.security import verify_token


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    if not header:
        raise UnauthenticatedError("Error: no authorization header provided")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthenticatedError("Error: authorization header must be 'Bearer <token>'")
    return token.strip()


def login_required(fn):
    """Resolve the bearer token to a user record and expose it as g.current_user."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        ext = current_app.extensions["carrental"]
        user_id = verify_token(_bearer_token(), ext.settings.secret_key, ext.settings.token_max_age)
        user = ext.store.get_user(user_id)
        if not user:
            raise InvalidTokenError("Error: user not found or token invalid")
        user.pop("password", None)
        g.current_user = user
        return fn(*args, **kwargs)

    return wrapper


def permission_required(action):
    """Check the policy for `action` before the handler reads the request body."""

    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            authorize(g.get("current_user"), action)
            return fn(*args, **kwargs)

        return wrapper

    return deco
