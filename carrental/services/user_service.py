from __future__ import annotations

import logging

from pymongo.errors import DuplicateKeyError

from carrental.exceptions import (
    EmailAlreadyRegisteredError,
    UnauthenticatedError,
    UserNotFoundError,
    ValidationError,
)
from carrental.models.schemas import UserCreate, UserUpdate, validate
from carrental.services.common import normalize_email, strip_password
from carrental.services.policy import Action, authorize, is_allowed
from carrental.utils.constants import Role
from carrental.utils.security import check_hash, generate_hash, issue_token

logger = logging.getLogger(__name__)


class UserService:
    """Registration, login and profile operations. Responses never carry a password."""

    def __init__(self, store, settings):
        self.store = store
        self.settings = settings

    def register(self, payload: dict) -> dict:
        """
        Create a CUSTOMER account.
        Any caller-supplied role is ignored, so registration can never create an admin.
        """
        if not isinstance(payload, dict):
            raise ValidationError("Error: request body must be a JSON object")

        email = normalize_email(payload.get("email"))
        if not email:
            raise ValidationError("Error: email is required")
        if self.store.email_exists(email):
            raise EmailAlreadyRegisteredError()
        if not payload.get("password"):
            raise ValidationError("Error: password cannot be empty")

        data = validate(UserCreate, {**payload, "email": email})
        doc = {
            **data,
            "password": generate_hash(data["password"]),
            "role": Role.CUSTOMER,
        }
        try:
            uid = self.store.create_user(doc)
        except DuplicateKeyError:
            raise EmailAlreadyRegisteredError()

        logger.info("Registered user %s <%s>", uid, email)
        return strip_password({**doc, "_id": uid})

    def login(self, email, password) -> dict:
        user = self.store.find_user_by_email(normalize_email(email))
        if not user or not check_hash(password or "", user.get("password") or ""):
            logger.info("Failed login for %r", email)
            raise UnauthenticatedError("Error: invalid credentials")

        token = issue_token(user["_id"], self.settings.secret_key)
        return {
            "message": "login successful",
            "token": token,
            "user": strip_password(user),
        }

    def list_users(self) -> list:
        return [strip_password(u) for u in self.store.list_users()]

    def get_user(self, caller: dict, user_id: str) -> dict:
        user = self.store.get_user(user_id)
        if not user:
            raise UserNotFoundError()
        authorize(caller, Action.USER_READ, user)
        return strip_password(user)

    def update_user(self, caller: dict, user_id: str, patch: dict) -> dict:
        """
        Partial profile update.
        `role` is silently dropped unless the caller may change roles;
        a new password is hashed before it is stored.
        """
        user = self.store.get_user(user_id)
        if not user:
            raise UserNotFoundError()
        authorize(caller, Action.USER_UPDATE, user)

        if not isinstance(patch, dict):
            raise ValidationError("Error: request body must be a JSON object")
        patch = dict(patch)
        if "role" in patch and not is_allowed(caller, Action.USER_SET_ROLE):
            patch.pop("role")

        updates = validate(UserUpdate, patch, partial=True)
        if not updates:
            return strip_password(user)

        new_email = updates.get("email")
        if new_email and new_email != user.get("email") and self.store.email_exists(new_email):
            raise EmailAlreadyRegisteredError()
        if "password" in updates:
            updates["password"] = generate_hash(updates["password"])

        try:
            updated = self.store.update_user(user_id, updates)
        except DuplicateKeyError:
            raise EmailAlreadyRegisteredError()
        if not updated:
            raise UserNotFoundError()

        if "role" in updates:
            logger.info("User %s role set to %s by %s", user_id, updates["role"], caller.get("_id"))
        return strip_password(updated)

    def delete_user(self, user_id: str) -> None:
        if not self.store.delete_user(user_id):
            raise UserNotFoundError()
        logger.info("Deleted user %s", user_id)
