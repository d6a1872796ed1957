"""Admin management of user accounts."""

import logging

from sqlalchemy.exc import IntegrityError

from portal_backend.auth.passwords import hash_password
from portal_backend.auth.sessions import SessionManager, SessionSnapshot
from portal_backend.core.exceptions import DuplicateEmail, NotFound, ValidationError
from portal_backend.database import store_operation
from portal_backend.models.user import ROLE_USER, ROLES, User
from portal_backend.repositories.users import UserStore
from portal_backend.services.accounts import clean, public_user


logger = logging.getLogger(__name__)


def _validate_role(role: str | None) -> str:
    role = clean(role) or ROLE_USER
    if role not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")
    return role


class UserAdminService:
    def __init__(self, users: UserStore, sessions: SessionManager):
        self.users = users
        self.sessions = sessions

    def _get(self, public_id: str) -> User:
        with store_operation(self.users, "loading user"):
            user = self.users.get_by_public_id(public_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def list_users(self) -> list[dict]:
        with store_operation(self.users, "listing users"):
            return [public_user(user) for user in self.users.list()]

    def create_user(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        role: str | None = None,
    ) -> str:
        name, email = clean(name), clean(email)
        if not name or not email or not password:
            raise ValidationError("All fields are required")
        role = _validate_role(role)

        password_hash = hash_password(password)
        with store_operation(self.users, "creating user"):
            try:
                user = self.users.create(name=name, email=email, password_hash=password_hash, role=role)
            except IntegrityError as exc:
                self.users.rollback()
                raise DuplicateEmail() from exc
        logger.info("Admin created user %s with role %s", user.public_id, role)
        return user.public_id

    def update_user(
        self,
        public_id: str,
        name: str | None,
        email: str | None,
        role: str | None,
    ) -> dict:
        name, email = clean(name), clean(email)
        if not name or not email:
            raise ValidationError("Name and email are required")
        role = _validate_role(role)

        user = self._get(public_id)
        user.name = name
        user.email = email
        user.role = role
        with store_operation(self.users, "updating user"):
            try:
                user = self.users.save(user)
            except IntegrityError as exc:
                self.users.rollback()
                raise DuplicateEmail() from exc

        self.sessions.update_user_sessions(SessionSnapshot.from_user(user))
        logger.info("Admin updated user %s", public_id)
        return public_user(user)

    def delete_user(self, public_id: str, acting_user_id: int) -> None:
        user = self._get(public_id)
        if user.id == acting_user_id:
            raise ValidationError("Use account deletion to remove your own account")

        with store_operation(self.users, "deleting user"):
            with self.sessions.revoking_user(user.id):
                self.users.delete(user)
        logger.info("Admin deleted user %s", public_id)
