"""
Account lifecycle: signup, login, logout, password change, profile edit
and self-service deletion.
"""

import logging

from sqlalchemy.exc import IntegrityError

from portal_backend.auth.passwords import burn_verification, hash_password, verify_password
from portal_backend.auth.sessions import SessionManager, SessionSnapshot
from portal_backend.core.exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    NotFound,
    Unauthenticated,
    ValidationError,
)
from portal_backend.database import store_operation
from portal_backend.models.user import User
from portal_backend.repositories.users import UserStore


logger = logging.getLogger(__name__)

INCORRECT_PASSWORD = "Incorrect password"


def clean(value: str | None) -> str:
    return (value or "").strip()


def public_user(user: User) -> dict:
    return {
        "id": user.public_id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


class AccountService:
    def __init__(self, users: UserStore, sessions: SessionManager):
        self.users = users
        self.sessions = sessions

    def signup(self, name: str | None, email: str | None, password: str | None) -> None:
        name, email = clean(name), clean(email)
        if not name or not email or not password:
            raise ValidationError("All fields are required")

        password_hash = hash_password(password)
        with store_operation(self.users, "creating account"):
            try:
                user = self.users.create(name=name, email=email, password_hash=password_hash)
            except IntegrityError as exc:
                self.users.rollback()
                raise DuplicateEmail() from exc
        logger.info("Account %s created", user.public_id)

    def login(
        self,
        email: str | None,
        password: str | None,
        current_token: str | None = None,
    ) -> tuple[str, SessionSnapshot]:
        email = clean(email)
        if not email or not password:
            raise ValidationError("Email and password are required")

        with store_operation(self.users, "looking up account"):
            user = self.users.get_by_email(email)

        if user is None:
            burn_verification(password)
            logger.info("Failed login attempt")
            raise InvalidCredentials()
        snapshot = SessionSnapshot.from_user(user)
        if not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise InvalidCredentials()

        self.sessions.destroy_session(current_token)
        self.sessions.purge_expired()
        # the row may have been deleted while the password was being checked
        with store_operation(self.users, "opening session"):
            token = self.sessions.create_session_if(
                snapshot, lambda: self.users.still_exists(snapshot.id)
            )
        if token is None:
            logger.info("Failed login attempt")
            raise InvalidCredentials()
        return token, snapshot

    def logout(self, token: str | None) -> None:
        self.sessions.destroy_session(token)

    def get_session_status(self, session: SessionSnapshot | None) -> dict:
        if session is None:
            return {"loggedIn": False}
        return {"loggedIn": True, "user": session.public_view()}

    def _load_current_user(self, session: SessionSnapshot | None) -> User:
        if session is None:
            raise Unauthenticated()
        with store_operation(self.users, "loading account"):
            user = self.users.get_by_id(session.id)
        if user is None:
            self.sessions.destroy_user_sessions(session.id)
            raise NotFound("Account not found")
        return user

    def get_account(self, session: SessionSnapshot | None) -> dict:
        return public_user(self._load_current_user(session))

    def update_profile(self, session: SessionSnapshot | None, name: str | None, email: str | None) -> dict:
        if session is None:
            raise Unauthenticated()
        name, email = clean(name), clean(email)
        if not name or not email:
            raise ValidationError("Name and email are required")

        user = self._load_current_user(session)
        user.name = name
        user.email = email
        with store_operation(self.users, "updating profile"):
            try:
                user = self.users.save(user)
            except IntegrityError as exc:
                self.users.rollback()
                raise DuplicateEmail() from exc

        self.sessions.update_user_sessions(SessionSnapshot.from_user(user))
        return public_user(user)

    def change_password(
        self,
        session: SessionSnapshot | None,
        old_password: str | None,
        new_password: str | None,
        confirm_password: str | None,
    ) -> None:
        if session is None:
            raise Unauthenticated()
        if not old_password or not new_password or not confirm_password:
            raise ValidationError("All fields are required")
        if new_password != confirm_password:
            raise ValidationError("New passwords do not match")

        user = self._load_current_user(session)
        if not verify_password(old_password, user.password_hash):
            raise InvalidCredentials(INCORRECT_PASSWORD)

        user.password_hash = hash_password(new_password)
        with store_operation(self.users, "changing password"):
            self.users.save(user)
        logger.info("Password changed for user %s", user.public_id)

    def delete_account(self, session: SessionSnapshot | None, password: str | None) -> None:
        if session is None:
            raise Unauthenticated()
        if not password:
            raise ValidationError("Password is required")

        user = self._load_current_user(session)
        if not verify_password(password, user.password_hash):
            raise InvalidCredentials(INCORRECT_PASSWORD)

        public_id = user.public_id
        with store_operation(self.users, "deleting account"):
            with self.sessions.revoking_user(user.id):
                self.users.delete(user)
        logger.info("Account %s deleted by its owner", public_id)
