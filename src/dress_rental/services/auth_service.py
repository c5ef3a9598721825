"""Operator accounts, login sessions and the activity log."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from dress_rental.config import (
    DEFAULT_ADMIN_PASSWORD,
    DEFAULT_ADMIN_USERNAME,
    MIN_PASSWORD_LENGTH,
)
from dress_rental.domain.models import ActivityEntry, User, UserRole
from dress_rental.logging_config import get_logger
from dress_rental.repositories import ActivityRepo, UserRepo
from dress_rental.services.errors import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    ValidationError,
)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


@dataclass(frozen=True)
class Session:
    """The operator currently logged in."""

    user_id: int
    username: str
    role: UserRole
    full_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMINISTRATOR

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    def has_permission(self, required: UserRole) -> bool:
        if self.role == UserRole.ADMINISTRATOR:
            return True
        return self.role == required


class AuthService:
    """Login, password management and user administration."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._users = UserRepo(connection)
        self._activity = ActivityRepo(connection)
        self._logger = get_logger(self.__class__.__name__)

    def ensure_default_admin(self) -> Optional[User]:
        """Seed the first Administrator account on an empty database."""
        if self._users.count() > 0:
            return None
        user = self._users.create(
            DEFAULT_ADMIN_USERNAME,
            hash_password(DEFAULT_ADMIN_PASSWORD),
            UserRole.ADMINISTRATOR,
            "System Administrator",
            None,
            None,
        )
        self._logger.warning(
            "Created default administrator '%s'; change its password after login",
            DEFAULT_ADMIN_USERNAME,
        )
        return user

    def login(self, username: str, password: str) -> Session:
        user = self._users.get_by_username(username.strip())
        if user is None or not verify_password(password, user.password_hash):
            self._logger.info("Rejected login for username=%s", username)
            raise AuthenticationError("Invalid username or password.")
        if not user.is_active:
            self._logger.info("Rejected login for inactive user id=%s", user.id)
            raise AuthenticationError("This account has been deactivated.")
        self._users.touch_last_login(user.id)
        session = Session(
            user_id=user.id,
            username=user.username,
            role=user.role,
            full_name=user.full_name,
        )
        self.log_activity(session, "User Login", "users", user.id, "Successful login")
        self._logger.info("User id=%s logged in as %s", user.id, user.role.value)
        return session

    def logout(self, session: Session) -> None:
        self.log_activity(session, "User Logout", "users", session.user_id)
        self._logger.info("User id=%s logged out", session.user_id)

    def change_password(
        self, session: Session, old_password: str, new_password: str
    ) -> None:
        user = self._users.get_by_id(session.user_id)
        if user is None:
            raise NotFoundError(f"User {session.user_id} not found.")
        if not verify_password(old_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect.")
        self._check_password(new_password)
        try:
            self._users.update_password(user.id, hash_password(new_password))
        except sqlite3.Error as exc:
            raise PersistenceError("The password could not be saved.") from exc
        self.log_activity(session, "Password Changed", "users", user.id)

    def create_user(
        self,
        session: Session,
        username: str,
        password: str,
        role: UserRole | str,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> User:
        self.require(session, UserRole.ADMINISTRATOR)
        username = username.strip()
        if not username:
            raise ValidationError("Username is required.")
        try:
            role = UserRole(role)
        except ValueError as exc:
            raise ValidationError(f"Invalid role: {role}.") from exc
        self._check_password(password)
        if self._users.get_by_username(username) is not None:
            raise ValidationError("Username already exists.")
        try:
            user = self._users.create(
                username, hash_password(password), role, full_name, email, phone
            )
        except sqlite3.Error as exc:
            raise PersistenceError("The user could not be saved.") from exc
        self.log_activity(session, "User Created", "users", user.id, username)
        return user

    def set_user_active(self, session: Session, user_id: int, is_active: bool) -> None:
        self.require(session, UserRole.ADMINISTRATOR)
        if user_id == session.user_id and not is_active:
            raise ValidationError("You cannot deactivate your own account.")
        if not self._users.set_active(user_id, is_active):
            raise NotFoundError(f"User {user_id} not found.")
        action = "User Activated" if is_active else "User Deactivated"
        self.log_activity(session, action, "users", user_id)

    def list_users(self) -> list[User]:
        return self._users.list_all()

    def list_activity(self, limit: int = 50) -> list[ActivityEntry]:
        return self._activity.list_recent(limit)

    def require(self, session: Session, role: UserRole) -> None:
        if not session.has_permission(role):
            raise PermissionDeniedError(
                f"This action requires the {role.value} role."
            )

    def log_activity(
        self,
        session: Optional[Session],
        action: str,
        table_name: Optional[str] = None,
        record_id: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        """Append to the activity log; failures are logged and otherwise ignored."""
        user_id = session.user_id if session else None
        try:
            self._activity.add(user_id, action, table_name, record_id, details)
        except sqlite3.Error:
            self._logger.warning(
                "Failed to record activity action=%s user_id=%s",
                action,
                user_id,
                exc_info=True,
            )

    def _check_password(self, password: str) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
