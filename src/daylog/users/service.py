from __future__ import annotations

from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, UnauthorizedError
from ..core.logging import get_logger
from ..store.repository import EntityStore
from .model import User

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 1


class AuthService:
    """Use case: register, log in, resolve the session user."""

    def __init__(self, store: EntityStore):
        self._store = store

    def register(self, *, username: str, password: str, role: Role = Role.EMPLOYEE) -> User:
        username = require_non_empty(username, "username")
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)
        user = self._store.create_user(username=username, password_hash=generate_password_hash(password), role=role)
        logger.info("user_registered", user_id=user.id, role=user.role.value)
        return user

    def authenticate(self, *, username: str, password: str) -> User:
        if not isinstance(username, str) or not isinstance(password, str):
            raise AuthenticationError("Invalid username or password")

        user = self._store.get_user_by_username(username)
        if not user:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")
        return user

    def current_user(self, user_id: Optional[int]) -> User:
        if user_id is None:
            raise UnauthorizedError("Not logged in")
        user = self._store.get_user(int(user_id))
        if not user:
            raise UnauthorizedError("Not logged in")
        return user

    def require_admin(self, user_id: Optional[int]) -> User:
        user = self.current_user(user_id)
        if user.role != Role.ADMIN:
            raise UnauthorizedError("Admin access required")
        return user


class UserService:
    """Use case: list users (admin)."""

    def __init__(self, store: EntityStore):
        self._store = store

    def list_users(self) -> Sequence[User]:
        return self._store.list_users()
