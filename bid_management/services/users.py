"""User accounts, login and session-backed token verification."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from ..auth import hash_password, issue_token, require, session_expiry, verify_password
from ..auth.permissions import USER_ADMIN_ROLES
from ..auth.tokens import decode_token
from ..database.base import USER_SESSIONS, USERS, Store
from ..errors import AuthenticationError, InvalidRequestError, NotFoundError
from ..models import (
    LoginResponse,
    User,
    UserCreate,
    UserPublic,
    UserRole,
    UserSession,
    UserUpdate,
)
from ..query.predicates import Order

logger = logging.getLogger(__name__)


class UserService:
    """Manages ``users`` and ``user_sessions``."""

    def __init__(self, store: Store, jwt_secret: str, jwt_expires_days: int = 7) -> None:
        self._store = store
        self._secret = jwt_secret
        self._expires_days = jwt_expires_days

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> User:
        row = self._store.get(USERS, user_id)
        if row is None:
            raise NotFoundError("User not found")
        return User.model_validate(row)

    def list_users(self, role: Optional[str] = None) -> List[UserPublic]:
        rows = self._store.select(USERS, order=Order("name"))
        users = [User.model_validate(row) for row in rows]
        if role:
            users = [u for u in users if u.role.value == role]
        return [u.public() for u in users]

    def create_user(self, data: UserCreate, actor: Optional[User] = None) -> UserPublic:
        """Create an account. ``actor`` is None only for bootstrap."""
        if actor is not None:
            require(actor, USER_ADMIN_ROLES, "create users")
        if self._store.find_one(USERS, "username", data.username):
            raise InvalidRequestError("Username already exists")
        if self._store.find_one(USERS, "email", data.email):
            raise InvalidRequestError("Email already exists")

        user = User(
            username=data.username,
            email=data.email,
            name=data.name,
            role=data.role,
            department=data.department,
            phone=data.phone,
            password_hash=hash_password(data.password),
        )
        self._store.insert(USERS, user.to_record())
        logger.info(f"Created user {user.username} with role {user.role.value}")
        return user.public()

    def update_user(self, user_id: str, changes: UserUpdate, actor: User) -> UserPublic:
        require(actor, USER_ADMIN_ROLES, "update users")
        self.get_user(user_id)
        update = changes.model_dump(mode="json", exclude_unset=True)
        if "email" in update:
            existing = self._store.find_one(USERS, "email", update["email"])
            if existing and existing["id"] != user_id:
                raise InvalidRequestError("Email already exists")
        update["updated_at"] = datetime.now(timezone.utc).isoformat()
        row = self._store.update(USERS, user_id, update)
        logger.info(f"Updated user {user_id}: {sorted(update)}")
        return User.model_validate(row).public()

    def ensure_admin(self, username: str, password: str, email: str) -> None:
        """Create the bootstrap admin account if no user has that username."""
        if self._store.find_one(USERS, "username", username):
            return
        self.create_user(
            UserCreate(username=username, password=password, email=email, name="Administrator", role=UserRole.ADMIN)
        )
        logger.info(f"Bootstrapped admin user {username}")

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> LoginResponse:
        row = self._store.find_one(USERS, "username", username)
        if row is None:
            raise AuthenticationError("Invalid credentials")
        user = User.model_validate(row)
        if not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        if not user.is_active:
            raise AuthenticationError("Account is disabled")

        session = UserSession(user_id=user.id, expires_at=session_expiry(self._expires_days))
        self._store.insert(USER_SESSIONS, session.to_record())
        now = datetime.now(timezone.utc)
        self._store.update(USERS, user.id, {"last_login_at": now.isoformat()})
        user.last_login_at = now

        token = issue_token(
            user_id=user.id,
            username=user.username,
            role=user.role.value,
            session_id=session.id,
            secret=self._secret,
            expires_at=session.expires_at,
        )
        logger.info(f"User {user.username} logged in")
        return LoginResponse(user=user.public(), token=token)

    def authenticate(self, token: str) -> User:
        """Resolve a bearer token to an active user with a live session."""
        claims = decode_token(token, self._secret)
        row = self._store.get(USER_SESSIONS, claims["sid"])
        if row is None:
            raise AuthenticationError("Invalid or expired session")
        session = UserSession.model_validate(row)
        now = datetime.now(timezone.utc)
        if session.expires_at <= now or session.user_id != claims["sub"]:
            raise AuthenticationError("Invalid or expired session")
        self._store.update(USER_SESSIONS, session.id, {"last_accessed": now.isoformat()})

        user_row = self._store.get(USERS, claims["sub"])
        if user_row is None:
            raise AuthenticationError("User not found")
        user = User.model_validate(user_row)
        if not user.is_active:
            raise AuthenticationError("Account is disabled")
        return user

    def logout(self, token: str) -> None:
        claims = decode_token(token, self._secret)
        self._store.delete(USER_SESSIONS, claims["sid"])
        logger.info(f"Session {claims['sid']} closed")
