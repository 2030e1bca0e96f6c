"""Authentication and role-based authorization."""

from .passwords import hash_password, verify_password
from .permissions import allowed_actions, can_edit, has_role, require
from .tokens import bearer_token, decode_token, issue_token, session_expiry

__all__ = [
    "hash_password",
    "verify_password",
    "allowed_actions",
    "can_edit",
    "has_role",
    "require",
    "bearer_token",
    "decode_token",
    "issue_token",
    "session_expiry",
]
