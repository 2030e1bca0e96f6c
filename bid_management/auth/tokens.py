"""JWT issue and verification.

Tokens carry the user id, role and the id of the server-side session that
backs them; a token is only honoured while that session row exists.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from ..errors import AuthenticationError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def issue_token(
    user_id: str,
    username: str,
    role: str,
    session_id: str,
    secret: str,
    expires_at: datetime,
) -> str:
    """Sign a bearer token for ``user_id`` bound to ``session_id``."""
    payload = {
        "sub": user_id,
        "username": username,
        "role": role,
        "sid": session_id,
        "iat": datetime.now(timezone.utc),
        "exp": expires_at,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def session_expiry(days: int) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


def decode_token(token: str, secret: str) -> Dict[str, Any]:
    """Verify signature and expiry.

    Raises:
        AuthenticationError: If the token is expired, malformed or missing claims.
    """
    try:
        claims = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        logger.info(f"Rejected invalid token: {exc}")
        raise AuthenticationError("Invalid or expired token") from exc

    if not claims.get("sub") or not claims.get("sid"):
        raise AuthenticationError("Invalid or expired token")
    return claims


def bearer_token(authorization: str) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Access token required")
    return token.strip()
