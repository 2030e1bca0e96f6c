"""FastAPI dependencies."""

from fastapi import Header, Request

from ..auth import bearer_token
from ..models import User
from .container import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


def current_token(authorization: str = Header(None)) -> str:
    return bearer_token(authorization)


def current_user(request: Request, authorization: str = Header(None)) -> User:
    """Resolve the bearer token to the calling user (401 otherwise)."""
    return get_services(request).users.authenticate(bearer_token(authorization))
