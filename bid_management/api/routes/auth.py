"""Login, logout and the current-user endpoint."""

from fastapi import APIRouter, Depends

from ...models import LoginRequest, LoginResponse, User, UserPublic
from ..container import Services
from ..deps import current_token, current_user, get_services

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, services: Services = Depends(get_services)):
    return services.users.login(body.username, body.password)


@router.post("/logout")
def logout(token: str = Depends(current_token), services: Services = Depends(get_services)):
    services.users.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserPublic)
def me(user: User = Depends(current_user)):
    return user.public()
