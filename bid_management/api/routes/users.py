"""User administration."""

from typing import List, Optional

from fastapi import APIRouter, Depends

from ...auth import require
from ...auth.permissions import USER_ADMIN_ROLES
from ...models import User, UserCreate, UserPublic, UserUpdate
from ..container import Services
from ..deps import current_user, get_services

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserPublic])
def list_users(role: Optional[str] = None, user: User = Depends(current_user),
               services: Services = Depends(get_services)):
    return services.users.list_users(role)


@router.post("", response_model=UserPublic, status_code=201)
def create_user(body: UserCreate, user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.users.create_user(body, actor=user)


@router.get("/{user_id}", response_model=UserPublic)
def get_user(user_id: str, user: User = Depends(current_user), services: Services = Depends(get_services)):
    if user_id != user.id:
        require(user, USER_ADMIN_ROLES, "view other users")
    return services.users.get_user(user_id).public()


@router.put("/{user_id}", response_model=UserPublic)
def update_user(user_id: str, body: UserUpdate, user: User = Depends(current_user),
                services: Services = Depends(get_services)):
    return services.users.update_user(user_id, body, actor=user)


@router.delete("/{user_id}", response_model=UserPublic)
def deactivate_user(user_id: str, user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.users.update_user(user_id, UserUpdate(is_active=False), actor=user)
