"""Company settings endpoints."""

from fastapi import APIRouter, Depends

from ...models import CompanySettings, CompanySettingsUpdate, User
from ..container import Services
from ..deps import current_user, get_services

router = APIRouter(prefix="/api/company-settings", tags=["company"])


@router.get("", response_model=CompanySettings)
def get_settings(user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.company.get_settings()


@router.put("", response_model=CompanySettings)
def update_settings(body: CompanySettingsUpdate, user: User = Depends(current_user),
                    services: Services = Depends(get_services)):
    return services.company.update_settings(body, user)
