"""Dashboard, upload history and health endpoints."""

from typing import List

from fastapi import APIRouter, Depends

from ... import __version__
from ...models import DashboardStats, ExcelUpload, User
from ...services import compute_stats
from ..container import Services
from ..deps import current_user, get_services

router = APIRouter(tags=["dashboard"])


@router.get("/api/dashboard/stats", response_model=DashboardStats)
def dashboard_stats(user: User = Depends(current_user), services: Services = Depends(get_services)):
    return compute_stats(services.store)


@router.get("/api/excel-uploads", response_model=List[ExcelUpload])
def excel_uploads(user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.importer.list_uploads()


@router.get("/api/health")
def health(services: Services = Depends(get_services)):
    return {"status": "ok", "version": __version__, "storage": services.config.storage_backend}
