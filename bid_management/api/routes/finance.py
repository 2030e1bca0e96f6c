"""Finance request endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Request

from ...models import FinanceDecision, FinanceOverview, FinanceRequest, FinanceRequestCreate, User
from ..container import Services
from ..deps import current_user, get_services

router = APIRouter(prefix="/api/finance-requests", tags=["finance"])


@router.get("", response_model=List[FinanceRequest])
def list_requests(request: Request, user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.finance.list_requests(dict(request.query_params))


@router.post("", response_model=FinanceRequest, status_code=201)
def create_request(body: FinanceRequestCreate, user: User = Depends(current_user),
                   services: Services = Depends(get_services)):
    return services.finance.create_request(body, user)


@router.get("/overview", response_model=FinanceOverview)
def overview(user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.finance.overview()


@router.get("/{request_id}", response_model=FinanceRequest)
def get_request(request_id: str, user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.finance.get_request(request_id)


@router.post("/{request_id}/decision", response_model=FinanceRequest)
def decide(request_id: str, body: FinanceDecision, user: User = Depends(current_user),
           services: Services = Depends(get_services)):
    return services.finance.decide(request_id, body, user)


@router.post("/{request_id}/processed", response_model=FinanceRequest)
def mark_processed(request_id: str, user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.finance.mark_processed(request_id, user)
