"""Tender endpoints: listing, CRUD, assignment, not-relevant workflow,
activity timeline, documents and spreadsheet import."""

from typing import List

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import FileResponse

from ...auth import require
from ...auth.permissions import IMPORT_ROLES, USER_ADMIN_ROLES
from ...errors import InvalidRequestError
from ...importer import SPREADSHEET_EXTENSIONS
from ...models import (
    ActivityLog,
    AssignRequest,
    CommentCreate,
    Document,
    DocumentCategory,
    ExcelUpload,
    NotRelevantDecision,
    NotRelevantRequest,
    Tender,
    TenderAssignment,
    TenderCreate,
    TenderDetail,
    TenderPage,
    TenderUpdate,
    User,
)
from ...services import sweep_missed_opportunities
from ..container import Services
from ..deps import current_user, get_services

router = APIRouter(prefix="/api/tenders", tags=["tenders"])


# Collection-level routes come before /{tender_id}

@router.get("", response_model=TenderPage)
def list_tenders(request: Request, user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.tenders.list_tenders(dict(request.query_params))


@router.post("", response_model=Tender, status_code=201)
def create_tender(body: TenderCreate, user: User = Depends(current_user), services: Services = Depends(get_services)):
    tender = services.tenders.create_tender(body, user)
    score = services.scoring.score(tender).composite_score
    return services.tenders.set_ai_score(tender.id, score)


@router.get("/not-relevant/pending", response_model=List[Tender])
def pending_not_relevant(user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.not_relevant.list_pending(user)


@router.post("/import", response_model=ExcelUpload, status_code=201)
def import_tenders(file: UploadFile = File(...), user: User = Depends(current_user),
                   services: Services = Depends(get_services)):
    require(user, IMPORT_ROLES, "import tenders")
    name = file.filename or ""
    if not name.lower().endswith(SPREADSHEET_EXTENSIONS):
        raise InvalidRequestError("Only Excel files (.xlsx, .xls) are allowed")
    path, _ = services.documents.store_file(file.file, name, "imports")
    try:
        return services.importer.import_file(path, name, user)
    except Exception:
        path.unlink(missing_ok=True)
        raise


@router.post("/recalculate-scores")
def recalculate_scores(user: User = Depends(current_user), services: Services = Depends(get_services)):
    updated = services.scoring.recalculate_all(user)
    return {"message": "AI scores recalculated", "updated": updated}


@router.post("/process-missed")
def process_missed(user: User = Depends(current_user), services: Services = Depends(get_services)):
    require(user, USER_ADMIN_ROLES, "process missed opportunities")
    marked = sweep_missed_opportunities(services.store, services.activity)
    return {"message": f"{len(marked)} tenders marked as missed opportunities", "tenderIds": marked}


@router.get("/{tender_id}", response_model=TenderDetail)
def get_tender(tender_id: str, user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.tenders.get_detail(tender_id, user)


@router.put("/{tender_id}", response_model=Tender)
def update_tender(tender_id: str, body: TenderUpdate, user: User = Depends(current_user),
                  services: Services = Depends(get_services)):
    return services.tenders.update_tender(tender_id, body, user)


@router.delete("/{tender_id}")
def delete_tender(tender_id: str, user: User = Depends(current_user), services: Services = Depends(get_services)):
    services.tenders.delete_tender(tender_id, user)
    return {"message": "Tender deleted successfully"}


@router.post("/{tender_id}/assign", response_model=Tender)
def assign_tender(tender_id: str, body: AssignRequest, user: User = Depends(current_user),
                  services: Services = Depends(get_services)):
    return services.tenders.assign(tender_id, body, user)


@router.delete("/{tender_id}/assign", response_model=Tender)
def unassign_tender(tender_id: str, user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.tenders.unassign(tender_id, user)


@router.get("/{tender_id}/assignments", response_model=List[TenderAssignment])
def list_assignments(tender_id: str, user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.tenders.list_assignments(tender_id)


@router.post("/{tender_id}/not-relevant", response_model=Tender)
def request_not_relevant(tender_id: str, body: NotRelevantRequest, user: User = Depends(current_user),
                         services: Services = Depends(get_services)):
    return services.not_relevant.request(tender_id, body, user)


@router.post("/{tender_id}/not-relevant/decision", response_model=Tender)
def decide_not_relevant(tender_id: str, body: NotRelevantDecision, user: User = Depends(current_user),
                        services: Services = Depends(get_services)):
    return services.not_relevant.decide(tender_id, body, user)


@router.get("/{tender_id}/activity", response_model=List[ActivityLog])
def tender_activity(tender_id: str, user: User = Depends(current_user), services: Services = Depends(get_services)):
    services.tenders.get_tender(tender_id)
    return services.activity.list_for_tender(tender_id)


@router.post("/{tender_id}/comments", response_model=ActivityLog, status_code=201)
def add_comment(tender_id: str, body: CommentCreate, user: User = Depends(current_user),
                services: Services = Depends(get_services)):
    return services.tenders.add_comment(tender_id, body.comment, user)


@router.get("/{tender_id}/documents", response_model=List[Document])
def list_documents(tender_id: str, user: User = Depends(current_user), services: Services = Depends(get_services)):
    services.tenders.get_tender(tender_id)
    return services.documents.list_documents(tender_id)


@router.post("/{tender_id}/documents", response_model=Document, status_code=201)
def upload_document(
    tender_id: str,
    file: UploadFile = File(...),
    category: DocumentCategory = Form(DocumentCategory.RFP_DOCUMENT),
    user: User = Depends(current_user),
    services: Services = Depends(get_services),
):
    return services.documents.upload(file.file, file.filename or "", file.content_type, user,
                                     tender_id=tender_id, category=category)


@router.get("/{tender_id}/documents/{document_id}/download")
def download_document(tender_id: str, document_id: str, user: User = Depends(current_user),
                      services: Services = Depends(get_services)):
    document = services.documents.get_document(document_id)
    if document.tender_id != tender_id:
        raise InvalidRequestError("Document does not belong to this tender")
    return FileResponse(services.documents.file_path(document), media_type=document.mime_type,
                        filename=document.original_name)


@router.delete("/{tender_id}/documents/{document_id}")
def delete_document(tender_id: str, document_id: str, user: User = Depends(current_user),
                    services: Services = Depends(get_services)):
    document = services.documents.get_document(document_id)
    if document.tender_id != tender_id:
        raise InvalidRequestError("Document does not belong to this tender")
    services.documents.delete_document(document_id, user)
    return {"message": "Document deleted successfully"}
