"""Company-level documents (certificates, registrations)."""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse

from ...errors import NotFoundError
from ...models import Document, User
from ..container import Services
from ..deps import current_user, get_services

router = APIRouter(prefix="/api/company-documents", tags=["documents"])


@router.get("", response_model=List[Document])
def list_company_documents(user: User = Depends(current_user), services: Services = Depends(get_services)):
    return services.documents.list_documents()


@router.post("", response_model=Document, status_code=201)
def upload_company_document(file: UploadFile = File(...), user: User = Depends(current_user),
                            services: Services = Depends(get_services)):
    return services.documents.upload(file.file, file.filename or "", file.content_type, user)


def _company_document(services: Services, document_id: str) -> Document:
    document = services.documents.get_document(document_id)
    if document.tender_id is not None:
        raise NotFoundError("Document not found")
    return document


@router.get("/{document_id}/download")
def download_company_document(document_id: str, user: User = Depends(current_user),
                              services: Services = Depends(get_services)):
    document = _company_document(services, document_id)
    return FileResponse(services.documents.file_path(document), media_type=document.mime_type,
                        filename=document.original_name)


@router.delete("/{document_id}")
def delete_company_document(document_id: str, user: User = Depends(current_user),
                            services: Services = Depends(get_services)):
    _company_document(services, document_id)
    services.documents.delete_document(document_id, user)
    return {"message": "Document deleted successfully"}
