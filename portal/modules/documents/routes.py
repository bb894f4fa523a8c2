from fastapi import APIRouter, Depends, UploadFile, File, Form
from portal.database.supabase_client import get_supabase
from portal.modules.documents.schemas import (
    DocumentRegister, DocumentUpdate, DocumentResponse, DocumentUploadResponse
)
from portal.modules.documents.service import DocumentService
from portal.modules.auth.service import display_name
from portal.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/documents", tags=["documents"])


def get_document_service(supabase: Client = Depends(get_supabase)) -> DocumentService:
    return DocumentService(supabase)


@router.get("", response_model=List[DocumentResponse])
async def list_documents(
    search: Optional[str] = None,
    starred: Optional[bool] = None,
    recent: bool = False,
    user_data: Dict = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service)
):
    """List documents, newest first"""
    return service.list_documents(search=search, starred=starred, recent=recent)


@router.post("", response_model=DocumentResponse, status_code=201)
async def register_document(
    document_data: DocumentRegister,
    user_data: Dict = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service)
):
    """Record document metadata without uploading bytes"""
    return service.register_document(document_data)


@router.post("/upload", response_model=DocumentUploadResponse, status_code=201)
async def upload_documents(
    files: List[UploadFile] = File(...),
    folder: Optional[str] = Form(None),
    tags: Optional[List[str]] = Form(None),
    user_data: Dict = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service)
):
    """
    Upload one or more files. Bytes go to S3 when configured, otherwise to
    the Supabase Storage bucket; one documents row is created per file.
    """
    return await service.upload_documents(
        files,
        uploaded_by=display_name(user_data),
        folder=folder,
        tags=tags
    )


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    user_data: Dict = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service)
):
    return service.get_document(document_id)


@router.patch("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: str,
    document_data: DocumentUpdate,
    user_data: Dict = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service)
):
    """Rename, retag, move or (un)star a document"""
    return service.update_document(document_id, document_data)


@router.post("/{document_id}/star", response_model=DocumentResponse)
async def toggle_star(
    document_id: str,
    user_data: Dict = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service)
):
    return service.toggle_star(document_id)


@router.delete("/{document_id}", status_code=204)
async def delete_document(
    document_id: str,
    user_data: Dict = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service)
):
    service.delete_document(document_id)
    return None
