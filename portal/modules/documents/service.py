from supabase import Client
from portal.modules.documents.schemas import (
    DocumentRegister, DocumentUpdate, DocumentResponse, DocumentUploadResponse,
    DOCUMENT_FOLDERS, normalize_tags
)
from portal.modules.documents.s3_storage import S3Storage
from portal.config import settings
from typing import List, Optional
from fastapi import HTTPException, UploadFile
from datetime import datetime, timezone
import logging
import uuid

logger = logging.getLogger(__name__)

UPLOAD_PREFIX = "uploads"
RECENT_COUNT = 3
_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(size_bytes: int) -> str:
    """1024-based human readable size: 0 Bytes, 500 Bytes, 1.5 KB, 2.4 MB"""
    if size_bytes <= 0:
        return "0 Bytes"
    exponent = 0
    while exponent < len(_SIZE_UNITS) - 1 and size_bytes >= 1024 ** (exponent + 1):
        exponent += 1
    value = f"{size_bytes / 1024 ** exponent:.2f}".rstrip("0").rstrip(".")
    return f"{value} {_SIZE_UNITS[exponent]}"


class DocumentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.bucket = settings.documents_bucket

        # Initialize S3 storage if credentials are available
        self.s3_storage = None
        if settings.s3_configured:
            try:
                self.s3_storage = S3Storage()
            except Exception as e:
                logger.warning(f"S3 storage initialization failed ({str(e)}), will use Supabase Storage")
                self.s3_storage = None

    def list_documents(
        self,
        search: Optional[str] = None,
        starred: Optional[bool] = None,
        recent: bool = False
    ) -> List[DocumentResponse]:
        """Newest first; `recent` keeps the first three, `starred` filters on the star flag"""
        try:
            result = self.supabase.table("documents")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching documents: {e}")
            raise HTTPException(status_code=500, detail="Failed to load documents")

        documents = [DocumentResponse(**doc) for doc in result.data or []]
        logger.debug(f"Fetched {len(documents)} documents")
        if search and search.strip():
            term = search.strip().lower()
            documents = [d for d in documents if term in d.name.lower()]
        if starred is not None:
            documents = [d for d in documents if d.is_starred == starred]
        if recent:
            documents = documents[:RECENT_COUNT]
        return documents

    def get_document(self, document_id: str) -> DocumentResponse:
        try:
            result = self.supabase.table("documents")\
                .select("*")\
                .eq("id", document_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching document {document_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load document")
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Document not found")
        return DocumentResponse(**result.data)

    def _insert(self, document_data: dict) -> DocumentResponse:
        try:
            result = self.supabase.table("documents").insert(document_data).execute()
        except Exception as e:
            logger.error(f"Error inserting document {document_data.get('name')}: {e}")
            raise HTTPException(status_code=500, detail="Failed to upload document")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to upload document")
        return DocumentResponse(**result.data[0])

    def register_document(self, form: DocumentRegister) -> DocumentResponse:
        """Insert a metadata-only row with the default url, tags and star flag"""
        return self._insert({
            "name": form.name,
            "type": form.type,
            "size": form.size,
            "url": form.path or f"/documents/{form.name}",
            "modified_by": form.uploaded_by,
            "tags": [],
            "is_starred": False,
            "folder_id": None
        })

    def _store_bytes(self, content: bytes, file_name: str, content_type: str) -> str:
        key = f"{UPLOAD_PREFIX}/{uuid.uuid4()}_{file_name}"
        if self.s3_storage:
            try:
                return self.s3_storage.upload_file(content, key, content_type)
            except Exception as e:
                logger.error(f"S3 upload failed: {str(e)}")
                raise HTTPException(status_code=500, detail="Failed to upload document")
        try:
            self.supabase.storage.from_(self.bucket).upload(
                key,
                content,
                file_options={"content-type": content_type}
            )
        except Exception as e:
            logger.error(f"Supabase Storage upload failed: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to upload document")
        return key

    def _remove_bytes(self, url: Optional[str]) -> None:
        if not url:
            return
        if url.startswith("s3://"):
            if self.s3_storage:
                try:
                    self.s3_storage.delete_file(self.s3_storage.key_from_url(url))
                except Exception as e:
                    logger.warning(f"Failed to delete {url} from S3: {e}")
            return
        if url.startswith(f"{UPLOAD_PREFIX}/"):
            try:
                self.supabase.storage.from_(self.bucket).remove([url])
            except Exception as e:
                logger.warning(f"Failed to delete {url} from Supabase Storage: {e}")

    async def upload_documents(
        self,
        files: List[UploadFile],
        uploaded_by: str,
        folder: Optional[str] = None,
        tags: Optional[List[str]] = None
    ) -> DocumentUploadResponse:
        """Store each file's bytes, then insert its metadata row"""
        if not files:
            raise HTTPException(status_code=400, detail="Select at least one file to upload")
        if folder and folder not in DOCUMENT_FOLDERS:
            raise HTTPException(status_code=400, detail=f"folder must be one of: {', '.join(DOCUMENT_FOLDERS)}")
        clean_tags = normalize_tags(tags)

        documents = []
        for file in files:
            if not file.filename:
                raise HTTPException(status_code=400, detail="Uploaded file has no name")
            content = await file.read()
            content_type = file.content_type or "application/octet-stream"
            url = self._store_bytes(content, file.filename, content_type)
            try:
                document = self._insert({
                    "name": file.filename,
                    "type": content_type,
                    "size": format_file_size(len(content)),
                    "url": url,
                    "modified_by": uploaded_by,
                    "tags": clean_tags,
                    "is_starred": False,
                    "folder_id": folder
                })
            except HTTPException:
                self._remove_bytes(url)
                raise
            logger.info(f"Uploaded document {document.id} ({document.size}) to {url}")
            documents.append(document)
        return DocumentUploadResponse(
            documents=documents,
            message=f"{len(documents)} file(s) uploaded"
        )

    def update_document(self, document_id: str, document_data: DocumentUpdate) -> DocumentResponse:
        update_data = document_data.model_dump(exclude_unset=True)
        if "name" in update_data and not (update_data["name"] or "").strip():
            raise HTTPException(status_code=400, detail="name is required")
        # null clears folder_id; for the other fields it means "leave unchanged"
        update_data = {k: v for k, v in update_data.items() if v is not None or k == "folder_id"}
        if not update_data:
            return self.get_document(document_id)
        now = datetime.now(timezone.utc).isoformat()
        update_data["updated_at"] = now
        update_data["last_modified"] = now
        try:
            result = self.supabase.table("documents")\
                .update(update_data)\
                .eq("id", document_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating document {document_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update document")
        if not result.data:
            raise HTTPException(status_code=404, detail="Document not found")
        return DocumentResponse(**result.data[0])

    def toggle_star(self, document_id: str) -> DocumentResponse:
        document = self.get_document(document_id)
        return self.update_document(document_id, DocumentUpdate(is_starred=not document.is_starred))

    def delete_document(self, document_id: str) -> bool:
        """Delete the row, then the stored object (best effort)"""
        document = self.get_document(document_id)
        try:
            result = self.supabase.table("documents")\
                .delete()\
                .eq("id", document_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting document {document_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete document")
        self._remove_bytes(document.url)
        return len(result.data or []) > 0
