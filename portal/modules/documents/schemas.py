from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import datetime

from portal.core.validators import require_choice, require_text

DOCUMENT_FOLDERS = ("meetings", "policies", "education", "reports", "others")


def normalize_tags(tags: Optional[List[str]]) -> List[str]:
    """Trim, drop blanks and duplicates, keep first-seen order"""
    seen = []
    for tag in tags or []:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class DocumentRegister(BaseModel):
    name: str
    type: str
    size: str
    uploaded_by: str
    path: Optional[str] = None

    @field_validator("name", "type", "size", "uploaded_by")
    @classmethod
    def check_required(cls, v: str, info) -> str:
        return require_text(v, info.field_name)


class DocumentUpdate(BaseModel):
    name: Optional[str] = None
    tags: Optional[List[str]] = None
    is_starred: Optional[bool] = None
    folder_id: Optional[str] = None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return v if v is None else normalize_tags(v)

    @field_validator("folder_id")
    @classmethod
    def check_folder(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else require_choice(v, "folder_id", DOCUMENT_FOLDERS)


class DocumentResponse(BaseModel):
    id: str
    name: str
    type: str
    size: str
    url: Optional[str] = None
    tags: List[str] = []
    is_starred: bool = False
    folder_id: Optional[str] = None
    modified_by: str
    last_modified: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DocumentUploadResponse(BaseModel):
    documents: List[DocumentResponse]
    message: str
