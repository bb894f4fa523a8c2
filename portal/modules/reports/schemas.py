from pydantic import BaseModel, field_validator, model_validator
from typing import Optional, Dict
from datetime import date, datetime

from portal.core.validators import require_choice, require_text

REPORT_TYPES = ("weekly", "monthly", "quarterly", "project", "custom")
REPORT_FORMATS = ("pdf", "excel", "word")


class ReportRequest(BaseModel):
    title: str
    type: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    include_documents: bool = False
    include_calendar: bool = False
    include_announcements: bool = False
    format: str = "pdf"

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        return require_text(v, "title")

    @field_validator("type")
    @classmethod
    def check_type(cls, v: str) -> str:
        return require_choice(v, "type", REPORT_TYPES)

    @field_validator("format")
    @classmethod
    def check_format(cls, v: str) -> str:
        return require_choice(v, "format", REPORT_FORMATS)

    @model_validator(mode="after")
    def check_period(self):
        if self.start_date is None or self.end_date is None:
            raise ValueError("start_date and end_date are required")
        if self.start_date >= self.end_date:
            raise ValueError("end_date must be after start_date")
        return self


class ReportResponse(BaseModel):
    title: str
    type: str
    period: str
    includes: Dict[str, bool]
    format: str
    generated_at: datetime
    sections: Dict[str, int]
