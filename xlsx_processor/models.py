from __future__ import annotations

from pydantic import BaseModel, Field

from .rules import OUTPUT_FILENAME, XLSX_MEDIA_TYPE


class ProcessedWorkbook(BaseModel):
    filename: str = Field(default=OUTPUT_FILENAME)
    media_type: str = Field(default=XLSX_MEDIA_TYPE)
    sha256: str
    content_b64: str


class FilterSummary(BaseModel):
    total_rows: int = Field(examples=[3])
    removed_rows: int = Field(examples=[2])
    remaining_rows: int = Field(examples=[1])


class ProcessResponse(BaseModel):
    processed_file: ProcessedWorkbook
    summary: FilterSummary


class ErrorResponse(BaseModel):
    detail: str


class HealthResponse(BaseModel):
    ok: bool = True
