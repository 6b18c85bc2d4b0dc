"""PDF extraction Pydantic schemas."""

from typing import Dict

from pydantic import BaseModel, Field


class PdfExtractRequest(BaseModel):
    url: str = Field(..., min_length=1, description="Remote PDF location")


class PdfExtractResponse(BaseModel):
    success: bool = True
    text: str
    pages: int
    info: Dict[str, str] = Field(default_factory=dict)


class PdfErrorResponse(BaseModel):
    success: bool = False
    error: str
