"""PDF text extraction route."""

import json

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.api.dependencies import get_http_client
from app.core.exceptions import PdfExtractionError
from app.domain.pdf import extract_pdf
from app.schemas.pdf import PdfErrorResponse, PdfExtractRequest, PdfExtractResponse
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["pdf"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=PdfErrorResponse(error=message).model_dump(),
    )


@router.post(
    "/extract-pdf",
    response_model=PdfExtractResponse,
    responses={400: {"model": PdfErrorResponse}, 500: {"model": PdfErrorResponse}},
    summary="원격 PDF 텍스트 추출",
)
async def extract_pdf_endpoint(
    request: Request,
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Fetch a remote PDF and return its text, page count and metadata.

    POST /api/extract-pdf
    """
    body = await request.body()
    try:
        payload = PdfExtractRequest.model_validate(json.loads(body) if body else {})
    except ValueError:
        return _error(400, "Request body must be JSON with a non-empty 'url'")

    try:
        return await extract_pdf(client, payload.url)
    except PdfExtractionError as e:
        logger.error("[PDF] 오류 발생: %s", e.message)
        return _error(500, e.message)
