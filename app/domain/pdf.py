"""Remote PDF text extraction."""

import io
from typing import Dict

import httpx
from pypdf import PdfReader
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import PdfExtractionError
from app.schemas.pdf import PdfExtractResponse
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _document_info(reader: PdfReader) -> Dict[str, str]:
    metadata = reader.metadata or {}
    # item access resolves indirect references
    return {str(key).lstrip("/"): str(metadata[key]) for key in metadata}


def parse_pdf(data: bytes) -> PdfExtractResponse:
    """Extract text, page count and document info from raw PDF bytes."""
    try:
        reader = PdfReader(io.BytesIO(data))
        texts = [page.extract_text() or "" for page in reader.pages]
        return PdfExtractResponse(
            text="\n".join(texts),
            pages=len(reader.pages),
            info=_document_info(reader),
        )
    except Exception as e:
        raise PdfExtractionError(f"Failed to parse PDF: {e}") from e


async def fetch_pdf(client: httpx.AsyncClient, url: str) -> bytes:
    try:
        response = await client.get(url, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise PdfExtractionError(f"Failed to fetch PDF: HTTP {e.response.status_code}") from e
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        raise PdfExtractionError(f"Failed to fetch PDF: {e}") from e
    return response.content


async def extract_pdf(client: httpx.AsyncClient, url: str) -> PdfExtractResponse:
    logger.info("[PDF] extracting %s", url)
    data = await fetch_pdf(client, url)
    result = await run_in_threadpool(parse_pdf, data)
    logger.info("[PDF] done (pages=%d, length=%d)", result.pages, len(result.text))
    return result
