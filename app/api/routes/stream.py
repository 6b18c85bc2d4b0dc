"""Typewriter-streamed chat relay routes."""

import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, StreamingResponse
from pydantic import ValidationError

from app.api.dependencies import get_relay
from app.core.exceptions import InvalidPayloadError
from app.domain.chat import stream_chat_answer
from app.domain.relay import ChatRelay
from app.schemas.chat import ChatRequest
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/ai", tags=["stream"])

INFO_PAGE = (
    "<html><body><h3>✅ Stream endpoint is running</h3>"
    "<p>POST JSON here to stream AI responses.</p></body></html>"
)

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}


async def parse_chat_request(request: Request) -> ChatRequest:
    """Decode the body by hand so malformed JSON answers 400, not 422."""
    body = await request.body()
    try:
        data = json.loads(body) if body else {}
    except (ValueError, UnicodeDecodeError):
        raise InvalidPayloadError("Invalid JSON")
    if not isinstance(data, dict):
        raise InvalidPayloadError("Invalid payload: expected a JSON object")
    try:
        return ChatRequest.model_validate(data)
    except ValidationError as e:
        raise InvalidPayloadError(f"Invalid payload: {e.error_count()} validation error(s)")


@router.get("/stream", response_class=HTMLResponse, summary="스트림 엔드포인트 안내")
async def stream_info():
    return HTMLResponse(INFO_PAGE)


@router.post("/stream", summary="AI 응답 타자기 스트리밍")
async def stream_chat(
    request: Request,
    chat_request: ChatRequest = Depends(parse_chat_request),
    relay: ChatRelay = Depends(get_relay),
):
    """Relay the chat to the selected upstream and type the answer out.

    POST /api/ai/stream
    """
    logger.info(
        "[STREAM] 요청 수신 (model=%s, messages=%d)",
        chat_request.model,
        len(chat_request.messages),
    )
    return StreamingResponse(
        stream_chat_answer(relay, chat_request, request.is_disconnected),
        media_type="text/plain; charset=utf-8",
        headers=STREAM_HEADERS,
    )
