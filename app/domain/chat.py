"""Chat streaming service: relay the request, then type the answer out."""

from typing import AsyncIterator, Awaitable, Callable, Optional

from app.domain.relay import ChatRelay
from app.domain.streaming import ClientDisconnected, PacedResponse
from app.schemas.chat import ChatRequest
from app.utils.logger import get_logger

logger = get_logger(__name__)

ERROR_MARKER = "❌ Error: "


async def stream_chat_answer(
    relay: ChatRelay,
    chat_request: ChatRequest,
    is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None,
) -> AsyncIterator[str]:
    """Body of a streaming chat response.

    Response headers are already committed when this runs, so failures are
    reported inline as a single chunk starting with ERROR_MARKER.
    """
    async with PacedResponse(is_disconnected) as paced:
        try:
            answer = await paced.token.run(relay.complete(chat_request))
        except ClientDisconnected:
            logger.info("[STREAM] caller left before the upstream answered")
            return
        except Exception as e:
            logger.error("[STREAM] Error: %s", e, exc_info=True)
            yield f"{ERROR_MARKER}{e}"
            return

        async for char in paced.typewriter(answer, relay.tick_interval):
            yield char
