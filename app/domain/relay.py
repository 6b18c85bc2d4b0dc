"""Forwarding chat requests to the upstream completion services."""

from __future__ import annotations

import time
from typing import Any, Dict, List, Sequence

import httpx

from app.core.exceptions import (
    AllModelsFailedError,
    InvalidServerIndexError,
    UpstreamError,
)
from app.domain.multimodal import attach_images
from app.domain.upstream import (
    FALLBACK_TARGET_RULES,
    SINGLE_TARGET_RULES,
    STRATEGY_FALLBACK,
    UpstreamTarget,
    extract_answer,
    normalize_model_candidates,
)
from app.schemas.chat import ChatRequest
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _error_detail(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


class ChatRelay:
    """Relay one chat request to the selected upstream and return its answer.

    The target table is fixed for the process lifetime; the http client is
    shared between requests as a connection pool only.
    """

    def __init__(
        self,
        targets: Sequence[UpstreamTarget],
        client: httpx.AsyncClient,
        tick_interval: float = 0.02,
    ) -> None:
        self.targets = tuple(targets)
        self.client = client
        self.tick_interval = tick_interval

    def select_target(self, server_idx: int) -> UpstreamTarget:
        if not 0 <= server_idx < len(self.targets):
            raise InvalidServerIndexError(server_idx)
        return self.targets[server_idx]

    async def complete(self, request: ChatRequest) -> str:
        """Return the answer text for request, raising AppError subclasses on failure."""
        target = self.select_target(request.target_index)
        messages = attach_images(request.messages, request.files)

        logger.info("[RELAY] Forwarding to %s (%s)", target.name, target.url)
        if target.strategy == STRATEGY_FALLBACK:
            return await self._complete_with_fallback(target, request.model, messages)
        return await self._complete_single(target, request.model, messages)

    async def _post(self, target: UpstreamTarget, payload: Dict[str, Any]) -> httpx.Response:
        return await self.client.post(target.url, json=payload, headers=target.headers())

    async def _complete_single(
        self, target: UpstreamTarget, model: Any, messages: List[Dict[str, Any]]
    ) -> str:
        payload = {
            "model": model,
            "messages": messages,
            # cache buster for intermediate proxies
            "timestamp": int(time.time() * 1000),
        }
        try:
            response = await self._post(target, payload)
        except httpx.HTTPError as e:
            raise UpstreamError(f"AI server request failed: {_error_detail(e)}") from e

        if not response.is_success:
            raise UpstreamError(f"AI server responded with {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"AI server returned invalid JSON: {_error_detail(e)}") from e

        answer = extract_answer(data, SINGLE_TARGET_RULES)
        logger.info("[RELAY] %s answered (length=%d)", target.name, len(answer))
        return answer

    async def _complete_with_fallback(
        self, target: UpstreamTarget, model: Any, messages: List[Dict[str, Any]]
    ) -> str:
        candidates = normalize_model_candidates(model)
        if not candidates:
            raise UpstreamError("No model specified")

        last_error = ""
        for attempt, candidate in enumerate(candidates, start=1):
            logger.info("[RELAY] %s attempt %d/%d: model=%s", target.name, attempt, len(candidates), candidate)
            try:
                response = await self._post(target, {"model": candidate, "messages": messages})
            except httpx.HTTPError as e:
                last_error = f"{candidate}: {_error_detail(e)}"
                logger.warning("[RELAY] %s", last_error)
                continue

            if not response.is_success:
                last_error = f"{candidate} responded with {response.status_code}: {response.text}"
                logger.warning("[RELAY] %s", last_error)
                continue

            try:
                data = response.json()
            except ValueError as e:
                last_error = f"{candidate}: invalid JSON ({_error_detail(e)})"
                logger.warning("[RELAY] %s", last_error)
                continue

            answer = extract_answer(data, FALLBACK_TARGET_RULES)
            logger.info("[RELAY] %s answered with model=%s (length=%d)", target.name, candidate, len(answer))
            return answer

        raise AllModelsFailedError(last_error)
