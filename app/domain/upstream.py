"""Upstream completion targets, model candidates and answer extraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from app.core.config import Settings

NO_CONTENT_PLACEHOLDER = "No content received"

STRATEGY_SINGLE = "single"
STRATEGY_FALLBACK = "fallback"


@dataclass(frozen=True)
class UpstreamTarget:
    """One OpenAI-style chat-completion service the relay can forward to."""

    name: str
    base_url: str
    path: str
    api_key: str = ""
    strategy: str = STRATEGY_SINGLE

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.path}"

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers


def build_upstream_targets(settings: Settings) -> Tuple[UpstreamTarget, ...]:
    """Resolve the fixed target table from configuration, once per process."""
    return (
        UpstreamTarget(
            name="pollinations",
            base_url=settings.pollinations_base_url,
            path="/openai",
        ),
        UpstreamTarget(
            name="a4f",
            base_url=settings.a4f_base_url,
            path="/chat/completions",
            api_key=settings.a4f_api_key,
            strategy=STRATEGY_FALLBACK,
        ),
    )


def normalize_model_candidates(model: Union[str, Sequence[str], None]) -> List[str]:
    """Turn a list, a single id or a comma-joined string into ordered candidates."""
    if model is None:
        return []
    if isinstance(model, str):
        raw = model.split(",")
    else:
        raw = [str(m) for m in model if m is not None]
    return [m.strip() for m in raw if m and m.strip()]


# Answer extraction -----------------------------------------------------------


def _first_choice(data: Dict[str, Any]) -> Dict[str, Any]:
    choices = data.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        return choices[0]
    return {}


def _choice_field_content(field: str) -> Callable[[Dict[str, Any]], Any]:
    def probe(data: Dict[str, Any]) -> Any:
        part = _first_choice(data).get(field)
        return part.get("content") if isinstance(part, dict) else None

    return probe


@dataclass(frozen=True)
class ExtractionRule:
    """Named way of locating the answer text inside an upstream JSON body."""

    name: str
    probe: Callable[[Dict[str, Any]], Any]

    def apply(self, data: Dict[str, Any]) -> Optional[str]:
        value = self.probe(data)
        if isinstance(value, str) and value:
            return value
        return None


MESSAGE_CONTENT = ExtractionRule("chat_completion_message", _choice_field_content("message"))
DELTA_CONTENT = ExtractionRule("chat_completion_delta", _choice_field_content("delta"))
BARE_CONTENT = ExtractionRule("bare_content", lambda data: data.get("content"))

SINGLE_TARGET_RULES: Tuple[ExtractionRule, ...] = (MESSAGE_CONTENT, BARE_CONTENT)
FALLBACK_TARGET_RULES: Tuple[ExtractionRule, ...] = (MESSAGE_CONTENT, DELTA_CONTENT, BARE_CONTENT)


def extract_answer(data: Any, rules: Sequence[ExtractionRule]) -> str:
    """Return the first non-empty match in rule order, else the placeholder."""
    if isinstance(data, dict):
        for rule in rules:
            answer = rule.apply(data)
            if answer is not None:
                return answer
    return NO_CONTENT_PLACEHOLDER
