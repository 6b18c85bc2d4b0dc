"""Embedding image attachments into the outgoing message list."""

from typing import Any, Dict, List, Sequence

from app.schemas.chat import Attachment, ImagePart, ImageUrl, TextPart


def attach_images(
    messages: Sequence[Dict[str, Any]], files: Sequence[Attachment]
) -> List[Dict[str, Any]]:
    """Rewrite the most recent user message as multimodal content.

    The last message with role "user" gets a text part carrying its original
    string content followed by one image part per image attachment. Content
    that is already a list of parts is left alone, as is every other message.
    The input sequence is never mutated.
    """
    result = list(messages)
    images = [f for f in files if f.is_image]
    if not images:
        return result

    for idx in range(len(result) - 1, -1, -1):
        message = result[idx]
        if not isinstance(message, dict) or message.get("role") != "user":
            continue

        content = message.get("content")
        if isinstance(content, list):
            return result

        text = "" if content is None else str(content)
        parts: List[Dict[str, Any]] = [TextPart(text=text).model_dump()]
        parts.extend(ImagePart(image_url=ImageUrl(url=f.url)).model_dump() for f in images)
        result[idx] = {**message, "content": parts}
        return result

    return result
