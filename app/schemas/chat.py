"""Chat relay Pydantic schemas."""

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

IMAGE_TYPE_PREFIX = "image"


class Attachment(BaseModel):
    """File attached to a chat request, referenced by URL."""

    type: str = ""
    url: str = ""

    @property
    def is_image(self) -> bool:
        return self.type.startswith(IMAGE_TYPE_PREFIX)


class ChatRequest(BaseModel):
    """Body of POST /api/ai/stream.

    messages are kept as plain dicts so that every field the caller sends
    reaches the upstream untouched.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    model: Optional[Union[str, List[str]]] = None
    messages: List[dict[str, Any]] = Field(default_factory=list)
    files: List[Attachment] = Field(default_factory=list)
    server_idx: Optional[int] = Field(default=None, alias="serverIdx")

    @property
    def target_index(self) -> int:
        return self.server_idx or 0

    @property
    def image_attachments(self) -> List[Attachment]:
        return [f for f in self.files if f.is_image]


# Multimodal content parts, in the shape the upstreams expect
class TextPart(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageUrl(BaseModel):
    url: str


class ImagePart(BaseModel):
    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl
