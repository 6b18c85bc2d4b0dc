"""이미지 첨부 멀티모달 변환 테스트."""

from app.domain.multimodal import attach_images
from app.schemas.chat import Attachment

IMAGE = Attachment(type="image/jpeg", url="https://example.com/a.jpg")


def test_no_images_passes_messages_through():
    messages = [{"role": "user", "content": "hello"}]
    files = [Attachment(type="application/pdf", url="https://example.com/doc.pdf")]

    assert attach_images(messages, files) == messages


def test_only_last_user_message_is_rewritten():
    messages = [
        {"role": "user", "content": "first"},
        {"role": "user", "content": "describe this", "name": "alice"},
        {"role": "assistant", "content": "thinking"},
    ]
    second = Attachment(type="image", url="https://example.com/b.png")

    result = attach_images(messages, [IMAGE, second])

    assert result[0] == {"role": "user", "content": "first"}
    assert result[1] == {
        "role": "user",
        "name": "alice",
        "content": [
            {"type": "text", "text": "describe this"},
            {"type": "image_url", "image_url": {"url": "https://example.com/a.jpg"}},
            {"type": "image_url", "image_url": {"url": "https://example.com/b.png"}},
        ],
    }
    assert result[2] == messages[2]
    # input list is left untouched
    assert messages[1]["content"] == "describe this"


def test_existing_multimodal_content_is_not_duplicated():
    parts = [
        {"type": "text", "text": "look"},
        {"type": "image_url", "image_url": {"url": "https://example.com/old.png"}},
    ]
    messages = [{"role": "user", "content": parts}]

    result = attach_images(messages, [IMAGE])

    assert result[0]["content"] == parts


def test_missing_content_becomes_empty_text():
    result = attach_images([{"role": "user"}], [IMAGE])

    assert result[0]["content"][0] == {"type": "text", "text": ""}


def test_no_user_message_leaves_list_alone():
    messages = [{"role": "system", "content": "be brief"}]

    assert attach_images(messages, [IMAGE]) == messages
