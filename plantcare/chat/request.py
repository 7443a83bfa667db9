"""Multipart request assembly for the chat endpoint."""

from pydantic import BaseModel, ConfigDict

from plantcare.chat.attachments import Attachment

MESSAGE_FIELD = "message"
SESSION_FIELD = "sessionId"
IMAGES_FIELD = "images"


class ChatRequestPayload(BaseModel):
    """Outbound chat request, ready to be encoded as multipart form data.

    Attributes:
        message: Trimmed text, or None when the user sent only images.
        session_id: Session to continue, or None on the first request.
        images: Attachments in the order they were held.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    message: str | None = None
    session_id: str | None = None
    images: tuple[Attachment, ...] = ()

    def parts(self) -> list[tuple[str, str | Attachment]]:
        """Return form fields in wire order: text, session id, then images."""
        fields: list[tuple[str, str | Attachment]] = []
        if self.message is not None:
            fields.append((MESSAGE_FIELD, self.message))
        if self.session_id is not None:
            fields.append((SESSION_FIELD, self.session_id))
        fields.extend((IMAGES_FIELD, image) for image in self.images)
        return fields

    def to_multipart(self) -> list[tuple[str, tuple[str | None, str | bytes, str | None]]]:
        """Encode the parts as one ordered httpx ``files`` list.

        Text fields carry no filename, so they arrive as plain form fields.
        Passing everything through ``files`` keeps the body multipart even
        when no image is attached, with parts in :meth:`parts` order.
        """
        return [
            (name, (value.name, value.data, value.mime_type))
            if isinstance(value, Attachment)
            else (name, (None, value, None))
            for name, value in self.parts()
        ]


def build_request(
    text: str,
    session_id: str | None,
    attachments: list[Attachment] | tuple[Attachment, ...],
) -> ChatRequestPayload:
    """Build the request for one submission.

    Args:
        text: Message text as typed; sent only if non-empty after trimming.
        session_id: Current session id; sent only if already assigned.
        attachments: Held images, already validated, in held order.

    Returns:
        ChatRequestPayload with deterministic field order.
    """
    message = text.strip()
    return ChatRequestPayload(
        message=message or None,
        session_id=session_id or None,
        images=tuple(attachments),
    )
