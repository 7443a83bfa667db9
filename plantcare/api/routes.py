"""Plant care chat endpoints.

Handles multipart chat messages (text and/or up to five images), session
clearing and session monitoring. Errors are answered as ``{"error": ...}``.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile, status

from plantcare.agent.plant_agent import (
    AssistantServiceError,
    ImageInput,
    get_agent_service,
)
from plantcare.chat.config import MAX_ATTACHMENT_BYTES, MAX_ATTACHMENTS
from plantcare.models.schemas import (
    ChatReply,
    ErrorResponse,
    SessionClearedResponse,
    SessionsInfo,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai-chat", tags=["ai-chat"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


async def _read_images(images: list[UploadFile]) -> list[ImageInput]:
    """Read uploads and enforce count, type and size limits.

    Raises:
        AssistantServiceError: 400 if any upload breaks a limit.
    """
    if len(images) > MAX_ATTACHMENTS:
        raise AssistantServiceError(
            f"At most {MAX_ATTACHMENTS} images can be sent at once",
            status.HTTP_400_BAD_REQUEST,
        )

    inputs: list[ImageInput] = []
    for upload in images:
        mime_type = upload.content_type or ""
        if not mime_type.startswith("image/"):
            raise AssistantServiceError(
                "Only image files are allowed", status.HTTP_400_BAD_REQUEST
            )

        content = await upload.read()
        if len(content) > MAX_ATTACHMENT_BYTES:
            size_mb = len(content) / (1024 * 1024)
            raise AssistantServiceError(
                f"Image {upload.filename} ({size_mb:.1f}MB) exceeds maximum allowed (10MB)",
                status.HTTP_400_BAD_REQUEST,
            )
        inputs.append(ImageInput(content=content, mime_type=mime_type))
    return inputs


@router.post("/message", response_model=ChatReply, responses=_ERROR_RESPONSES)
async def send_message(
    message: Annotated[str | None, Form()] = None,
    session_id: Annotated[str | None, Form(alias="sessionId")] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> ChatReply:
    """Send a message to the plant care assistant.

    Accepts text, images, or both as multipart form data. The session id
    returned must be echoed on follow-up requests to keep the conversation.

    Raises:
        400: No text and no images, or an invalid image.
        500: Assistant failure or misconfiguration.
        503: Assistant temporarily unavailable.
    """
    text = (message or "").strip()
    uploads = images or []

    if not text and not uploads:
        raise AssistantServiceError(
            "Either message text or images must be provided",
            status.HTTP_400_BAD_REQUEST,
        )

    image_inputs = await _read_images(uploads)

    agent_service = get_agent_service()
    reply = await agent_service.ask(text or None, image_inputs, session_id or None)
    logger.info(
        f"Answered session {reply.session_id} ({len(image_inputs)} image(s), "
        f"{len(reply.message)} chars)"
    )

    return ChatReply(
        message=reply.message,
        session_id=reply.session_id,
        has_images=bool(image_inputs),
        image_count=len(image_inputs),
    )


@router.delete(
    "/session/{session_id}",
    response_model=SessionClearedResponse,
    responses={404: {"model": ErrorResponse}},
)
async def clear_session(session_id: str) -> SessionClearedResponse:
    """Forget a chat session and its history."""
    if not get_agent_service().clear_session(session_id):
        raise AssistantServiceError("Chat session not found", status.HTTP_404_NOT_FOUND)
    return SessionClearedResponse(message="Chat session cleared successfully")


@router.get("/sessions", response_model=SessionsInfo)
async def list_sessions() -> SessionsInfo:
    """Report active sessions (for monitoring)."""
    agent_service = get_agent_service()
    agent_service.prune_sessions()
    sessions = agent_service.sessions
    return SessionsInfo(active_sessions=len(sessions), session_ids=sessions.ids())
