"""Conversation messages as stored in the session history."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from plantcare.chat.attachments import Attachment


class MessageRole(str, Enum):
    """Who a history entry belongs to."""

    USER = "user"
    ASSISTANT = "assistant"
    ERROR = "error"


class ConversationMessage(BaseModel):
    """A single entry in the conversation history. Immutable once created.

    Attributes:
        id: Unique message identifier.
        role: User, assistant, or error bubble.
        text: Raw message text. Assistant text is parsed at render time.
        attachments: Images sent with a user message.
        created_at: Local creation time.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: MessageRole
    text: str = ""
    attachments: tuple[Attachment, ...] = ()
    created_at: datetime = Field(default_factory=datetime.now)

    def release_previews(self) -> None:
        for attachment in self.attachments:
            attachment.release_preview()
