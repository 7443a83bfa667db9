from pydantic import BaseModel, ConfigDict, Field


class ChatReply(BaseModel):
    """Successful answer from the chat endpoint.

    Attributes:
        message: The assistant's raw reply text.
        session_id: Session to echo on follow-up requests.
        has_images: Whether the request carried images.
        image_count: Number of images the assistant received.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str
    session_id: str | None = Field(None, alias="sessionId")
    has_images: bool = Field(False, alias="hasImages")
    image_count: int = Field(0, ge=0, alias="imageCount")


class ErrorResponse(BaseModel):
    """Error body returned with every non-2xx chat response.

    Attributes:
        error: Human readable error, shown verbatim to the user.
    """

    error: str


class SessionClearedResponse(BaseModel):
    """Response after a chat session is forgotten by the server."""

    message: str


class SessionsInfo(BaseModel):
    """Active session overview for monitoring.

    Attributes:
        active_sessions: Number of live sessions.
        session_ids: Their identifiers, oldest first.
    """

    model_config = ConfigDict(populate_by_name=True)

    active_sessions: int = Field(..., ge=0, alias="activeSessions")
    session_ids: list[str] = Field(default_factory=list, alias="sessionIds")
