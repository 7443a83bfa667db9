"""Pydantic models for the chat API wire format.

Shared by the FastAPI routes and the HTTP client so both ends agree on
field names (the wire uses camelCase, Python code uses snake_case).

Models:
    - ChatReply: Successful chat answer with session id
    - ErrorResponse: Error body for any failed chat call
    - SessionClearedResponse: Confirmation of a session deletion
    - SessionsInfo: Active session overview
"""

from plantcare.models.schemas import (
    ChatReply,
    ErrorResponse,
    SessionClearedResponse,
    SessionsInfo,
)

__all__ = ["ChatReply", "ErrorResponse", "SessionClearedResponse", "SessionsInfo"]
