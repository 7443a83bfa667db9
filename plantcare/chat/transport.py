"""HTTP transport for the assistant chat API.

Performs the multipart exchange with httpx and maps every failure onto the
:mod:`plantcare.chat.errors` taxonomy, so callers only ever see a
:class:`ChatReply` or a :class:`ChatError`.
"""

import logging
from typing import Protocol

import httpx
from pydantic import ValidationError

from plantcare.chat.config import ClientConfig, get_client_config
from plantcare.chat.errors import (
    SERVER_FAILURE_FALLBACK,
    ServerReportedError,
    TransportFailure,
)
from plantcare.chat.request import ChatRequestPayload
from plantcare.models.schemas import ChatReply

logger = logging.getLogger(__name__)

CHAT_ENDPOINT = "/api/ai-chat/message"
SESSION_ENDPOINT = "/api/ai-chat/session/{session_id}"


class ChatTransport(Protocol):
    """Anything able to deliver a chat request and return the reply."""

    async def send(self, payload: ChatRequestPayload) -> ChatReply: ...


def _error_from_response(response: httpx.Response) -> ServerReportedError | TransportFailure:
    """Build the error for a non-2xx response."""
    try:
        body = response.json()
    except ValueError:
        logger.warning(f"Chat request failed with HTTP {response.status_code} and no JSON body")
        return TransportFailure()

    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, str) or not error:
        error = SERVER_FAILURE_FALLBACK
    logger.warning(f"Chat request failed with HTTP {response.status_code}: {error}")
    return ServerReportedError(error, response.status_code)


def read_reply(response: httpx.Response) -> ChatReply:
    """Decode a chat response.

    Raises:
        ServerReportedError: Non-2xx response with a JSON body.
        TransportFailure: Unreadable body.
    """
    if not response.is_success:
        raise _error_from_response(response)

    try:
        return ChatReply.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        logger.warning(f"Malformed chat reply: {e}")
        raise TransportFailure() from e


class HttpChatTransport:
    """Chat transport backed by ``httpx.AsyncClient``.

    A fresh client is opened per request. Pass ``transport`` to route
    requests somewhere other than the network (tests use
    ``httpx.ASGITransport`` and ``httpx.MockTransport``).
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or get_client_config()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.api_base_url,
            timeout=self._config.request_timeout,
            transport=self._transport,
        )

    async def send(self, payload: ChatRequestPayload) -> ChatReply:
        """POST the payload to the chat endpoint.

        Args:
            payload: Assembled request.

        Returns:
            The decoded reply.

        Raises:
            ServerReportedError: The server answered with an error.
            TransportFailure: Network error, timeout, or unreadable body.
        """
        async with self._client() as client:
            try:
                response = await client.post(CHAT_ENDPOINT, files=payload.to_multipart())
            except httpx.RequestError as e:
                logger.warning(f"Chat request could not be delivered: {e}")
                raise TransportFailure() from e
        return read_reply(response)

    async def clear_session(self, session_id: str) -> bool:
        """Ask the server to forget a session.

        Best effort: failures are logged and reported as ``False``.
        """
        async with self._client() as client:
            try:
                response = await client.delete(SESSION_ENDPOINT.format(session_id=session_id))
            except httpx.RequestError as e:
                logger.warning(f"Could not clear session {session_id}: {e}")
                return False
        return response.is_success
