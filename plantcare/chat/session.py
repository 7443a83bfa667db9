"""Conversation session: history, session id and the single-flight guard.

The session is the only owner of chat state. It moves between two states:

    IDLE --submit--> SUBMITTING --reply or error--> IDLE

A submit made while a request is outstanding, or with an empty draft, is a
silent no-op. Failures never end the session; they become error messages in
the history.
"""

import logging
from collections.abc import Callable
from enum import Enum

from plantcare.chat.composer import Composer
from plantcare.chat.errors import ChatError
from plantcare.chat.messages import ConversationMessage, MessageRole
from plantcare.chat.request import build_request
from plantcare.chat.transport import ChatTransport

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Observable states of a chat session."""

    IDLE = "idle"
    SUBMITTING = "submitting"


class ChatSession:
    """Client-side state for one conversation with the assistant.

    Attributes:
        transport: Delivers requests to the assistant.
    """

    def __init__(self, transport: ChatTransport) -> None:
        self.transport = transport
        self._session_id: str | None = None
        self._history: list[ConversationMessage] = []
        self._in_flight = False
        self._closed = False
        self._listeners: list[Callable[[ConversationMessage], None]] = []

    @property
    def session_id(self) -> str | None:
        """Server-assigned id, set once by the first successful reply."""
        return self._session_id

    @property
    def history(self) -> tuple[ConversationMessage, ...]:
        return tuple(self._history)

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def state(self) -> SessionState:
        return SessionState.SUBMITTING if self._in_flight else SessionState.IDLE

    @property
    def closed(self) -> bool:
        return self._closed

    def add_listener(self, listener: Callable[[ConversationMessage], None]) -> None:
        """Register a callback invoked after each message is appended."""
        self._listeners.append(listener)

    def can_submit(self, composer: Composer) -> bool:
        """Whether :meth:`submit` would accept the composer's draft."""
        return not self._closed and not self._in_flight and composer.has_content

    def _append(self, message: ConversationMessage) -> None:
        self._history.append(message)
        for listener in self._listeners:
            listener(message)

    def _adopt_session_id(self, session_id: str | None) -> None:
        if self._session_id is None and session_id:
            self._session_id = session_id
            logger.info(f"Joined assistant session {session_id}")

    async def submit(self, composer: Composer) -> bool:
        """Send the composer's draft and record the outcome.

        The user message is appended and the composer emptied before the
        request goes out. The reply, or an error message, is appended once
        the transport returns. An exception raised by a listener propagates,
        but the session is back in IDLE by then.

        Args:
            composer: Draft to send. Its attachments move into the history.

        Returns:
            True if a request was issued, False if the guard rejected it.
        """
        if not self.can_submit(composer):
            return False

        # Raised before the user message is appended so listeners see SUBMITTING
        self._in_flight = True
        text, attachments = composer.take()
        try:
            self._append(
                ConversationMessage(role=MessageRole.USER, text=text, attachments=attachments)
            )
            payload = build_request(text, self._session_id, attachments)
            reply = await self.transport.send(payload)
        except ChatError as e:
            outcome = ConversationMessage(role=MessageRole.ERROR, text=e.message)
        else:
            self._adopt_session_id(reply.session_id)
            outcome = ConversationMessage(role=MessageRole.ASSISTANT, text=reply.message)
        finally:
            self._in_flight = False

        self._append(outcome)
        return True

    def close(self) -> None:
        """Dispose of the session and release every message preview."""
        if self._closed:
            return
        self._closed = True
        for message in self._history:
            message.release_previews()
        logger.debug(f"Closed chat session {self._session_id or '(unassigned)'}")
