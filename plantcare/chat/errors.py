"""Errors raised while exchanging messages with the assistant.

Every error here is recoverable: the session turns it into an error bubble
and goes back to idle.
"""

GENERIC_FAILURE_MESSAGE = "Sorry, something went wrong. Please try again."
SERVER_FAILURE_FALLBACK = "Failed to send message"


class ChatError(Exception):
    """Base class for failures of a single chat exchange.

    Attributes:
        message: User-facing text for the error bubble.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TransportFailure(ChatError):
    """Network failure, timeout, or a response body that cannot be read."""

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE) -> None:
        super().__init__(message)


class ServerReportedError(ChatError):
    """Non-2xx response. The message is the server's ``error`` text."""

    def __init__(self, message: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(message)
