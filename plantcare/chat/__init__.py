"""Chat client core: attachments, request assembly and session state.

Responsibilities:
    - Attachment validation and preview lifetime
    - Draft composition and multipart request assembly
    - Single-flight session state with server session continuity
    - HTTP transport with error mapping

Everything here is UI-agnostic; the NiceGUI page only wires it up.
"""

from plantcare.chat.attachments import (
    Attachment,
    PreviewRegistry,
    SelectionResult,
    merge_selection,
    remove_at,
)
from plantcare.chat.composer import Composer
from plantcare.chat.config import ClientConfig, get_client_config
from plantcare.chat.errors import ChatError, ServerReportedError, TransportFailure
from plantcare.chat.messages import ConversationMessage, MessageRole
from plantcare.chat.request import ChatRequestPayload, build_request
from plantcare.chat.session import ChatSession, SessionState
from plantcare.chat.transport import ChatTransport, HttpChatTransport

__all__ = [
    "Attachment",
    "ChatError",
    "ChatRequestPayload",
    "ChatSession",
    "ChatTransport",
    "ClientConfig",
    "Composer",
    "ConversationMessage",
    "HttpChatTransport",
    "MessageRole",
    "PreviewRegistry",
    "SelectionResult",
    "ServerReportedError",
    "SessionState",
    "TransportFailure",
    "build_request",
    "get_client_config",
    "merge_selection",
    "remove_at",
]
