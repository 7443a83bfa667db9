"""Agno agent service for the plant care assistant.

Core module for the assistant's answers and session handling.

The service wraps a single Agno ``Agent``. Conversation history lives in an
in-memory Agno database keyed by session id, so each chat session keeps its
own context while the agent instance is shared. A small registry records
which session ids are live and when they were last used, which lets the API
list, clear and prune sessions.
"""

import logging
import secrets
import string
import time

from agno.agent import Agent
from agno.db.in_memory import InMemoryDb
from agno.media import Image
from agno.models.openai import OpenAIChat
from pydantic import BaseModel

from plantcare.agent.config import AgentConfig, get_agent_config

logger = logging.getLogger(__name__)

SYSTEM_DESCRIPTION = (
    'You are a specialized AI Plant Care Assistant for "Greenify", a plant '
    "e-commerce platform. You ONLY answer questions related to plants, "
    "gardening, and botanical topics."
)

INSTRUCTIONS = [
    "Give plant care advice: watering, lighting, fertilizing, pruning, repotting.",
    "Identify plants, plant diseases and pests, and suggest treatments.",
    "Cover soil and nutrients, propagation, seasonal care, plant selection and garden planning.",
    "When analyzing images, focus only on plant-related observations.",
    "If uncertain about a diagnosis, recommend consulting local experts.",
    "Include warnings about toxic plants when relevant.",
    "Structure advice with short paragraphs, 'Title:' headings, '*' bullet points "
    "and **bold** key terms.",
    "If asked about non-plant topics, respond with: \"I'm specifically designed to help "
    "with plant care and gardening questions. Please ask me about plant care, "
    'identification, diseases, or any other plant-related topics!"',
]

IMAGE_ONLY_PROMPT = "Please look at these plant photos and tell me what you see."

GENERIC_ERROR = "Failed to process your request. Please try again."
CONFIG_ERROR = "AI service configuration error. Please try again later."
SAFETY_ERROR = "Content not allowed. Please ensure your message and images are appropriate."
QUOTA_ERROR = "AI service temporarily unavailable. Please try again later."

_ID_ALPHABET = string.ascii_lowercase + string.digits


class AssistantServiceError(Exception):
    """Raised when the assistant cannot answer.

    Attributes:
        message: User-facing error text.
        status_code: HTTP status the API should answer with.
    """

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ImageInput(BaseModel):
    """An uploaded image forwarded to the model."""

    content: bytes
    mime_type: str


class AssistantReply(BaseModel):
    """Reply text and the session it belongs to."""

    message: str
    session_id: str


def new_session_id(now: float | None = None) -> str:
    """Create an id of the form ``session_<epoch ms>_<9 base36 chars>``."""
    millis = int((time.time() if now is None else now) * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"session_{millis}_{suffix}"


def classify_provider_error(error: Exception) -> AssistantServiceError:
    """Map a provider exception to a user-facing error and status code."""
    text = str(error).upper()
    if "API_KEY" in text or "API KEY" in text:
        return AssistantServiceError(CONFIG_ERROR, 500)
    if "SAFETY" in text:
        return AssistantServiceError(SAFETY_ERROR, 400)
    if "QUOTA" in text or "RATE LIMIT" in text:
        return AssistantServiceError(QUOTA_ERROR, 503)
    return AssistantServiceError(GENERIC_ERROR, 500)


class SessionRegistry:
    """Live chat session ids with their last activity time."""

    def __init__(self, timeout: float) -> None:
        self._timeout = timeout
        self._last_used: dict[str, float] = {}

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._last_used

    def __len__(self) -> int:
        return len(self._last_used)

    def ids(self) -> list[str]:
        return list(self._last_used)

    def touch(self, session_id: str, now: float | None = None) -> None:
        self._last_used[session_id] = time.time() if now is None else now

    def remove(self, session_id: str) -> bool:
        return self._last_used.pop(session_id, None) is not None

    def prune(self, now: float | None = None) -> list[str]:
        """Drop sessions idle for longer than the timeout.

        Returns:
            The ids that were removed.
        """
        cutoff = (time.time() if now is None else now) - self._timeout
        expired = [sid for sid, used in self._last_used.items() if used < cutoff]
        for session_id in expired:
            del self._last_used[session_id]
        return expired


class AgentService:
    """Service for managing the Agno plant care agent.

    Wraps Agno's Agent with:
    - In-memory Agno storage for per-session history
    - A session registry for listing, clearing and pruning sessions
    - Image input forwarded as Agno media
    - Provider error mapping to user-facing messages
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the agent service.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._storage = InMemoryDb()
        self._agent = self._create_agent()
        self.sessions = SessionRegistry(timeout=self._config.session_timeout)

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        Returns:
            Configured Agent with OpenAI model and in-memory storage.
        """
        model = OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

        return Agent(
            model=model,
            db=self._storage,
            description=SYSTEM_DESCRIPTION,
            instructions=INSTRUCTIONS,
            # Last 10 runs of the session are replayed as context
            add_history_to_context=True,
            num_history_runs=10,
            markdown=True,
        )

    def prune_sessions(self) -> list[str]:
        """Forget sessions idle for longer than the configured timeout."""
        expired = self.sessions.prune()
        for stale in expired:
            self._storage.delete_session(session_id=stale)
            logger.info(f"Pruned idle chat session {stale}")
        return expired

    def resolve_session(self, session_id: str | None) -> str:
        """Return the session to use, registering a new one when needed.

        A known id is reused. An unknown id sent by the client is adopted
        as a fresh session, and a missing id gets a newly generated one.
        """
        self.prune_sessions()

        if session_id and session_id in self.sessions:
            self.sessions.touch(session_id)
            return session_id

        resolved = session_id or new_session_id()
        self.sessions.touch(resolved)
        logger.info(f"Started chat session {resolved}")
        return resolved

    async def ask(
        self,
        message: str | None,
        images: list[ImageInput],
        session_id: str | None = None,
    ) -> AssistantReply:
        """Send text and/or images to the agent within a session.

        Args:
            message: The user's question, may be empty when images are sent.
            images: Uploaded plant photos in upload order.
            session_id: Session to continue, if any.

        Returns:
            The reply text with the session id it belongs to.

        Raises:
            AssistantServiceError: If the model call fails.
        """
        resolved = self.resolve_session(session_id)
        prompt = (message or "").strip() or IMAGE_ONLY_PROMPT
        media = [Image(content=image.content, mime_type=image.mime_type) for image in images]

        try:
            response = await self._agent.arun(
                prompt,
                images=media or None,
                session_id=resolved,
            )
        except Exception as e:
            logger.error(f"Assistant call failed for session {resolved}: {e}")
            raise classify_provider_error(e) from e

        return AssistantReply(message=response.content or "", session_id=resolved)

    def clear_session(self, session_id: str) -> bool:
        """Forget a session and its stored history.

        Returns:
            True if the session existed.
        """
        if not self.sessions.remove(session_id):
            return False
        self._storage.delete_session(session_id=session_id)
        logger.info(f"Cleared chat session {session_id}")
        return True


# Module-level singleton instance
_agent_service: AgentService | None = None


def get_agent_service() -> AgentService:
    """Get or create the global agent service.

    Uses singleton pattern for resource efficiency.

    Returns:
        The AgentService instance.
    """
    global _agent_service
    if _agent_service is None:
        _agent_service = AgentService()
    return _agent_service
