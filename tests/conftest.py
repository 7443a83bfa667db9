"""Pytest fixtures and shared test configuration.

Fixtures:
    - client_config: Client settings pointing at a test host
    - composer: Empty draft buffer with its own preview registry
    - fake_transport: In-memory transport recording chat requests
    - agent_service: Real AgentService with the Agno agent patched out
    - async_client: HTTPX client bound to the FastAPI app
"""

import asyncio
from collections.abc import AsyncGenerator, Iterator
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from plantcare.agent.config import AgentConfig
from plantcare.agent.plant_agent import AgentService
from plantcare.api import app
from plantcare.chat.attachments import Attachment
from plantcare.chat.composer import Composer
from plantcare.chat.config import ClientConfig
from plantcare.chat.errors import ChatError
from plantcare.chat.request import ChatRequestPayload
from plantcare.models.schemas import ChatReply


def make_image(
    name: str = "leaf.jpg",
    mime_type: str = "image/jpeg",
    size_bytes: int | None = None,
) -> Attachment:
    """Build a small attachment; ``size_bytes`` overrides the reported size."""
    return Attachment(
        data=f"bytes-of-{name}".encode(),
        mime_type=mime_type,
        name=name,
        size_bytes=size_bytes,
    )


class FakeTransport:
    """Transport double answering from a queue of replies or errors.

    Set ``gate`` to hold every request until the event is set.
    """

    def __init__(self, outcomes: list[ChatReply | ChatError] | None = None) -> None:
        self.outcomes = list(outcomes or [])
        self.requests: list[ChatRequestPayload] = []
        self.gate: asyncio.Event | None = None

    async def send(self, payload: ChatRequestPayload) -> ChatReply:
        self.requests.append(payload)
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0) if self.outcomes else ChatReply(message="ok")
        if isinstance(outcome, ChatError):
            raise outcome
        return outcome


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(api_base_url="http://test/", request_timeout=5.0)


@pytest.fixture
def composer(client_config: ClientConfig) -> Composer:
    return Composer(client_config)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def agent_service() -> Iterator[AgentService]:
    """AgentService whose Agno agent, model, storage and media are mocks.

    ``get_agent_service`` in the routes returns this instance. The agent
    answers "Water twice a week." unless a test changes ``arun``.
    """
    with (
        patch("plantcare.agent.plant_agent.OpenAIChat"),
        patch("plantcare.agent.plant_agent.Agent"),
        patch("plantcare.agent.plant_agent.InMemoryDb"),
        patch("plantcare.agent.plant_agent.Image"),
    ):
        service = AgentService(config=AgentConfig(api_key="sk-test"))
        service._agent.arun = AsyncMock(
            return_value=SimpleNamespace(content="Water twice a week.")
        )
        with patch("plantcare.api.routes.get_agent_service", return_value=service):
            yield service


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
