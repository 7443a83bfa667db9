"""Agno agent logic for the plant care assistant.

Handles multi-modal questions (text and plant photos) with per-session
conversation memory.

Responsibilities:
    - Agent initialization with OpenAI-compatible vision models
    - Session registry with idle pruning
    - Provider error mapping to user-facing messages

Leverages the Agno framework for agent lifecycle management.
Maintains clean separation from the HTTP layer.
"""

from plantcare.agent.config import AgentConfig, get_agent_config
from plantcare.agent.plant_agent import (
    AgentService,
    AssistantReply,
    AssistantServiceError,
    ImageInput,
    get_agent_service,
)

__all__ = [
    "AgentConfig",
    "AgentService",
    "AssistantReply",
    "AssistantServiceError",
    "ImageInput",
    "get_agent_config",
    "get_agent_service",
]
