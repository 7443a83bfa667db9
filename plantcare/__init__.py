"""Plant Care AI - conversational assistant for plant care questions.

Combines NiceGUI for the chat interface, httpx for the client transport,
FastAPI for the assistant API, Agno for agent orchestration,
and Pydantic for data validation.

Components:
    - chat: Session state, attachments, request assembly and transport
    - parsing: Assistant reply text to typed document blocks
    - ui: Web interface for chat interactions
    - api: HTTP endpoints for the assistant
    - agent: LLM orchestration with per-session memory
    - models: Request/response schemas
"""

__version__ = "0.1.0"
