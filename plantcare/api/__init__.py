"""FastAPI endpoints for the plant care assistant.

HTTP routes with async request handling and multipart image uploads.

Endpoints:
    - GET /health: Service health status
    - POST /api/ai-chat/message: Text and/or image questions
    - DELETE /api/ai-chat/session/{id}: Forget a chat session
    - GET /api/ai-chat/sessions: Active session overview
"""

from plantcare.api.app import app, create_app

__all__ = ["app", "create_app"]
