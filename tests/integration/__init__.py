"""Integration tests for components working together as a system.

Coverage:
    - API endpoints with real multipart HTTP requests
    - Chat client session talking to the real FastAPI app over ASGI
    - Live assistant answers (when an API key is configured)
"""
