"""Test package for Plant Care AI.

Structure:
    - unit/: Parser, attachments, request assembly, session and agent tests
    - integration/: API endpoints and the HTTP client against the real app

The LLM is replaced by a patched Agno agent unless an API key is set.
Uses pytest-check for soft assertions where several fields are verified.
"""
