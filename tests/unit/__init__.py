"""Unit tests for individual components in isolation.

Coverage:
    - parsing/: Block classification and inline emphasis
    - chat/: Attachment validation, composer, request assembly, session, transport
    - agent/: Agent configuration, session registry and error mapping
    - ui/: HTML rendering of parsed replies
"""
