"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat history display with formatted assistant replies
    - Image selection with thumbnails and removal
    - Loading indicator while a request is outstanding
    - New chat (disposes the current session)

Contains no chat logic of its own. Delegates to plantcare.chat and renders
parsed replies through plantcare.ui.formatting.
"""
