"""NiceGUI interface - visualization layer for chat interactions.

Responsibilities:
    - Chat message display with markdown rendering
    - File upload with in-process document normalization
    - Attachment chips and image thumbnails
    - Session-scoped document context sent with every chat request

All LLM work goes through the API; files are parsed here, before any
network call.
"""
