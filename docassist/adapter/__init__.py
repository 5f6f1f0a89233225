"""LLM-facing adapters.

Bridges the chat widget and the chat-completion API.

Responsibilities:
    - Provider selection from configured credentials (Groq first, then OpenAI)
    - Widget request to chat-completion message conversion
    - System prompt synthesis from caller-supplied context items
    - Widget response envelope construction
    - Optional image descriptions through a vision-capable model

Holds no cross-request state. Maintains clean separation from the HTTP layer.
"""

from docassist.adapter.chat_adapter import ChatAdapter, get_chat_adapter
from docassist.adapter.config import (
    ProviderConfig,
    Settings,
    get_settings,
    resolve_chat_provider,
    resolve_vision_provider,
)
from docassist.adapter.vision import VisionService, get_vision_service

__all__ = [
    "ChatAdapter",
    "ProviderConfig",
    "Settings",
    "VisionService",
    "get_chat_adapter",
    "get_settings",
    "get_vision_service",
    "resolve_chat_provider",
    "resolve_vision_provider",
]
