"""Document Assistant - chat with an LLM about uploaded files.

Combines FastAPI for the chat endpoints, the OpenAI SDK for chat completions,
NiceGUI for the browser interface, and Pydantic for data validation.

Components:
    - api: HTTP endpoints for the chat widget and image descriptions
    - adapter: Widget-to-completion translation and provider selection
    - parsing: File normalization into bounded prompt text
    - ui: Web interface for uploads and chat
    - models: Widget protocol request/response schemas
"""

__version__ = "0.1.0"
