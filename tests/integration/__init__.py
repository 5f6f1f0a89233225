"""Integration tests for components working together as a system.

Coverage:
    - POST /api/copilotkit with real request parsing and routing
    - POST /api/analyze-image with the vision gate
    - Upload normalization feeding the chat request built by the UI session

The LLM provider is replaced through FastAPI dependency overrides.
"""
