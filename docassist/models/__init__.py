"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - CopilotRequest: Inbound chat widget envelope
    - ContextItem: Grounding text supplied with a chat request
    - CopilotResponse: Widget response with one assistant message
    - ErrorResponse: Widget error envelope
    - AnalyzeImageRequest / AnalyzeImageResponse: Image description payloads
"""

from docassist.models.schemas import (
    AnalyzeImageRequest,
    AnalyzeImageResponse,
    ContextItem,
    CopilotRequest,
    CopilotResponse,
    ErrorResponse,
)

__all__ = [
    "AnalyzeImageRequest",
    "AnalyzeImageResponse",
    "ContextItem",
    "CopilotRequest",
    "CopilotResponse",
    "ErrorResponse",
]
