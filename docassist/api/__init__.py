"""FastAPI endpoints for the document assistant.

HTTP routes with async request handling. Every failure is answered with a
JSON payload; no request is left unanswered.

Endpoints:
    - GET /health: Service health status
    - POST /api/copilotkit: Chat widget requests
    - POST /api/analyze-image: Image descriptions
"""

from docassist.api.app import app, create_app

__all__ = ["app", "create_app"]
