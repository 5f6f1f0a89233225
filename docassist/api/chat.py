"""Chat widget endpoint.

Receives widget-protocol envelopes and answers them through the chat adapter.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from docassist.adapter.chat_adapter import ChatAdapter, get_chat_adapter
from docassist.models.schemas import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/copilotkit", response_model=None)
async def copilotkit(
    request: Request,
    adapter: ChatAdapter = Depends(get_chat_adapter),
) -> dict[str, Any] | JSONResponse:
    """Answer one chat widget request.

    Only the generateCopilotResponse operation produces a reply; any other
    operation gets an empty data payload.

    Returns:
        The widget response envelope.

    Raises:
        500: Malformed body or upstream completion failure, reported as
            ``{"errors": [{"message": ...}]}``.
    """
    try:
        payload = await request.json()
        return await adapter.handle(payload)
    except Exception as e:
        logger.error(f"Chat request failed: {e}")
        error = ErrorResponse(errors=[ErrorDetail(message=str(e) or "Unknown error")])
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error.model_dump(),
        )
