"""Image description endpoint.

Wraps the vision helper; returns placeholder text when vision is not configured.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from docassist.adapter.vision import VisionService, get_vision_service
from docassist.models.schemas import AnalyzeImageRequest, AnalyzeImageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["images"])


@router.post("/analyze-image", response_model=AnalyzeImageResponse)
async def analyze_image(
    request: Request,
    vision: VisionService = Depends(get_vision_service),
) -> AnalyzeImageResponse | JSONResponse:
    """Describe an uploaded image.

    Expects ``{"image": <data URL>, "filename": <name>}``.

    Returns:
        AnalyzeImageResponse with the description or placeholder text.

    Raises:
        500: Malformed body or upstream vision failure, reported as
            ``{"error": "Failed to analyze image"}``.
    """
    try:
        body = AnalyzeImageRequest.model_validate(await request.json())
        description = await vision.describe(body.image, body.filename)
    except Exception as e:
        logger.error(f"Image analysis error: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to analyze image"},
        )

    return AnalyzeImageResponse(description=description)
