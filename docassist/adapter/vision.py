"""Vision helper: one multimodal call describing an uploaded image."""

import logging

from openai import AsyncOpenAI

from docassist.adapter.config import (
    ProviderConfig,
    Settings,
    create_client,
    get_settings,
    resolve_vision_provider,
)

logger = logging.getLogger(__name__)

VISION_PROMPT = "Describe this image in detail. What do you see?"
EMPTY_DESCRIPTION = "Unable to analyze image"


def vision_placeholder(filename: str) -> str:
    """Fixed text returned when no vision-capable provider is configured."""
    return (
        f"Image: {filename}. Vision analysis requires a vision-capable model. "
        "To enable it, configure OPENAI_API_KEY without GROQ_API_KEY."
    )


class VisionService:
    """Describes images when a vision-capable provider is configured.

    Without one, every request gets the placeholder text and no API call
    is made.
    """

    def __init__(
        self,
        provider: ProviderConfig | None,
        client: AsyncOpenAI | None = None,
        max_tokens: int = 500,
    ) -> None:
        self._provider = provider
        self._max_tokens = max_tokens
        self._client = client
        if self._client is None and provider is not None:
            self._client = create_client(provider)

    @property
    def enabled(self) -> bool:
        return self._provider is not None and self._client is not None

    async def describe(self, image: str, filename: str) -> str:
        """Describe an image given as a data URL.

        Raises:
            openai.OpenAIError: If the upstream call fails.
        """
        if not self.enabled:
            return vision_placeholder(filename)

        response = await self._client.chat.completions.create(
            model=self._provider.model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": VISION_PROMPT},
                        {"type": "image_url", "image_url": {"url": image}},
                    ],
                }
            ],
            max_tokens=self._max_tokens,
        )
        logger.info(f"Image described: {filename}")

        content = response.choices[0].message.content if response.choices else None
        return content or EMPTY_DESCRIPTION


def build_vision_service(settings: Settings | None = None) -> VisionService:
    settings = settings or get_settings()
    return VisionService(
        resolve_vision_provider(settings),
        max_tokens=settings.vision_max_tokens,
    )


# Module-level singleton instance
_vision_service: VisionService | None = None


def get_vision_service() -> VisionService:
    """Get or create the global vision service."""
    global _vision_service
    if _vision_service is None:
        _vision_service = build_vision_service()
    return _vision_service
