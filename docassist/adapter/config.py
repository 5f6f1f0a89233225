"""Provider configuration with environment variable loading.

Pydantic-based settings for the chat adapter and the vision helper.
Groq (free tier, OpenAI-compatible endpoint) takes precedence over OpenAI.
"""

import os

from dotenv import load_dotenv
from openai import AsyncOpenAI
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class Settings(BaseModel):
    """Credentials and model choices read from the environment.

    Attributes:
        groq_api_key: Primary (free-tier) credential.
        openai_api_key: Fallback credential, the only one allowing vision.
        groq_base_url: OpenAI-compatible Groq endpoint.
        openai_base_url: OpenAI endpoint override (None for the SDK default).
        groq_model: Chat model used with the Groq credential.
        openai_model: Chat model used with the OpenAI credential.
        vision_model: Multimodal model used for image descriptions.
        vision_max_tokens: Output cap for one image description.
    """

    groq_api_key: str = Field(
        default_factory=lambda: os.getenv("GROQ_API_KEY", ""),
        description="Groq API key (primary provider)",
    )
    openai_api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""),
        description="OpenAI API key (fallback provider)",
    )
    groq_base_url: str = Field(
        default_factory=lambda: os.getenv("GROQ_BASE_URL", GROQ_BASE_URL),
    )
    openai_base_url: str | None = Field(
        default_factory=lambda: os.getenv("OPENAI_BASE_URL") or None,
    )
    groq_model: str = Field(
        default_factory=lambda: os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile"),
    )
    openai_model: str = Field(
        default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-3.5-turbo"),
    )
    vision_model: str = Field(
        default_factory=lambda: os.getenv("VISION_MODEL", "gpt-4o-mini"),
    )
    vision_max_tokens: int = Field(
        default_factory=lambda: int(os.getenv("VISION_MAX_TOKENS", "500")),
        ge=1,
        le=128000,
        description="Maximum tokens in one image description",
    )

    @field_validator("groq_api_key", "openai_api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        """Treat whitespace-only keys as missing."""
        return v.strip()


class ProviderConfig(BaseModel):
    """One resolved chat-completion provider.

    Attributes:
        name: Provider label ("groq" or "openai").
        endpoint: API base URL (None for the OpenAI default).
        model: Model identifier to request.
        api_key: Credential for the endpoint.
    """

    name: str
    endpoint: str | None = None
    model: str
    api_key: str

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("API key required. Set GROQ_API_KEY or OPENAI_API_KEY in .env")
        return v.strip()


def get_settings() -> Settings:
    """Create settings from environment."""
    return Settings()


def resolve_chat_provider(settings: Settings) -> ProviderConfig | None:
    """Select the chat provider: Groq when its key is set, else OpenAI.

    Returns:
        The provider, or None when no credential is configured.
    """
    if settings.groq_api_key:
        return ProviderConfig(
            name="groq",
            endpoint=settings.groq_base_url,
            model=settings.groq_model,
            api_key=settings.groq_api_key,
        )
    if settings.openai_api_key:
        return ProviderConfig(
            name="openai",
            endpoint=settings.openai_base_url,
            model=settings.openai_model,
            api_key=settings.openai_api_key,
        )
    return None


def resolve_vision_provider(settings: Settings) -> ProviderConfig | None:
    """Select the vision provider.

    Only OpenAI serves vision. A configured Groq key wins provider selection,
    so vision is enabled only with an OpenAI key and no Groq key.
    """
    if settings.openai_api_key and not settings.groq_api_key:
        return ProviderConfig(
            name="openai",
            endpoint=settings.openai_base_url,
            model=settings.vision_model,
            api_key=settings.openai_api_key,
        )
    return None


def create_client(provider: ProviderConfig) -> AsyncOpenAI:
    """Build an OpenAI SDK client for a provider."""
    return AsyncOpenAI(api_key=provider.api_key, base_url=provider.endpoint)
