"""Chat adapter between the chat widget protocol and a chat-completion API.

Core module for the assistant's conversation handling.

Each widget request becomes exactly one chat-completion call:

1. **System prompt ownership** - Every inbound system message, the widget's
   own default instructions included, is dropped and replaced by a single
   synthesized one carrying the caller's context items.

2. **Injected provider** - The adapter receives a ProviderConfig and a client
   at construction. Provider choice happens once, in config.py.

3. **Single blocking call** - No streaming, no retries. The one resulting
   message is wrapped into the widget's nested response envelope.

4. **Permissive protocol** - Operations other than generateCopilotResponse
   answer with an empty data payload instead of an error.
"""

import logging
import uuid
from typing import Any

from openai import AsyncOpenAI

from docassist.adapter.config import (
    ProviderConfig,
    create_client,
    get_settings,
    resolve_chat_provider,
)
from docassist.models.schemas import (
    GENERATE_OPERATION,
    ContextItem,
    CopilotRequest,
    CopilotResponse,
    TextMessageOutput,
    WidgetMessage,
)

logger = logging.getLogger(__name__)

ASSISTANT_PERSONA = (
    "You are a helpful AI assistant. Answer questions directly and concisely "
    "based on the conversation and any provided context."
)

DATA_GUIDANCE = (
    "When analyzing data:\n"
    "- For CSV/Excel data: Provide insights, summaries, and answer specific "
    "questions about the data\n"
    "- For images: Note that image analysis is limited, describe what you can "
    "infer from the filename\n"
    "- Always be specific and reference the actual data when answering"
)

FALLBACK_REPLY = "I'm here to help!"

NO_PROVIDER_REPLY = (
    "No language model provider is configured. "
    "Set GROQ_API_KEY or OPENAI_API_KEY to enable the assistant."
)


def join_context(context: list[ContextItem]) -> str:
    """Render context items as "description: value" blocks in input order."""
    return "\n\n".join(f"{item.description}: {item.value}" for item in context)


def build_system_prompt(context_text: str) -> str:
    """Compose the single system message sent upstream."""
    if context_text:
        context_section = f"Available Context:\n{context_text}"
    else:
        context_section = "No additional context provided."
    return f"{ASSISTANT_PERSONA}\n\n{context_section}\n\n{DATA_GUIDANCE}"


def to_completion_messages(
    messages: list[WidgetMessage],
    context: list[ContextItem],
) -> list[dict[str, str]]:
    """Convert widget messages into chat-completion messages.

    Keeps text messages with content, drops every system message, and
    prepends one synthesized system message built from the context.
    """
    converted = [
        {"role": message.text_message.role, "content": message.text_message.content}
        for message in messages
        if message.text_message is not None and message.text_message.content
    ]
    converted = [message for message in converted if message["role"] != "system"]

    system_message = {"role": "system", "content": build_system_prompt(join_context(context))}
    return [system_message, *converted]


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


def build_widget_response(thread_id: str, content: str) -> dict[str, Any]:
    """Wrap one assistant reply into the widget response envelope."""
    response = CopilotResponse(
        thread_id=thread_id,
        run_id=_new_id("run"),
        messages=[TextMessageOutput(id=_new_id("msg"), content=[content])],
    )
    return {
        "data": {
            GENERATE_OPERATION: response.model_dump(mode="json", by_alias=True),
        }
    }


class ChatAdapter:
    """Answers chat widget requests with one chat-completion call.

    Holds no conversation state; every request carries its full history.
    """

    def __init__(
        self,
        provider: ProviderConfig | None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            provider: Resolved provider, or None when no credential is set.
            client: Optional SDK client. Built from the provider if omitted.
        """
        self._provider = provider
        self._client = client
        if self._client is None and provider is not None:
            self._client = create_client(provider)

    @property
    def provider(self) -> ProviderConfig | None:
        return self._provider

    async def handle(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Answer one widget request.

        Args:
            payload: Decoded JSON body of the widget request.

        Returns:
            The widget response envelope, or ``{"data": {}}`` for operations
            other than generateCopilotResponse.

        Raises:
            pydantic.ValidationError: If the envelope is malformed.
            openai.OpenAIError: If the upstream call fails.
        """
        request = CopilotRequest.model_validate(payload)
        if request.operation_name != GENERATE_OPERATION:
            logger.debug(f"Ignoring widget operation: {request.operation_name}")
            return {"data": {}}

        data = request.variables.data
        thread_id = data.thread_id or _new_id("thread")

        logger.info(f"Context received: {len(data.context)} item(s)")
        messages = to_completion_messages(data.messages, data.context)
        logger.debug(f"Messages being sent to AI: {messages}")

        content = await self.complete(messages)
        return build_widget_response(thread_id, content)

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Run one non-streaming completion and return the reply text."""
        if self._provider is None or self._client is None:
            logger.warning("Chat request received without a configured provider")
            return NO_PROVIDER_REPLY

        completion = await self._client.chat.completions.create(
            model=self._provider.model,
            messages=messages,
            stream=False,
        )
        logger.info(f"Completion received from {self._provider.name} ({self._provider.model})")

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            return FALLBACK_REPLY
        return content if isinstance(content, str) else str(content)


# Module-level singleton instance
_chat_adapter: ChatAdapter | None = None


def get_chat_adapter() -> ChatAdapter:
    """Get or create the global chat adapter.

    Returns:
        The ChatAdapter configured from the environment.
    """
    global _chat_adapter
    if _chat_adapter is None:
        _chat_adapter = ChatAdapter(resolve_chat_provider(get_settings()))
    return _chat_adapter
