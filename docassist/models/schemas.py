from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

GENERATE_OPERATION = "generateCopilotResponse"


class ResponseCode(str, Enum):
    """Status codes of the chat widget protocol."""

    SUCCESS = "SUCCESS"


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class WidgetModel(BaseModel):
    """Base for widget payloads: camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(populate_by_name=True)


class ContextItem(WidgetModel):
    """Caller-supplied grounding text injected into the system prompt.

    Attributes:
        description: What the value is about.
        value: The text itself.
    """

    description: str = ""
    value: str = ""

    @field_validator("description", "value", mode="before")
    @classmethod
    def coerce_text(cls, v: object) -> str:
        """Accept non-string values by rendering them as text."""
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)


class TextMessage(WidgetModel):
    """Role and text of a widget chat message."""

    role: str = "user"
    content: str | None = None


class WidgetMessage(WidgetModel):
    """A single message in the widget's conversation.

    Only text messages matter to the adapter; other widget message kinds
    arrive without ``textMessage`` and are ignored.
    """

    id: str | None = None
    created_at: str | None = Field(None, alias="createdAt")
    text_message: TextMessage | None = Field(None, alias="textMessage")


class GenerateData(WidgetModel):
    """Payload of a generateCopilotResponse request."""

    thread_id: str | None = Field(None, alias="threadId")
    messages: list[WidgetMessage] = Field(default_factory=list)
    context: list[ContextItem] = Field(default_factory=list)


class GenerateVariables(WidgetModel):
    data: GenerateData = Field(default_factory=GenerateData)


class CopilotRequest(WidgetModel):
    """Inbound chat widget envelope (GraphQL-shaped).

    Attributes:
        operation_name: Widget operation; only generateCopilotResponse is served.
        variables: Operation variables carrying messages, thread id and context.
    """

    operation_name: str | None = Field(None, alias="operationName")
    variables: GenerateVariables = Field(default_factory=GenerateVariables)


class ResponseStatus(WidgetModel):
    code: ResponseCode = ResponseCode.SUCCESS
    typename: str = Field("BaseResponseStatus", alias="__typename")


class MessageStatus(WidgetModel):
    code: ResponseCode = ResponseCode.SUCCESS
    typename: str = Field("SuccessMessageStatus", alias="__typename")


class TextMessageOutput(WidgetModel):
    """Assistant message as the widget expects to render it."""

    typename: str = Field("TextMessageOutput", alias="__typename")
    id: str
    created_at: str = Field(default_factory=utc_timestamp, alias="createdAt")
    content: list[str]
    role: str = "assistant"
    parent_message_id: str | None = Field(None, alias="parentMessageId")
    status: MessageStatus = Field(default_factory=MessageStatus)


class CopilotResponse(WidgetModel):
    """Body of a successful generateCopilotResponse answer."""

    thread_id: str = Field(..., alias="threadId")
    run_id: str = Field(..., alias="runId")
    extensions: dict | None = None
    status: ResponseStatus = Field(default_factory=ResponseStatus)
    messages: list[TextMessageOutput]
    meta_events: list[dict] = Field(default_factory=list, alias="metaEvents")
    typename: str = Field("CopilotResponse", alias="__typename")


class ErrorDetail(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned by the widget endpoint."""

    errors: list[ErrorDetail]


class AnalyzeImageRequest(BaseModel):
    """Request payload for the image description endpoint.

    Attributes:
        image: Image encoded as a data URL.
        filename: Original filename, used in placeholder text.
    """

    image: str = Field(..., min_length=1)
    filename: str = ""


class AnalyzeImageResponse(BaseModel):
    description: str
