"""Per-browser chat session state.

Documents and images accumulate for the lifetime of the page; nothing is
evicted and nothing is persisted.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from docassist.models.schemas import (
    GENERATE_OPERATION,
    ContextItem,
    CopilotRequest,
    GenerateData,
    GenerateVariables,
    TextMessage,
    WidgetMessage,
    utc_timestamp,
)
from docassist.parsing.normalizer import NormalizedDocument

READABLE_DESCRIPTION = "User uploaded documents and images"

WIDGET_INSTRUCTIONS = (
    "You are a helpful AI assistant. You can help users with their questions "
    "and analyze any documents or images they upload."
)


class ImageAttachment(BaseModel):
    """Thumbnail of an uploaded image.

    Attributes:
        name: Original filename.
        url: Image as a data URL.
    """

    name: str
    url: str


class ChatSession:
    """Manages chat state for a user session."""

    def __init__(self) -> None:
        self.messages: list[dict] = []
        self.documents: list[NormalizedDocument] = []
        self.images: list[ImageAttachment] = []
        self.thread_id: str = str(uuid.uuid4())
        self.is_waiting: bool = False

    def add_message(self, role: str, content: str) -> None:
        self.messages.append({
            "id": str(uuid.uuid4()),
            "role": role,
            "content": content,
            "created_at": utc_timestamp(),
            "time": datetime.now().strftime("%I:%M %p"),
        })

    def add_document(self, document: NormalizedDocument) -> None:
        self.documents.append(document)

    def add_image(self, name: str, url: str) -> None:
        self.images.append(ImageAttachment(name=name, url=url))

    def new_thread(self) -> None:
        """Start a fresh conversation; uploaded files stay attached."""
        self.messages.clear()
        self.thread_id = str(uuid.uuid4())

    def readable_context(self) -> list[ContextItem]:
        """Expose the uploaded documents as one context item, in upload order."""
        if not self.documents:
            return []
        value = "\n\n".join(
            f"File: {doc.name} ({doc.type.value})\n{doc.content}" for doc in self.documents
        )
        return [ContextItem(description=READABLE_DESCRIPTION, value=value)]

    def build_request(self) -> dict[str, Any]:
        """Build the widget envelope for the current conversation.

        The widget's default instructions go first as a system message, the
        way the chat widget sends them.
        """
        messages = [
            WidgetMessage(
                id=f"instructions-{self.thread_id}",
                created_at=utc_timestamp(),
                text_message=TextMessage(role="system", content=WIDGET_INSTRUCTIONS),
            )
        ]
        messages.extend(
            WidgetMessage(
                id=msg["id"],
                created_at=msg["created_at"],
                text_message=TextMessage(role=msg["role"], content=msg["content"]),
            )
            for msg in self.messages
        )

        request = CopilotRequest(
            operation_name=GENERATE_OPERATION,
            variables=GenerateVariables(
                data=GenerateData(
                    thread_id=self.thread_id,
                    messages=messages,
                    context=self.readable_context(),
                )
            ),
        )
        return request.model_dump(mode="json", by_alias=True, exclude_none=True)
