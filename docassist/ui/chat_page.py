"""NiceGUI chat interface with document and image uploads."""

import logging
import os

import httpx
from nicegui import events, ui

from docassist.parsing.normalizer import (
    ACCEPTED_FILE_TYPES,
    DocumentNormalizer,
    DocumentType,
    UploadedFile,
    VisionUnavailableError,
    classify,
    to_data_url,
)
from docassist.ui.markdown import markdown_to_html
from docassist.ui.session import ChatSession

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f7f7f8; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: white; border-bottom: 1px solid #e5e5e5; }

    .message-user {
        background: #2563eb;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .attachment-chip {
        background: #f3f4f6;
        border: 1px solid #e5e7eb;
        border-radius: 8px;
        font-size: 0.85rem;
        color: #374151;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #2563eb;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
    }
    .input-box:focus-within { border-color: #2563eb; }

    .message-assistant pre { margin: 0.5rem 0; }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
</style>
"""


def extract_reply(payload: dict) -> str:
    """Pull the assistant text out of a widget response envelope."""
    response = payload.get("data", {}).get("generateCopilotResponse")
    if not response or not response.get("messages"):
        raise ValueError("Response contained no assistant message")
    return "".join(response["messages"][0].get("content", []))


async def request_chat_response(session: ChatSession) -> str:
    """Send the conversation and uploaded context to the chat endpoint."""
    async with httpx.AsyncClient(timeout=120.0) as client:
        response = await client.post(
            f"{API_BASE_URL}/api/copilotkit",
            json=session.build_request(),
        )
        response.raise_for_status()
        return extract_reply(response.json())


async def describe_image(image: str, filename: str) -> str:
    """Ask the API for an image description.

    Raises:
        VisionUnavailableError: If the endpoint answers with an error status.
    """
    async with httpx.AsyncClient(timeout=120.0) as client:
        response = await client.post(
            f"{API_BASE_URL}/api/analyze-image",
            json={"image": image, "filename": filename},
        )
    if not response.is_success:
        raise VisionUnavailableError(f"HTTP {response.status_code}")
    return response.json()["description"]


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()
    normalizer = DocumentNormalizer(describe_image=describe_image)

    messages_container: ui.column
    attachments_row: ui.row
    input_field: ui.textarea
    send_btn: ui.button

    def render_message(msg: dict) -> None:
        is_user = msg["role"] == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            with ui.column().classes("max-w-[75%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if is_user:
                        content = msg["content"].replace("\n", "<br>")
                    else:
                        content = markdown_to_html(msg["content"])
                    ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
                ui.label(msg["time"]).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not session.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label("Hi! How can I help you today?").classes("text-lg text-gray-400")
            else:
                for msg in session.messages:
                    render_message(msg)

    def refresh_attachments() -> None:
        attachments_row.clear()
        attachments_row.set_visibility(bool(session.documents or session.images))
        with attachments_row:
            ui.label("Attachments:").classes("text-sm text-gray-500 font-medium")
            for doc in session.documents:
                if doc.type is DocumentType.IMAGE:
                    continue
                with ui.row().classes("attachment-chip px-2 py-1 items-center gap-1"):
                    ui.icon("description").classes("text-gray-500")
                    ui.label(doc.name).classes("max-w-[150px] truncate")
            for image in session.images:
                with ui.row().classes("attachment-chip pr-2 items-center gap-2"):
                    ui.image(image.url).classes("w-8 h-8 rounded")
                    ui.label(image.name).classes("max-w-[100px] truncate")

    async def handle_upload(e: events.UploadEventArguments) -> None:
        file = UploadedFile(
            name=e.file.name,
            content=await e.file.read(),
            mime_type=e.file.content_type or "",
        )
        if classify(file) is DocumentType.IMAGE:
            session.add_image(file.name, to_data_url(file))
            refresh_attachments()

        document = await normalizer.normalize(file)
        session.add_document(document)
        logger.info(f"Attached {file.name} as {document.type.value} ({len(document.content)} chars)")
        refresh_attachments()
        ui.notify(f"Added {file.name}", type="positive")

    async def send_message() -> None:
        text = input_field.value.strip()
        if not text or session.is_waiting:
            return

        input_field.value = ""
        session.is_waiting = True
        send_btn.disable()

        session.add_message("user", text)
        refresh_messages()

        with messages_container, ui.row().classes("w-full justify-start") as status_row:
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("items-center gap-2"):
                    with ui.row().classes("gap-1"):
                        for _ in range(3):
                            ui.element("div").classes("typing-dot")
                    ui.label("Thinking...").classes("text-sm text-gray-500 italic")

        try:
            reply = await request_chat_response(session)
            session.add_message("assistant", reply)
        except httpx.HTTPStatusError as e:
            error = f"HTTP {e.response.status_code}"
            session.add_message("assistant", f"Error: {error}")
            ui.notify(error, type="negative")
        except (httpx.RequestError, ValueError) as e:
            error = f"Connection failed: {e}"
            session.add_message("assistant", f"Error: {error}")
            ui.notify(error, type="negative")
        finally:
            status_row.delete()
            session.is_waiting = False
            send_btn.enable()
            refresh_messages()

    def new_chat() -> None:
        session.new_thread()
        refresh_messages()

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-3 items-center justify-between"):
            with ui.column().classes("gap-0"):
                ui.label("Document Assistant").classes("text-lg font-semibold")
                ui.label("Ask questions about your files").classes("text-xs text-gray-500")
            ui.button(icon="add", on_click=new_chat).props("flat round")

        attachments_row = ui.row().classes("w-full px-5 pt-3 gap-2 items-center")
        refresh_attachments()

        # Messages
        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")
            refresh_messages()

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            (
                ui.upload(on_upload=handle_upload, auto_upload=True, multiple=True)
                .props(f'accept="{ACCEPTED_FILE_TYPES}" flat hide-upload-btn')
                .classes("w-48")
            )
            with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                input_field = (
                    ui.textarea(placeholder="Type your message...")
                    .props("autogrow borderless dense rows=1")
                    .classes("w-full")
                    .on("keydown.enter.prevent", send_message)
                )
            send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")
