"""Unit tests for the UI chat session and its widget envelope."""

import pytest_check as check

from docassist.models.schemas import CopilotRequest
from docassist.parsing.normalizer import DocumentType, NormalizedDocument
from docassist.ui.session import READABLE_DESCRIPTION, WIDGET_INSTRUCTIONS, ChatSession


def _document(name: str, content: str, kind: DocumentType) -> NormalizedDocument:
    return NormalizedDocument(name=name, content=content, type=kind)


class TestReadableContext:
    """Tests for the context item built from uploads."""

    def test_no_documents_no_context(self) -> None:
        """An empty session sends no context items."""
        assert ChatSession().readable_context() == []

    def test_documents_joined_in_upload_order(self) -> None:
        """Documents render as File: name (type) blocks in arrival order."""
        session = ChatSession()
        session.add_document(_document("a.csv", "CSV File: a.csv", DocumentType.CSV))
        session.add_document(_document("b.png", "Image: b.png", DocumentType.IMAGE))

        items = session.readable_context()

        check.equal(len(items), 1)
        check.equal(items[0].description, READABLE_DESCRIPTION)
        check.equal(
            items[0].value,
            "File: a.csv (CSV)\nCSV File: a.csv\n\nFile: b.png (Image)\nImage: b.png",
        )


class TestBuildRequest:
    """Tests for the widget envelope sent to the API."""

    def test_envelope_shape(self) -> None:
        """The envelope names the operation and carries thread, messages and context."""
        session = ChatSession()
        session.add_document(_document("a.txt", "hello", DocumentType.TEXT))
        session.add_message("user", "What does a.txt say?")

        payload = session.build_request()
        data = payload["variables"]["data"]

        check.equal(payload["operationName"], "generateCopilotResponse")
        check.equal(data["threadId"], session.thread_id)
        check.equal(data["messages"][0]["textMessage"], {"role": "system", "content": WIDGET_INSTRUCTIONS})
        check.equal(data["messages"][1]["textMessage"], {"role": "user", "content": "What does a.txt say?"})
        check.equal(data["context"][0]["value"], "File: a.txt (Text)\nhello")

    def test_envelope_round_trips_through_schema(self) -> None:
        """The server-side schema reads what the session sends."""
        session = ChatSession()
        session.add_message("user", "hi")

        request = CopilotRequest.model_validate(session.build_request())

        check.equal(request.variables.data.thread_id, session.thread_id)
        check.equal(request.variables.data.messages[-1].text_message.content, "hi")

    def test_new_thread_keeps_uploads(self) -> None:
        """Starting a new chat clears messages but keeps documents and images."""
        session = ChatSession()
        session.add_document(_document("a.txt", "hello", DocumentType.TEXT))
        session.add_image("b.png", "data:image/png;base64,AAAA")
        session.add_message("user", "hi")
        old_thread = session.thread_id

        session.new_thread()

        check.equal(session.messages, [])
        check.not_equal(session.thread_id, old_thread)
        check.equal(len(session.documents), 1)
        check.equal(session.images[0].name, "b.png")
