"""Integration tests for the chat widget endpoint.

Runs the real FastAPI app through ASGITransport with the chat adapter
dependency replaced by one wired to a mocked OpenAI client.
"""

from unittest.mock import MagicMock

import pytest
from httpx import AsyncClient

from docassist.adapter.chat_adapter import ChatAdapter, get_chat_adapter
from docassist.adapter.config import ProviderConfig
from docassist.api import app
from docassist.parsing.normalizer import DocumentNormalizer, UploadedFile
from docassist.ui.session import WIDGET_INSTRUCTIONS, ChatSession
from tests.conftest import make_csv


@pytest.fixture
def adapter(openai_client: MagicMock) -> ChatAdapter:
    provider = ProviderConfig(name="openai", model="gpt-test", api_key="sk-test")
    chat_adapter = ChatAdapter(provider, client=openai_client)
    app.dependency_overrides[get_chat_adapter] = lambda: chat_adapter
    return chat_adapter


class TestCopilotEndpoint:
    """Integration tests for POST /api/copilotkit."""

    async def test_generate_returns_envelope(
        self, async_client: AsyncClient, adapter: ChatAdapter
    ) -> None:
        """A generate request returns one assistant message."""
        payload = {
            "operationName": "generateCopilotResponse",
            "variables": {
                "data": {
                    "threadId": "thread-1",
                    "messages": [{"id": "1", "textMessage": {"role": "user", "content": "Hi"}}],
                }
            },
        }

        response = await async_client.post("/api/copilotkit", json=payload)

        assert response.status_code == 200
        body = response.json()["data"]["generateCopilotResponse"]
        assert body["threadId"] == "thread-1"
        assert body["messages"][0]["content"] == ["Hello from the model"]
        assert body["status"]["code"] == "SUCCESS"

    async def test_unknown_operation_returns_empty_data(
        self, async_client: AsyncClient, adapter: ChatAdapter, openai_client: MagicMock
    ) -> None:
        """Unrecognized operations are answered with empty data."""
        response = await async_client.post(
            "/api/copilotkit",
            json={"operationName": "loadAgentState", "variables": {}},
        )

        assert response.status_code == 200
        assert response.json() == {"data": {}}
        openai_client.chat.completions.create.assert_not_awaited()

    async def test_upstream_failure_returns_errors(
        self, async_client: AsyncClient, adapter: ChatAdapter, openai_client: MagicMock
    ) -> None:
        """Completion errors become a 500 with an errors list."""
        openai_client.chat.completions.create.side_effect = RuntimeError("rate limited upstream")

        response = await async_client.post(
            "/api/copilotkit",
            json={"operationName": "generateCopilotResponse", "variables": {"data": {}}},
        )

        assert response.status_code == 500
        assert response.json() == {"errors": [{"message": "rate limited upstream"}]}

    async def test_invalid_json_returns_errors(
        self, async_client: AsyncClient, adapter: ChatAdapter
    ) -> None:
        """A body that is not JSON is reported, not dropped."""
        response = await async_client.post(
            "/api/copilotkit",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        errors = response.json()["errors"]
        assert len(errors) == 1
        assert errors[0]["message"]

    async def test_uploaded_csv_reaches_model(
        self, async_client: AsyncClient, adapter: ChatAdapter, openai_client: MagicMock
    ) -> None:
        """A normalized upload sent by the UI session ends up in the system prompt."""
        session = ChatSession()
        document = await DocumentNormalizer().normalize(
            UploadedFile(name="scores.csv", content=make_csv(12), mime_type="text/csv")
        )
        session.add_document(document)
        session.add_message("user", "Who scored highest?")

        response = await async_client.post("/api/copilotkit", json=session.build_request())

        assert response.status_code == 200
        sent = openai_client.chat.completions.create.await_args.kwargs["messages"]
        assert [m["role"] for m in sent] == ["system", "user"]
        assert "File: scores.csv (CSV)" in sent[0]["content"]
        assert "... and 2 more rows" in sent[0]["content"]
        assert WIDGET_INSTRUCTIONS not in sent[0]["content"]


class TestHealth:
    """Tests for GET /health."""

    async def test_health(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "docassist"}
