"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - async_client: HTTPX client for API testing
    - openai_client: Mocked OpenAI SDK client returning a fixed completion
    - csv_factory / xlsx_bytes / docx_bytes / blank_pdf_bytes: Generated sample files
    - mock_thread_id: Consistent thread ID for tests

Helpers make_text_pdf and make_xls build PDFs with a text layer and legacy
.xls workbooks byte by byte.

Sample files are built in memory, so the suite needs no binary fixtures.
"""

import io
import struct
from collections.abc import AsyncGenerator, Callable
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from docx import Document
from httpx import ASGITransport, AsyncClient
from openpyxl import Workbook
from pypdf import PdfWriter

from docassist.api import app

PNG_HEADER = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


def make_completion(content: object) -> SimpleNamespace:
    """Build an object shaped like an OpenAI chat completion."""
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_csv(rows: int) -> bytes:
    """CSV with an id,name,score header and the given number of data rows."""
    lines = ["id,name,score"]
    lines.extend(f"{i},item-{i},{i * 10}" for i in range(1, rows + 1))
    return ("\n".join(lines) + "\n").encode("utf-8")


def make_text_pdf(text: str, padding: int = 0) -> bytes:
    """One-page PDF whose text layer holds ``text`` in Helvetica.

    ``padding`` adds an unreferenced stream of that many bytes, which makes
    the file large without changing its text.
    """
    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
    ]
    if padding:
        objects.append(b"<< /Length %d >>\nstream\n" % padding + b"0" * padding + b"\nendstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_offset,
    )
    return bytes(out)


def _biff_record(code: int, data: bytes) -> bytes:
    return struct.pack("<HH", code, len(data)) + data


def make_xls(rows: list[list[str | float]]) -> bytes:
    """Single-sheet legacy Excel (BIFF2) workbook with the given cell rows."""
    cell_attr = b"\x00\x00\x00"
    records = [_biff_record(0x0009, struct.pack("<HH", 0x0007, 0x0010))]
    for row_index, row in enumerate(rows):
        for col_index, value in enumerate(row):
            position = struct.pack("<HH", row_index, col_index) + cell_attr
            if isinstance(value, str):
                raw = value.encode("latin-1")
                records.append(_biff_record(0x0004, position + bytes([len(raw)]) + raw))
            else:
                records.append(_biff_record(0x0003, position + struct.pack("<d", value)))
    records.append(_biff_record(0x000A, b""))
    return b"".join(records)


@pytest.fixture
def mock_thread_id() -> str:
    """Predictable thread ID for test assertions."""
    return "thread-test-12345"


@pytest.fixture
def openai_client() -> MagicMock:
    """Mocked AsyncOpenAI client whose completions return a fixed reply."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=make_completion("Hello from the model")
    )
    return client


@pytest.fixture
def csv_factory() -> Callable[[int], bytes]:
    return make_csv


@pytest.fixture
def xlsx_bytes() -> bytes:
    """Workbook with an empty first sheet and a 3-row "Sales" sheet."""
    workbook = Workbook()
    workbook.active.title = "Empty"
    sales = workbook.create_sheet("Sales")
    sales.append(["region", "units"])
    sales.append(["north", 10])
    sales.append(["south", 20])
    sales.append(["east", 30])

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def docx_bytes() -> bytes:
    """Word document with two paragraphs."""
    document = Document()
    document.add_paragraph("Quarterly report")
    document.add_paragraph("Revenue grew by 12 percent.")

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def blank_pdf_bytes() -> bytes:
    """One-page PDF without a text layer."""
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)

    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Dependency overrides set by a test are cleared afterwards.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
