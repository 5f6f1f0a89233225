"""Document normalizer: turns any uploaded file into bounded prompt text.

Every file maps to exactly one NormalizedDocument. Files are classified into
a closed set of document kinds, each handled by one extractor. Extractors
are preview-oriented: tables are summarized, long PDFs are cut, and any
parser failure becomes a readable placeholder instead of an exception.
"""

import base64
import json
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from docassist.parsing.docx_parser import DocxParseError, extract_docx_text
from docassist.parsing.pdf_parser import PDFParseError, parse_pdf
from docassist.parsing.tabular import (
    TabularParseError,
    read_csv_table,
    read_excel_tables,
)

logger = logging.getLogger(__name__)

# Preview limits
CSV_PREVIEW_ROWS = 10
EXCEL_PREVIEW_ROWS = 5
PDF_MAX_CHARS = 5000

ACCEPTED_FILE_TYPES = ".txt,.md,.json,.csv,.xlsx,.xls,.pdf,.docx,.doc,image/*"


class DocumentType(str, Enum):
    """Closed set of document kinds the normalizer distinguishes."""

    CSV = "CSV"
    EXCEL = "Excel"
    PDF = "PDF"
    WORD = "Word"
    IMAGE = "Image"
    TEXT = "Text"


class UploadedFile(BaseModel):
    """Raw upload as received from the browser.

    Attributes:
        name: Original filename.
        content: Raw file bytes.
        mime_type: Declared MIME type (may be empty).
    """

    name: str
    content: bytes
    mime_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def lower_name(self) -> str:
        return self.name.lower()


class NormalizedDocument(BaseModel):
    """Textual stand-in for one uploaded file.

    Attributes:
        name: Original filename.
        content: Bounded text block used as prompt context.
        type: Kind of document the text was extracted from.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    content: str
    type: DocumentType


class VisionUnavailableError(Exception):
    """Raised by an image describer when the vision service refuses a request."""

    pass


# (image data URL, filename) -> description
ImageDescriber = Callable[[str, str], Awaitable[str]]


def classify(file: UploadedFile) -> DocumentType:
    """Pick the document kind from the MIME type first, then the extension."""
    name = file.lower_name
    if file.mime_type.startswith("image/"):
        return DocumentType.IMAGE
    if name.endswith((".xlsx", ".xls")):
        return DocumentType.EXCEL
    if name.endswith(".csv"):
        return DocumentType.CSV
    if file.mime_type == "application/pdf" or name.endswith(".pdf"):
        return DocumentType.PDF
    if name.endswith(".docx"):
        return DocumentType.WORD
    return DocumentType.TEXT


def to_data_url(file: UploadedFile) -> str:
    """Encode a file as a base64 data URL."""
    mime_type = file.mime_type or "application/octet-stream"
    encoded = base64.b64encode(file.content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def _json_default(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "item"):
        return value.item()
    return str(value)


def _format_preview(records: list[dict[str, Any]]) -> str:
    return json.dumps(records, indent=2, ensure_ascii=False, default=_json_default)


class DocumentExtractor:
    """Base class for one document kind."""

    kind: DocumentType = DocumentType.TEXT

    async def extract(self, file: UploadedFile) -> NormalizedDocument:
        raise NotImplementedError

    def _document(self, file: UploadedFile, content: str) -> NormalizedDocument:
        return NormalizedDocument(name=file.name, content=content, type=self.kind)


class ImageExtractor(DocumentExtractor):
    """Describes images through an optional vision callback."""

    kind = DocumentType.IMAGE

    def __init__(self, describe_image: ImageDescriber | None = None) -> None:
        self._describe_image = describe_image

    async def extract(self, file: UploadedFile) -> NormalizedDocument:
        if self._describe_image is None:
            return self._document(
                file, f"Image file: {file.name}. Vision analysis not available."
            )

        try:
            description = await self._describe_image(to_data_url(file), file.name)
        except VisionUnavailableError as e:
            logger.warning(f"Vision analysis refused for {file.name}: {e}")
            return self._document(
                file,
                f"Image file: {file.name}. Vision analysis not available with current model.",
            )
        except Exception as e:
            logger.warning(f"Vision analysis failed for {file.name}: {e}")
            return self._document(
                file, f"Image file: {file.name}. Vision analysis not available."
            )

        return self._document(file, f"Image: {file.name}\n\nAnalysis:\n{description}")


class ExcelExtractor(DocumentExtractor):
    """Summarizes every sheet of a workbook."""

    kind = DocumentType.EXCEL

    async def extract(self, file: UploadedFile) -> NormalizedDocument:
        try:
            tables = read_excel_tables(file.content)
        except TabularParseError as e:
            logger.warning(f"Excel parse error for {file.name}: {e}")
            return self._document(
                file, f"Excel file: {file.name}. Workbook could not be parsed."
            )

        content = f"Excel File: {file.name}\n\n"
        for table in tables:
            content += f"Sheet: {table.name}\nRows: {table.row_count}\n"
            if table.records:
                content += f"Columns: {', '.join(table.columns)}\n"
                preview = _format_preview(table.records[:EXCEL_PREVIEW_ROWS])
                content += f"Data Preview:\n{preview}\n"
                if table.row_count > EXCEL_PREVIEW_ROWS:
                    content += f"... and {table.row_count - EXCEL_PREVIEW_ROWS} more rows\n"
            content += "\n"

        return self._document(file, content)


class CsvExtractor(DocumentExtractor):
    """Summarizes a CSV file with a header row."""

    kind = DocumentType.CSV

    async def extract(self, file: UploadedFile) -> NormalizedDocument:
        try:
            table = read_csv_table(file.content)
        except TabularParseError as e:
            logger.warning(f"CSV parse error for {file.name}: {e}")
            return self._document(file, f"CSV file: {file.name}. Data could not be parsed.")

        columns = ", ".join(table.columns) if table.columns else "N/A"
        content = (
            f"CSV File: {file.name}\n"
            f"Rows: {table.row_count}\n"
            f"Columns: {columns}\n\n"
            f"Data Preview:\n{_format_preview(table.records[:CSV_PREVIEW_ROWS])}"
        )
        if table.row_count > CSV_PREVIEW_ROWS:
            content += f"\n... and {table.row_count - CSV_PREVIEW_ROWS} more rows"

        return self._document(file, content)


class PdfExtractor(DocumentExtractor):
    """Extracts the text layer of a PDF, cut to PDF_MAX_CHARS."""

    kind = DocumentType.PDF

    async def extract(self, file: UploadedFile) -> NormalizedDocument:
        try:
            pdf_content = parse_pdf(file.content)
        except PDFParseError as e:
            logger.warning(f"PDF parse error for {file.name}: {e}")
            return self._failed(file)

        text = pdf_content.text
        if not text.strip():
            return self._failed(file)

        content = f"PDF: {file.name}\nPages: {pdf_content.pages}\n\nContent:\n{text[:PDF_MAX_CHARS]}"
        if len(text) > PDF_MAX_CHARS:
            content += "\n... (truncated)"

        return self._document(file, content)

    def _failed(self, file: UploadedFile) -> NormalizedDocument:
        return self._document(
            file,
            f"PDF document: {file.name} ({file.size / 1024:.2f} KB). "
            "Text extraction failed - PDF may be image-based.",
        )


class WordExtractor(DocumentExtractor):
    """Extracts the raw text of a .docx document."""

    kind = DocumentType.WORD

    async def extract(self, file: UploadedFile) -> NormalizedDocument:
        try:
            text = extract_docx_text(file.content)
        except DocxParseError as e:
            logger.warning(f"Word parse error for {file.name}: {e}")
            return self._document(file, f"Word document: {file.name}. Text extraction failed.")

        return self._document(file, f"Word Document: {file.name}\n\nContent:\n{text}")


class TextExtractor(DocumentExtractor):
    """Reads any other file verbatim as UTF-8 text."""

    kind = DocumentType.TEXT

    async def extract(self, file: UploadedFile) -> NormalizedDocument:
        return self._document(file, file.content.decode("utf-8", errors="replace"))


class DocumentNormalizer:
    """Routes uploaded files to the extractor for their document kind.

    Args:
        describe_image: Optional async callback producing an image description.
            Without it, images get a placeholder text.
    """

    def __init__(self, describe_image: ImageDescriber | None = None) -> None:
        extractors: list[DocumentExtractor] = [
            ImageExtractor(describe_image),
            ExcelExtractor(),
            CsvExtractor(),
            PdfExtractor(),
            WordExtractor(),
            TextExtractor(),
        ]
        self._extractors = {extractor.kind: extractor for extractor in extractors}

    async def normalize(self, file: UploadedFile) -> NormalizedDocument:
        """Convert one uploaded file into its normalized document.

        Never raises: unexpected extractor errors are logged and replaced
        by a placeholder of the classified kind.
        """
        kind = classify(file)
        logger.info(f"Normalizing {file.name} ({file.size} bytes) as {kind.value}")

        try:
            return await self._extractors[kind].extract(file)
        except Exception as e:
            logger.error(f"Unexpected error processing {file.name}: {e}")
            return NormalizedDocument(
                name=file.name,
                content=f"{kind.value} file: {file.name}. Processing failed.",
                type=kind,
            )
