"""Word (.docx) text extraction using python-docx."""

import io

from docx import Document


class DocxParseError(Exception):
    """Raised when a Word document cannot be read."""

    pass


def extract_docx_text(file_content: bytes) -> str:
    """Extract the raw paragraph text of a .docx file.

    Paragraphs are joined with newlines. No length cap is applied.

    Raises:
        DocxParseError: If the bytes are not a readable .docx package.
    """
    if not file_content:
        raise DocxParseError("Empty file provided")

    try:
        document = Document(io.BytesIO(file_content))
    except Exception as e:
        raise DocxParseError(f"Failed to read Word document: {e}") from e

    return "\n".join(paragraph.text for paragraph in document.paragraphs)
