"""File parsing utilities for document ingestion.

Transforms uploaded files into short text blocks that fit an LLM prompt.

Responsibilities:
    - File classification by MIME type and extension
    - PDF text extraction with pypdf
    - CSV and Excel summaries with pandas
    - Word text extraction with python-docx
    - Placeholder text whenever a parser fails

Output is lossy and preview-oriented: token budget matters more than fidelity.
"""

from docassist.parsing.normalizer import (
    ACCEPTED_FILE_TYPES,
    DocumentNormalizer,
    DocumentType,
    NormalizedDocument,
    UploadedFile,
    VisionUnavailableError,
    classify,
    to_data_url,
)
from docassist.parsing.pdf_parser import PDFContent, PDFParseError, parse_pdf

__all__ = [
    "ACCEPTED_FILE_TYPES",
    "DocumentNormalizer",
    "DocumentType",
    "NormalizedDocument",
    "PDFContent",
    "PDFParseError",
    "UploadedFile",
    "VisionUnavailableError",
    "classify",
    "parse_pdf",
    "to_data_url",
]
