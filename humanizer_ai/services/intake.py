from __future__ import annotations

import io
from typing import Literal

from docx import Document
from pypdf import PdfReader
from starlette.concurrency import run_in_threadpool

from humanizer_ai.core.errors import DocumentParseError, UnsupportedFileTypeError
from humanizer_ai.core.logging import get_logger

logger = get_logger(__name__)

DocumentKind = Literal["docx", "pdf", "txt"]

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_CONTENT_TYPE = "application/pdf"
TEXT_CONTENT_TYPE = "text/plain"

PAGE_SEPARATOR = "\n\n"
PARAGRAPH_SEPARATOR = "\n\n"


def detect_document_kind(filename: str | None, content_type: str | None) -> DocumentKind:
    """Pick the extraction path from the MIME type, falling back to the extension.

    Raises UnsupportedFileTypeError for anything that is not docx, pdf or text.
    """
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    name = (filename or "").strip().lower()

    if mime == DOCX_CONTENT_TYPE or name.endswith(".docx"):
        return "docx"
    if mime == PDF_CONTENT_TYPE or name.endswith(".pdf"):
        return "pdf"
    if mime == TEXT_CONTENT_TYPE or name.endswith(".txt"):
        return "txt"
    raise UnsupportedFileTypeError()


def parse_docx(raw: bytes) -> str:
    doc = Document(io.BytesIO(raw))
    return PARAGRAPH_SEPARATOR.join(paragraph.text for paragraph in doc.paragraphs).strip()


def parse_pdf(raw: bytes) -> str:
    reader = PdfReader(io.BytesIO(raw))
    pages = [page.extract_text() or "" for page in reader.pages]
    return PAGE_SEPARATOR.join(pages).strip()


def parse_text(raw: bytes) -> str:
    return raw.decode("utf-8-sig", errors="ignore")


_PARSERS = {
    "docx": (parse_docx, "Failed to parse DOCX file."),
    "pdf": (parse_pdf, "Failed to parse PDF file."),
    "txt": (parse_text, "Failed to read file."),
}


async def extract_text(raw: bytes, filename: str | None, content_type: str | None) -> str:
    kind = detect_document_kind(filename, content_type)
    parser, failure_message = _PARSERS[kind]
    try:
        text = await run_in_threadpool(parser, raw)
    except Exception as exc:
        logger.exception("document_parse_failed", kind=kind, filename=filename)
        raise DocumentParseError(failure_message) from exc

    logger.info("document_extracted", kind=kind, filename=filename, chars=len(text))
    return text
