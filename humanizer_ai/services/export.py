from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Literal

from docx import Document
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas
from starlette.concurrency import run_in_threadpool

from humanizer_ai.core.errors import ExportError
from humanizer_ai.core.logging import get_logger
from humanizer_ai.utils.text import sanitize_filename

logger = get_logger(__name__)

ExportFormat = Literal["docx", "pdf"]

MEDIA_TYPES: dict[str, str] = {
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "pdf": "application/pdf",
}

# A4 is 210mm wide; 10mm margins leave a 190mm content column.
PDF_MARGIN = 10 * mm
PDF_CONTENT_WIDTH = 190 * mm
PDF_FONT = "Helvetica"
PDF_FONT_SIZE = 11
PDF_LEADING = PDF_FONT_SIZE * 1.4


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    media_type: str
    data: bytes


def render_docx(text: str) -> bytes:
    doc = Document()
    for line in text.split("\n"):
        doc.add_paragraph(line)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def wrap_lines(text: str, width: float = PDF_CONTENT_WIDTH) -> list[str]:
    wrapped: list[str] = []
    for line in text.split("\n"):
        # simpleSplit drops blank lines; keep them as paragraph gaps.
        wrapped.extend(simpleSplit(line, PDF_FONT, PDF_FONT_SIZE, width) or [""])
    return wrapped


def render_pdf(text: str) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    _, height = A4

    y = height - PDF_MARGIN - PDF_FONT_SIZE
    pdf.setFont(PDF_FONT, PDF_FONT_SIZE)
    for line in wrap_lines(text):
        if y < PDF_MARGIN:
            pdf.showPage()
            pdf.setFont(PDF_FONT, PDF_FONT_SIZE)
            y = height - PDF_MARGIN - PDF_FONT_SIZE
        pdf.drawString(PDF_MARGIN, y, line)
        y -= PDF_LEADING

    pdf.save()
    return buffer.getvalue()


_RENDERERS = {
    "docx": (render_docx, "Failed to generate DOCX file."),
    "pdf": (render_pdf, "Failed to generate PDF file."),
}


async def export_document(text: str, fmt: ExportFormat, filename: str | None = None) -> ExportArtifact:
    if fmt not in _RENDERERS:
        raise ExportError(f"Unsupported export format: {fmt}")

    renderer, failure_message = _RENDERERS[fmt]
    try:
        data = await run_in_threadpool(renderer, text)
    except Exception as exc:
        logger.exception("document_export_failed", format=fmt)
        raise ExportError(failure_message) from exc

    artifact = ExportArtifact(
        filename=f"{sanitize_filename(filename)}.{fmt}",
        media_type=MEDIA_TYPES[fmt],
        data=data,
    )
    logger.info("document_exported", format=fmt, filename=artifact.filename, size=len(data))
    return artifact
