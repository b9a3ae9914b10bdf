import io

import pytest
from docx import Document
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from humanizer_ai.core.errors import DocumentParseError, UnsupportedFileTypeError
from humanizer_ai.services import intake
from humanizer_ai.services.intake import DOCX_CONTENT_TYPE, detect_document_kind, extract_text


def _docx_bytes(*paragraphs: str) -> bytes:
    doc = Document()
    for paragraph in paragraphs:
        doc.add_paragraph(paragraph)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def _pdf_bytes(*pages: str) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    for page in pages:
        pdf.drawString(72, 700, page)
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


@pytest.mark.parametrize(
    ("filename", "content_type", "expected"),
    [
        ("report.docx", "", "docx"),
        ("REPORT.DOCX", "application/octet-stream", "docx"),
        ("blob", DOCX_CONTENT_TYPE, "docx"),
        ("paper.pdf", None, "pdf"),
        ("scan", "application/pdf", "pdf"),
        ("notes.txt", "", "txt"),
        ("notes", "text/plain; charset=utf-8", "txt"),
    ],
)
def test_detect_document_kind(filename, content_type, expected):
    assert detect_document_kind(filename, content_type) == expected


def _forbid_parsers(monkeypatch, calls: list[str]) -> None:
    for kind in ("docx", "pdf", "txt"):

        def _parser(raw, kind=kind):
            calls.append(kind)
            return f"parsed as {kind}"

        monkeypatch.setitem(intake._PARSERS, kind, (_parser, "failed"))


@pytest.mark.asyncio
async def test_unsupported_extension_fails_before_any_parser(monkeypatch):
    calls: list[str] = []
    _forbid_parsers(monkeypatch, calls)

    with pytest.raises(UnsupportedFileTypeError) as exc:
        await extract_text(b"whatever", "data.xyz", "")

    assert exc.value.message == "Unsupported file type. Please upload a .docx, .pdf, or .txt file."
    assert calls == []


@pytest.mark.asyncio
async def test_docx_extension_fallback_dispatches_to_docx(monkeypatch):
    calls: list[str] = []
    _forbid_parsers(monkeypatch, calls)

    text = await extract_text(b"raw", "report.docx", "")

    assert text == "parsed as docx"
    assert calls == ["docx"]


@pytest.mark.asyncio
async def test_extracts_docx_paragraphs_separated_by_blank_line():
    raw = _docx_bytes("First paragraph.", "Second paragraph.")

    text = await extract_text(raw, "essay.docx", DOCX_CONTENT_TYPE)

    assert text == "First paragraph.\n\nSecond paragraph."


@pytest.mark.asyncio
async def test_extracts_pdf_pages_in_order():
    raw = _pdf_bytes("Page one text", "Page two text")

    text = await extract_text(raw, "paper.pdf", "application/pdf")

    assert text.index("Page one text") < text.index("Page two text")
    assert "\n\n" in text


def test_pdf_pages_are_separated_by_blank_line(monkeypatch):
    class _Page:
        def __init__(self, text):
            self._text = text

        def extract_text(self):
            return self._text

    class _Reader:
        def __init__(self, _stream):
            self.pages = [_Page("one"), _Page(None), _Page("three")]

    monkeypatch.setattr(intake, "PdfReader", _Reader)

    assert intake.parse_pdf(b"%PDF") == "one\n\n\n\nthree"


@pytest.mark.asyncio
async def test_plain_text_strips_bom_and_bad_bytes():
    raw = "\ufeffHello there".encode("utf-8") + b"\xff"

    text = await extract_text(raw, "notes.txt", "text/plain")

    assert text == "Hello there"


@pytest.mark.asyncio
async def test_parser_failure_is_all_or_nothing():
    with pytest.raises(DocumentParseError) as exc:
        await extract_text(b"this is not a pdf", "broken.pdf", "application/pdf")

    assert exc.value.message == "Failed to parse PDF file."


@pytest.mark.asyncio
async def test_corrupt_docx_reports_docx_failure():
    with pytest.raises(DocumentParseError) as exc:
        await extract_text(b"PK not really a zip", "broken.docx", "")

    assert exc.value.message == "Failed to parse DOCX file."
