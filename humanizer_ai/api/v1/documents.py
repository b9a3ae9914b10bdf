from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from fastapi.responses import Response

from humanizer_ai.core.config import get_settings
from humanizer_ai.core.errors import ExportError
from humanizer_ai.schemas.documents import ExportRequest, IntakeResponse
from humanizer_ai.services.export import export_document
from humanizer_ai.utils.files import extract_text_from_upload
from humanizer_ai.utils.text import derive_filename

router = APIRouter(prefix="/documents")


@router.post("/intake", response_model=IntakeResponse)
async def intake_document(file: UploadFile = File(...)):
    settings = get_settings()
    text, kind = await extract_text_from_upload(file, settings.max_upload_bytes)
    return IntakeResponse(
        text=text,
        file_name=derive_filename(file.filename, settings.default_export_name),
        kind=kind,
    )


@router.post("/export")
async def export_text(body: ExportRequest):
    try:
        artifact = await export_document(body.text, body.format, body.file_name)
    except ExportError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message) from exc

    disposition = f"attachment; filename*=UTF-8''{quote(artifact.filename)}"
    return Response(
        content=artifact.data,
        media_type=artifact.media_type,
        headers={"Content-Disposition": disposition},
    )
