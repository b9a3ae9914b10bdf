from fastapi import HTTPException, UploadFile, status

from humanizer_ai.core.errors import DocumentParseError, UnsupportedFileTypeError
from humanizer_ai.services.intake import detect_document_kind, extract_text


async def extract_text_from_upload(file: UploadFile, max_upload_bytes: int) -> tuple[str, str]:
    try:
        kind = detect_document_kind(file.filename, file.content_type)
    except UnsupportedFileTypeError as exc:
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=exc.message) from exc

    raw = await file.read(max_upload_bytes + 1)
    if len(raw) > max_upload_bytes:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File too large")

    try:
        text = await extract_text(raw, file.filename, file.content_type)
    except DocumentParseError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.message) from exc

    return text, kind
