from __future__ import annotations

import time
import uuid

from fastapi import APIRouter, Depends, HTTPException, status

from humanizer_ai.api.deps import get_rewrite_client
from humanizer_ai.core.errors import InputTooLongError, RewriteError
from humanizer_ai.core.logging import get_logger
from humanizer_ai.schemas.humanize import HumanizeRequest, HumanizeResponse
from humanizer_ai.services.rewrite_client import RewriteClient

router = APIRouter()
logger = get_logger(__name__)


@router.post("/humanize", response_model=HumanizeResponse)
async def humanize_content(
    body: HumanizeRequest,
    client: RewriteClient = Depends(get_rewrite_client),
):
    if not body.text.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Please enter some text or upload a file to rewrite.",
        )

    start = time.perf_counter()
    try:
        result = await client.humanize(body.text, body.options)
    except InputTooLongError as exc:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=exc.message) from exc
    except RewriteError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=exc.message) from exc
    latency_ms = round((time.perf_counter() - start) * 1000, 3)
    humanize_id = uuid.uuid4().hex

    logger.info(
        "humanize_completed",
        humanize_id=humanize_id,
        mode=client.mode,
        tone=body.options.tone,
        voice=body.options.voice,
        expand=body.options.expand,
        changes=len(result.changes),
        latency_ms=latency_ms,
    )

    return HumanizeResponse(
        text=result.text,
        changes=result.changes,
        stats=result.stats,
        humanize_id=humanize_id,
        mode=client.mode,
        latency_ms=latency_ms,
    )
