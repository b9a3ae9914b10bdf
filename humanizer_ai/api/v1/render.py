from fastapi import APIRouter

from humanizer_ai.schemas.render import RenderRequest, RenderResponse, SegmentOut
from humanizer_ai.services.highlight import highlight_segments, render_html

router = APIRouter()


@router.post("/render", response_model=RenderResponse)
async def render_output(body: RenderRequest):
    segments = highlight_segments(body.text, body.changes, body.show_analysis)
    return RenderResponse(
        segments=[SegmentOut(text=segment.text, change_index=segment.change_index) for segment in segments],
        html=render_html(segments, body.changes),
    )
