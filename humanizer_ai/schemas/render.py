from pydantic import Field

from humanizer_ai.schemas.humanize import CamelModel, ConversionChange


class RenderRequest(CamelModel):
    text: str
    changes: list[ConversionChange] = Field(default_factory=list)
    show_analysis: bool = True


class SegmentOut(CamelModel):
    text: str
    change_index: int | None = None


class RenderResponse(CamelModel):
    segments: list[SegmentOut]
    html: str
