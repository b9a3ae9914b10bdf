from typing import Literal

from pydantic import Field

from humanizer_ai.schemas.humanize import CamelModel

OutputFormat = Literal["docx", "pdf"]


class IntakeResponse(CamelModel):
    text: str
    file_name: str
    kind: Literal["docx", "pdf", "txt"]


class ExportRequest(CamelModel):
    text: str = Field(min_length=1)
    format: OutputFormat = "docx"
    file_name: str = "humanized-text"
