from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Tone = Literal["professional", "casual", "academic", "friendly", "confident", "researcher"]
Voice = Literal["first-person", "third-person", "objective"]
ChangeType = Literal["REPHRASE", "ADD_CONTRACTION", "REMOVE_PHRASE", "IMPROVE_FLOW", "EXPAND"]

TONES: tuple[str, ...] = ("professional", "casual", "academic", "friendly", "confident", "researcher")
VOICES: tuple[str, ...] = ("first-person", "third-person", "objective")
CHANGE_TYPES: tuple[str, ...] = ("REPHRASE", "ADD_CONTRACTION", "REMOVE_PHRASE", "IMPROVE_FLOW", "EXPAND")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RewriteOptions(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    tone: Tone = "professional"
    voice: Voice = "first-person"
    expand: bool = False


class ConversionChange(CamelModel):
    type: ChangeType
    original_text: str = ""
    humanized_text: str = ""
    explanation: str = ""


class HumanizationStats(CamelModel):
    total_changes: int = 0
    phrases_replaced: int = 0
    contractions_added: int = 0


class HumanizationResult(CamelModel):
    text: str
    changes: list[ConversionChange] = Field(default_factory=list)
    stats: HumanizationStats = Field(default_factory=HumanizationStats)


class HumanizeRequest(CamelModel):
    text: str = Field(min_length=1)
    options: RewriteOptions = Field(default_factory=RewriteOptions)


class HumanizeResponse(HumanizationResult):
    humanize_id: str
    mode: Literal["remote", "fallback"]
    latency_ms: float
