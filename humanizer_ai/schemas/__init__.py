from humanizer_ai.schemas.humanize import (
    ConversionChange,
    HumanizationResult,
    HumanizationStats,
    RewriteOptions,
)

__all__ = [
    "ConversionChange",
    "HumanizationResult",
    "HumanizationStats",
    "RewriteOptions",
]
