"""Inline change markers for the rewritten text.

Each change marks the first still-unmarked occurrence of its ``humanized_text``.
Snippets that repeat may therefore mark a different occurrence than the one
the rewrite service meant, and a snippet that is not present at all (for
example because whitespace was rewritten) is simply left unmarked.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Sequence

from humanizer_ai.schemas.humanize import ConversionChange


@dataclass(frozen=True)
class Segment:
    text: str
    change_index: int | None = None

    @property
    def is_change(self) -> bool:
        return self.change_index is not None


def _mark_first(segments: list[Segment], needle: str, index: int) -> bool:
    for pos, segment in enumerate(segments):
        if segment.is_change:
            continue
        at = segment.text.find(needle)
        if at < 0:
            continue
        pieces = [
            Segment(segment.text[:at]),
            Segment(needle, index),
            Segment(segment.text[at + len(needle) :]),
        ]
        segments[pos : pos + 1] = [piece for piece in pieces if piece.text]
        return True
    return False


def highlight_segments(
    text: str,
    changes: Sequence[ConversionChange],
    show_analysis: bool = True,
) -> list[Segment]:
    if not text:
        return []
    if not show_analysis or not changes:
        return [Segment(text)]

    segments = [Segment(text)]
    for index, change in enumerate(changes):
        if change.humanized_text.strip():
            _mark_first(segments, change.humanized_text, index)
    return segments


def _tooltip_html(change: ConversionChange) -> str:
    return (
        '<span class="change-panel" role="tooltip">'
        f'<span class="change-before">{escape(change.original_text)}</span>'
        f'<span class="change-after">{escape(change.humanized_text)}</span>'
        f'<span class="change-reason">{escape(change.explanation)}</span>'
        "</span>"
    )


def render_html(segments: Sequence[Segment], changes: Sequence[ConversionChange]) -> str:
    parts: list[str] = []
    for segment in segments:
        if segment.change_index is None:
            parts.append(f"<span>{escape(segment.text)}</span>")
            continue
        change = changes[segment.change_index]
        parts.append(
            f'<span class="change-anchor" data-change="{segment.change_index}" '
            f'data-type="{escape(change.type)}">'
            f"<mark>{escape(segment.text)}</mark>{_tooltip_html(change)}</span>"
        )
    return f'<p class="output">{"".join(parts)}</p>'
