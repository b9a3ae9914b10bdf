from humanizer_ai.schemas.humanize import ConversionChange
from humanizer_ai.services.highlight import Segment, highlight_segments, render_html


def _change(humanized: str, original: str = "orig", change_type: str = "REPHRASE") -> ConversionChange:
    return ConversionChange(
        type=change_type,
        original_text=original,
        humanized_text=humanized,
        explanation="because",
    )


def test_marks_first_occurrence_only():
    text = "We use it. We use it again."
    changes = [_change("use it")]

    segments = highlight_segments(text, changes)

    assert segments == [
        Segment("We "),
        Segment("use it", 0),
        Segment(". We use it again."),
    ]
    assert "".join(segment.text for segment in segments) == text


def test_repeated_snippets_mark_successive_occurrences():
    text = "so we go, so we stay"
    changes = [_change("so"), _change("so")]

    segments = highlight_segments(text, changes)

    marked = [(segment.text, segment.change_index) for segment in segments if segment.is_change]
    assert marked == [("so", 0), ("so", 1)]
    assert "".join(segment.text for segment in segments) == text


def test_each_change_is_marked_at_most_once():
    text = "Also, this works. Also, that works."
    changes = [_change("Also"), _change("works")]

    segments = highlight_segments(text, changes)

    for index in range(len(changes)):
        assert sum(1 for segment in segments if segment.change_index == index) == 1


def test_blank_and_absent_snippets_are_left_unmarked():
    text = "Plain text here."
    changes = [_change("   ", change_type="REMOVE_PHRASE"), _change("missing")]

    segments = highlight_segments(text, changes)

    assert segments == [Segment(text)]


def test_analysis_off_or_no_changes_returns_plain_text():
    text = "Some output."

    assert highlight_segments(text, [_change("Some")], show_analysis=False) == [Segment(text)]
    assert highlight_segments(text, []) == [Segment(text)]
    assert highlight_segments("", [_change("Some")]) == []


def test_render_html_escapes_content():
    changes = [_change("<b>bold</b>", original="a & b")]
    text = "x <b>bold</b> y"

    html = render_html(highlight_segments(text, changes), changes)

    assert '<mark>&lt;b&gt;bold&lt;/b&gt;</mark>' in html
    assert "a &amp; b" in html
    assert 'data-change="0"' in html
    assert "<b>" not in html
