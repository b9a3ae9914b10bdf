from __future__ import annotations

import re

from humanizer_ai.schemas.humanize import ConversionChange, HumanizationResult, HumanizationStats, RewriteOptions
from humanizer_ai.utils.text import match_case, tidy_spacing

CONVERSATIONAL_TONES = frozenset({"casual", "friendly", "confident"})

FILLER_PHRASES = (
    "it is important to note that",
    "it should be noted that",
    "it can be observed that",
    "it is worth noting that",
    "it goes without saying that",
    "needless to say,",
    "in today's fast-paced world,",
)

PLAIN_REPLACEMENTS = {
    "furthermore": "also",
    "moreover": "also",
    "additionally": "also",
    "in order to": "to",
    "utilize": "use",
    "utilizes": "uses",
    "utilized": "used",
    "due to the fact that": "because",
    "a large number of": "many",
    "in the event that": "if",
    "at this point in time": "now",
    "delve into": "dig into",
}

CONVERSATIONAL_REPLACEMENTS = {
    "therefore": "so",
    "in conclusion": "all in all",
    "commence": "start",
}

CONTRACTIONS = {
    "cannot": "can't",
    "will not": "won't",
    "do not": "don't",
    "does not": "doesn't",
    "did not": "didn't",
    "is not": "isn't",
    "are not": "aren't",
    "it is": "it's",
    "that is": "that's",
    "there is": "there's",
    "we are": "we're",
    "you are": "you're",
    "they are": "they're",
    "i am": "I'm",
}

_SENTENCE_END = (".", "!", "?")


def _phrase_pattern(phrase: str) -> str:
    return rf"\b{re.escape(phrase)}" + (r"\b" if phrase[-1].isalnum() else "")


def _at_sentence_start(text: str, index: int) -> bool:
    before = text[:index].rstrip(" \t")
    return not before or before.endswith(_SENTENCE_END) or before.endswith("\n")


class FallbackRewriter:
    """Deterministic phrase-level rewriter used when no remote model is configured.

    It only ever shortens filler, swaps stock connectives for plain words and
    adds contractions for conversational tones; it never expands text.
    """

    def rewrite(self, text: str, options: RewriteOptions) -> HumanizationResult:
        changes: list[ConversionChange] = []
        out = self._remove_fillers(text, changes)

        replacements = dict(PLAIN_REPLACEMENTS)
        if options.tone in CONVERSATIONAL_TONES:
            replacements.update(CONVERSATIONAL_REPLACEMENTS)
        for src, dst in replacements.items():
            out = self._replace(out, src, dst, "REPHRASE", f'Swapped the stock phrase "{src}" for plainer wording.', changes)

        if options.tone in CONVERSATIONAL_TONES:
            for src, dst in CONTRACTIONS.items():
                out = self._replace(
                    out,
                    src,
                    dst,
                    "ADD_CONTRACTION",
                    "Used a contraction to sound more conversational.",
                    changes,
                    lookahead=r"(?=\s+\w)",
                )

        out = tidy_spacing(out)
        stats = HumanizationStats(
            total_changes=len(changes),
            phrases_replaced=sum(1 for change in changes if change.type in {"REPHRASE", "REMOVE_PHRASE"}),
            contractions_added=sum(1 for change in changes if change.type == "ADD_CONTRACTION"),
        )
        return HumanizationResult(text=out, changes=changes, stats=stats)

    @staticmethod
    def _remove_fillers(text: str, changes: list[ConversionChange]) -> str:
        out = text
        for phrase in FILLER_PHRASES:
            pattern = re.compile(_phrase_pattern(phrase) + r"[ \t]*(\w?)", flags=re.IGNORECASE)

            def _drop(match: re.Match) -> str:
                changes.append(
                    ConversionChange(
                        type="REMOVE_PHRASE",
                        original_text=match.group(0)[: len(phrase)],
                        humanized_text="",
                        explanation="Removed filler that adds length without meaning.",
                    )
                )
                following = match.group(1)
                if following and _at_sentence_start(match.string, match.start()):
                    return following.upper()
                return following

            out = pattern.sub(_drop, out)
        return out

    @staticmethod
    def _replace(
        text: str,
        src: str,
        dst: str,
        change_type: str,
        explanation: str,
        changes: list[ConversionChange],
        lookahead: str = "",
    ) -> str:
        pattern = re.compile(_phrase_pattern(src) + lookahead, flags=re.IGNORECASE)

        def _swap(match: re.Match) -> str:
            replacement = dst if dst[0].isupper() else match_case(match.group(0), dst)
            changes.append(
                ConversionChange(
                    type=change_type,
                    original_text=match.group(0),
                    humanized_text=replacement,
                    explanation=explanation,
                )
            )
            return replacement

        return pattern.sub(_swap, text)
