import re

DEFAULT_FILE_NAME = "humanized-text"

_EXTENSION_RE = re.compile(r"\.[^/.]+$")
_INLINE_SPACE_RE = re.compile(r"[ \t]{2,}")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"[ \t]+([,.!?;:])")
_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def strip_extension(filename: str) -> str:
    return _EXTENSION_RE.sub("", filename)


def sanitize_filename(name: str | None, default: str = DEFAULT_FILE_NAME) -> str:
    base = _UNSAFE_FILENAME_RE.sub("_", (name or "").strip()).strip(" .")
    return base or default


def derive_filename(filename: str | None, default: str = DEFAULT_FILE_NAME) -> str:
    return sanitize_filename(strip_extension((filename or "").strip()), default)


def tidy_spacing(text: str) -> str:
    """Collapse runs of inline whitespace left by edits; line breaks are kept."""
    out = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
    return _INLINE_SPACE_RE.sub(" ", out)


def match_case(source: str, replacement: str) -> str:
    if not replacement or not source:
        return replacement
    if source.isupper() and len(source) > 1:
        return replacement.upper()
    if source[0].isupper():
        return replacement[0].upper() + replacement[1:]
    return replacement
