"""User-facing error taxonomy.

Every error carries a message that is safe to show verbatim. None of them is
fatal: the caller converts them at the boundary where the operation started.
"""

from __future__ import annotations

SUPPORTED_FILE_TYPES_MESSAGE = "Unsupported file type. Please upload a .docx, .pdf, or .txt file."


class HumanizerError(Exception):
    default_message = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class UnsupportedFileTypeError(HumanizerError):
    default_message = SUPPORTED_FILE_TYPES_MESSAGE


class DocumentParseError(HumanizerError):
    default_message = "Failed to process file."


class RewriteError(HumanizerError):
    default_message = "An unexpected error occurred."


class InputTooLongError(RewriteError):
    pass


class ExportError(HumanizerError):
    default_message = "Failed to download file."
