"""Headless application shell.

Holds all transient UI state and wires user actions to intake, rewrite and
export. Every asynchronous action takes a request token; when it completes,
its result is applied only if no newer call of the same kind was started in
the meantime.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import count
from typing import Literal

from humanizer_ai.core.errors import HumanizerError
from humanizer_ai.core.logging import get_logger
from humanizer_ai.schemas.humanize import ConversionChange, HumanizationStats, RewriteOptions
from humanizer_ai.services.export import ExportArtifact, export_document
from humanizer_ai.services.highlight import Segment, highlight_segments
from humanizer_ai.services.intake import extract_text
from humanizer_ai.services.rewrite_client import RewriteClient
from humanizer_ai.ui.panel import PanelController
from humanizer_ai.ui.resize import DEFAULT_PANE_HEIGHT, PointerOverrides, ResizeDrag
from humanizer_ai.utils.text import DEFAULT_FILE_NAME, derive_filename

logger = get_logger(__name__)

Operation = Literal["intake", "rewrite", "export"]

EMPTY_INPUT_MESSAGE = "Please enter some text or upload a file to rewrite."


class RequestTokens:
    def __init__(self) -> None:
        self._counter = count(1)
        self._latest: dict[str, int] = {}

    def issue(self, operation: Operation) -> int:
        token = next(self._counter)
        self._latest[operation] = token
        return token

    def is_current(self, operation: Operation, token: int) -> bool:
        return self._latest.get(operation) == token

    def complete(self, operation: Operation, token: int) -> bool:
        """Retire ``token``; returns whether it was still the latest for ``operation``."""
        if not self.is_current(operation, token):
            return False
        del self._latest[operation]
        return True

    def invalidate(self, operation: Operation) -> None:
        self._latest.pop(operation, None)

    def outstanding(self, *operations: Operation) -> bool:
        return any(operation in self._latest for operation in operations)


@dataclass
class SessionState:
    input_text: str = ""
    output_text: str = ""
    changes: list[ConversionChange] = field(default_factory=list)
    stats: HumanizationStats | None = None
    options: RewriteOptions = field(default_factory=RewriteOptions)
    output_format: Literal["docx", "pdf"] = "docx"
    file_name: str = DEFAULT_FILE_NAME
    is_loading: bool = False
    error: str | None = None
    show_analysis: bool = True
    pane_height: int = DEFAULT_PANE_HEIGHT
    pointer: PointerOverrides = field(default_factory=PointerOverrides)

    @property
    def can_rewrite(self) -> bool:
        return not self.is_loading and bool(self.input_text.strip())


class HumanizerSession:
    def __init__(self, rewrite_client: RewriteClient | None = None) -> None:
        self.rewrite_client = rewrite_client or RewriteClient()
        self.state = SessionState()
        self.panels = PanelController()
        self.tokens = RequestTokens()
        self._drag: ResizeDrag | None = None

    # -- input ---------------------------------------------------------------

    def set_input(self, text: str) -> None:
        self.state.input_text = text

    def set_options(self, **changes) -> RewriteOptions:
        self.state.options = RewriteOptions.model_validate({**self.state.options.model_dump(), **changes})
        return self.state.options

    def clear_output(self) -> None:
        self.state.output_text = ""
        self.state.changes = []
        self.state.stats = None
        self.panels.reset()

    def clear(self) -> None:
        for operation in ("intake", "rewrite", "export"):
            self.tokens.invalidate(operation)
        self.state.is_loading = False
        self.state.input_text = ""
        self.clear_output()
        self.state.error = None
        self.state.file_name = DEFAULT_FILE_NAME

    # -- asynchronous actions -----------------------------------------------

    def _finish(self, operation: Operation, token: int) -> bool:
        current = self.tokens.complete(operation, token)
        self.state.is_loading = self.tokens.outstanding("intake", "rewrite")
        if not current:
            logger.info("stale_result_discarded", operation=operation, token=token)
        return current

    async def load_file(self, filename: str, content_type: str | None, data: bytes) -> bool:
        token = self.tokens.issue("intake")
        # A rewrite of the previous input must not land on top of the new file.
        self.tokens.invalidate("rewrite")
        self.state.error = None
        self.state.is_loading = True
        self.clear_output()
        self.state.file_name = derive_filename(filename)

        text: str | None = None
        error: str | None = None
        try:
            text = await extract_text(data, filename, content_type)
        except HumanizerError as exc:
            error = exc.message
        finally:
            current = self._finish("intake", token)

        if not current:
            return False
        if error is not None:
            self.state.error = error
            return False
        self.state.input_text = text
        return True

    async def rewrite(self) -> bool:
        if not self.state.input_text.strip():
            self.state.error = EMPTY_INPUT_MESSAGE
            return False
        if self.state.is_loading:
            return False

        token = self.tokens.issue("rewrite")
        self.state.error = None
        self.state.is_loading = True
        self.clear_output()
        self.state.show_analysis = True

        result = None
        error: str | None = None
        try:
            result = await self.rewrite_client.humanize(self.state.input_text, self.state.options)
        except HumanizerError as exc:
            error = exc.message
        finally:
            current = self._finish("rewrite", token)

        if not current:
            return False
        if error is not None:
            self.state.error = error
            return False
        self.state.output_text = result.text
        self.state.changes = list(result.changes)
        self.state.stats = result.stats
        return True

    async def download(self) -> ExportArtifact | None:
        if not self.state.output_text:
            return None

        token = self.tokens.issue("export")
        artifact: ExportArtifact | None = None
        error: str | None = None
        try:
            artifact = await export_document(self.state.output_text, self.state.output_format, self.state.file_name)
        except HumanizerError as exc:
            error = exc.message
        finally:
            current = self._finish("export", token)

        if not current:
            return None
        if error is not None:
            self.state.error = error
            return None
        return artifact

    # -- output view ----------------------------------------------------------

    def toggle_analysis(self) -> bool:
        self.state.show_analysis = not self.state.show_analysis
        self.panels.reset()
        return self.state.show_analysis

    def highlighted(self) -> list[Segment]:
        return highlight_segments(self.state.output_text, self.state.changes, self.state.show_analysis)

    # -- pane resize ----------------------------------------------------------

    def press_resize(self, y: float) -> ResizeDrag:
        if self._drag is not None:
            self._drag.release()
        self._drag = ResizeDrag(
            start_y=y,
            start_height=self.state.pane_height,
            on_height=self._set_pane_height,
            overrides=self.state.pointer,
        )
        return self._drag

    def _set_pane_height(self, height: int) -> None:
        self.state.pane_height = height

    def close(self) -> None:
        if self._drag is not None:
            self._drag.release()
            self._drag = None
        self.panels.reset()
