"""Interactive transpile preview."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, History, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from .config import TranspileOptions
from .errors import StabelError
from .transpiler import transpile

LOGGER = logging.getLogger("stabel.repl")

DEFAULT_HISTORY = Path.home() / ".stabel_history"
PROMPT = "stabel> "


class PreviewREPL:
    """Each submitted line is transpiled as a complete program."""

    def __init__(
        self,
        options: Optional[TranspileOptions] = None,
        *,
        history_path: Optional[Path] = None,
        show_tokens: bool = False,
        output: Callable[[str], None] = print,
    ) -> None:
        self.options = options or TranspileOptions()
        self.history_path = history_path
        self.show_tokens = show_tokens
        self.output = output
        self.running = True

    def _history(self) -> History:
        if self.history_path is None:
            return InMemoryHistory()
        try:
            self.history_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            LOGGER.warning("history disabled: %s", exc)
            return InMemoryHistory()
        return FileHistory(str(self.history_path))

    def handle(self, line: str) -> None:
        text = line.strip()
        if not text:
            return
        if text.startswith(":"):
            self._meta(text)
            return
        try:
            result = transpile(text, self.options)
        except StabelError as exc:
            self.output(f"error: {exc}")
            return
        if self.show_tokens:
            self.output(" ".join(result.tokens.dump()))
        self.output(result.code)

    def _meta(self, command: str) -> None:
        if command in (":q", ":quit", ":exit"):
            self.running = False
        elif command == ":tokens":
            self.show_tokens = not self.show_tokens
            self.output(f"token dump {'on' if self.show_tokens else 'off'}")
        elif command == ":trace":
            self.options = self.options.override(trace_comments=not self.options.trace_comments)
            self.output(f"trace comments {'on' if self.options.trace_comments else 'off'}")
        else:
            self.output(f"unknown command: {command} (try :tokens, :trace, :quit)")

    def run(self) -> int:
        session = PromptSession(PROMPT, history=self._history())
        while self.running:
            try:
                with patch_stdout():
                    line = session.prompt()
            except (EOFError, KeyboardInterrupt):
                self.output("")
                return 0
            self.handle(line)
        return 0


__all__ = ["PreviewREPL", "DEFAULT_HISTORY"]
