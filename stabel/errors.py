"""Error types raised by the stabel front end and build glue."""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .tokens import Token


class StabelError(Exception):
    """Base class for every fatal transpilation error."""

    def __init__(
        self,
        message: str,
        *,
        token: Optional["Token"] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.message = message
        self.token = token
        if token is not None:
            line = token.line if line is None else line
            column = token.column if column is None else column
        self.line = line
        self.column = column
        super().__init__(self._render())

    def _render(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.line}:{self.column}: {self.message}"


class UnrecognizedCharacter(StabelError):
    def __init__(self, char: str, offset: int, line: int, column: int) -> None:
        self.char = char
        self.offset = offset
        super().__init__(f"Unrecognized character: {char!r}", line=line, column=column)


class MissingEqualityBeforeThen(StabelError):
    def __init__(self, token: "Token") -> None:
        super().__init__("The word `then` must have an equal or not equal symbol before it", token=token)


class MissingIdentifierBeforeDef(StabelError):
    def __init__(self, token: "Token") -> None:
        super().__init__("The word `def` must have an identifier before it", token=token)


class UnrecognizedIdentifier(StabelError):
    def __init__(self, token: "Token") -> None:
        self.name = str(token.value)
        super().__init__(f"Unrecognized identifier: {self.name}", token=token)


class UnrecognizedToken(StabelError):
    def __init__(self, token: "Token") -> None:
        super().__init__(f"Unrecognized token {token}", token=token)


class UnbalancedBlock(StabelError):
    """An `end`/`!` without an open `= then` block, or a block left open."""


class BuildError(Exception):
    """Native build error (compiler missing or failing)."""
    pass


__all__ = [
    "StabelError",
    "UnrecognizedCharacter",
    "MissingEqualityBeforeThen",
    "MissingIdentifierBeforeDef",
    "UnrecognizedIdentifier",
    "UnrecognizedToken",
    "UnbalancedBlock",
    "BuildError",
]
