"""Token model, token classifier and the lookaround token stream."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple, Union

OPERATORS = frozenset("+-*/@:=!")
KEYWORDS = frozenset({"echo", "peek", "end", "then", "def"})

TokenValue = Union[int, str]


class TokenKind(enum.Enum):
    INTEGER = "INT"
    IDENTIFIER = "ID"
    OPERATOR = "OP"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: TokenValue
    offset: int = field(default=0, compare=False)
    line: int = field(default=1, compare=False)
    column: int = field(default=1, compare=False)

    def __str__(self) -> str:
        return f"{self.kind.value}({self.value})"


def classify(token: Optional[Token]) -> Tuple[Optional[TokenKind], Optional[TokenValue]]:
    """Return ``(kind, payload)`` for a token, ``(None, None)`` when absent."""
    if token is None:
        return None, None
    return token.kind, token.value


def is_integer(token: Optional[Token]) -> bool:
    return token is not None and token.kind is TokenKind.INTEGER


def is_identifier(token: Optional[Token], name: Optional[str] = None) -> bool:
    if token is None or token.kind is not TokenKind.IDENTIFIER:
        return False
    return name is None or token.value == name


def is_operator(token: Optional[Token], *symbols: str) -> bool:
    if token is None or token.kind is not TokenKind.OPERATOR:
        return False
    return not symbols or token.value in symbols


class TokenStream:
    """Immutable, index-addressable token sequence with one-token lookaround.

    Indices are 0-based. Reads outside the sequence return ``None`` instead of
    raising, so callers can treat a missing neighbour as "absent".
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens: Tuple[Token, ...] = tuple(tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TokenStream):
            return self._tokens == other._tokens
        return NotImplemented

    def __repr__(self) -> str:
        return f"TokenStream({' '.join(str(tok) for tok in self._tokens)})"

    def at(self, index: int) -> Optional[Token]:
        if 0 <= index < len(self._tokens):
            return self._tokens[index]
        return None

    def peek(self, index: int, offset: int) -> Optional[Token]:
        return self.at(index + offset)

    def previous(self, index: int) -> Optional[Token]:
        return self.at(index - 1)

    def following(self, index: int) -> Optional[Token]:
        return self.at(index + 1)

    def dump(self) -> List[str]:
        """Trace form of every token, in order."""
        return [str(tok) for tok in self._tokens]


__all__ = [
    "OPERATORS",
    "KEYWORDS",
    "TokenKind",
    "Token",
    "TokenStream",
    "classify",
    "is_integer",
    "is_identifier",
    "is_operator",
]
