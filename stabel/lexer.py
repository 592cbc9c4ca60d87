"""
Lexer: raw program text -> TokenStream.

Space, tab, carriage return and newline separate tokens; newlines also
advance the line counter used in diagnostics.
"""

from __future__ import annotations

import logging
import re
from typing import List

from .errors import UnrecognizedCharacter
from .tokens import Token, TokenKind, TokenStream

LOGGER = logging.getLogger("stabel.lexer")

TOKEN_SPECIFICATION = [
    ("INTEGER", r"[0-9]+"),
    ("IDENTIFIER", r"[A-Za-z_]+"),
    ("OPERATOR", r"[+\-*/@:=!]"),
    ("NEWLINE", r"\n"),
    ("SKIP", r"[ \t\r]+"),
    ("MISMATCH", r"."),
]

MASTER_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in TOKEN_SPECIFICATION), re.DOTALL)


def lex(source: str) -> TokenStream:
    """Scan ``source`` in a single maximal-munch pass.

    Raises UnrecognizedCharacter on the first character outside the grammar;
    no partial token stream is returned in that case.
    """
    tokens: List[Token] = []
    line = 1
    line_start = 0
    for mo in MASTER_RE.finditer(source):
        kind = mo.lastgroup
        text = mo.group()
        offset = mo.start()
        column = offset - line_start + 1
        if kind == "NEWLINE":
            line += 1
            line_start = mo.end()
            continue
        if kind == "SKIP":
            continue
        if kind == "MISMATCH":
            raise UnrecognizedCharacter(text, offset, line, column)
        if kind == "INTEGER":
            tokens.append(Token(TokenKind.INTEGER, int(text), offset, line, column))
        elif kind == "IDENTIFIER":
            tokens.append(Token(TokenKind.IDENTIFIER, text, offset, line, column))
        else:
            tokens.append(Token(TokenKind.OPERATOR, text, offset, line, column))
    LOGGER.debug("lexed %d tokens over %d lines", len(tokens), line)
    return TokenStream(tokens)


__all__ = ["lex", "TOKEN_SPECIFICATION"]
