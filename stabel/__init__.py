"""
stabel - transpiler for a minimal postfix stack language.

Programs are lexed into a flat token stream and translated, one token at a
time, into a standalone C program that emulates a bounded integer stack.
Use ``python -m stabel`` for the command line front end.
"""

from __future__ import annotations

from .config import TranspileOptions
from .errors import (
    BuildError,
    MissingEqualityBeforeThen,
    MissingIdentifierBeforeDef,
    StabelError,
    UnbalancedBlock,
    UnrecognizedCharacter,
    UnrecognizedIdentifier,
    UnrecognizedToken,
)
from .lexer import lex
from .tokens import Token, TokenKind, TokenStream
from .transpiler import Transpiler, TranspileResult, transpile

__all__ = [
    "BuildError",
    "MissingEqualityBeforeThen",
    "MissingIdentifierBeforeDef",
    "StabelError",
    "Token",
    "TokenKind",
    "TokenStream",
    "TranspileOptions",
    "TranspileResult",
    "Transpiler",
    "UnbalancedBlock",
    "UnrecognizedCharacter",
    "UnrecognizedIdentifier",
    "UnrecognizedToken",
    "lex",
    "transpile",
]
__version__ = "0.1.0"
