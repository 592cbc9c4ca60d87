"""
Single-pass transpiler from stabel tokens to C.

Each token is resolved from its own kind/value plus at most one neighbour on
either side; there is no intermediate tree. Identifier resolution priority is
keyword > declared variable > fresh declaration target > error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .config import TranspileOptions
from .emitter import ARITHMETIC_OPERATORS, CEmitter
from .errors import (
    MissingEqualityBeforeThen,
    MissingIdentifierBeforeDef,
    UnbalancedBlock,
    UnrecognizedIdentifier,
    UnrecognizedToken,
)
from .lexer import lex
from .registry import VariableRegistry
from .tokens import Token, TokenKind, TokenStream, classify, is_identifier, is_operator

LOGGER = logging.getLogger("stabel.transpiler")


@dataclass
class _OpenBlock:
    opened_by: Token
    has_else: bool = False


@dataclass
class TranspileResult:
    code: str
    tokens: TokenStream
    variables: List[str] = field(default_factory=list)


class Transpiler:
    """Walks a TokenStream once and feeds a CEmitter."""

    def __init__(
        self,
        tokens: TokenStream,
        *,
        options: Optional[TranspileOptions] = None,
        registry: Optional[VariableRegistry] = None,
    ) -> None:
        self.tokens = tokens
        self.options = options or TranspileOptions()
        self.registry = registry if registry is not None else VariableRegistry()
        self.emitter = CEmitter(
            stack_size=self.options.stack_size,
            trace_comments=self.options.trace_comments,
        )
        self._blocks: List[_OpenBlock] = []
        self._keywords: Dict[str, Callable[[int, Token], None]] = {
            "echo": self._keyword_echo,
            "peek": self._keyword_peek,
            "end": self._keyword_end,
            "then": self._keyword_then,
            "def": self._keyword_def,
        }
        self._operators: Dict[str, Callable[[int, Token], None]] = {
            "+": self._operator_arithmetic,
            "-": self._operator_arithmetic,
            "*": self._operator_arithmetic,
            "/": self._operator_arithmetic,
            "@": self._operator_swap,
            ":": self._operator_dup,
            "=": self._operator_equal,
            "!": self._operator_else,
        }

    @property
    def block_depth(self) -> int:
        return len(self._blocks)

    def run(self) -> str:
        for index, token in enumerate(self.tokens):
            self.emitter.begin(token)
            self.translate(index, token)
        if self.options.strict_blocks and self._blocks:
            first = self._blocks[0].opened_by
            raise UnbalancedBlock(
                f"{len(self._blocks)} conditional block(s) left open, missing `end`",
                token=first,
            )
        LOGGER.debug(
            "transpiled %d tokens, %d variable(s) declared",
            len(self.tokens),
            len(self.registry),
        )
        return self.emitter.render()

    def translate(self, index: int, token: Token) -> None:
        """Emit the statements for the token at ``index``."""
        kind, value = classify(token)
        if kind is TokenKind.INTEGER:
            self.emitter.push_literal(int(value))
        elif kind is TokenKind.IDENTIFIER:
            self._identifier(index, token)
        elif kind is TokenKind.OPERATOR:
            handler = self._operators.get(str(value))
            if handler is None:
                raise UnrecognizedToken(token)
            handler(index, token)
        else:
            raise UnrecognizedToken(token)

    # -- identifiers ---------------------------------------------------------
    def _identifier(self, index: int, token: Token) -> None:
        name = str(token.value)
        keyword = self._keywords.get(name)
        if keyword is not None:
            keyword(index, token)
            return
        is_target = is_identifier(self.tokens.following(index), "def")
        if name in self.registry:
            if not is_target:
                self.emitter.push_variable(name)
            return
        if not is_target:
            raise UnrecognizedIdentifier(token)

    def _keyword_echo(self, index: int, token: Token) -> None:
        self.emitter.echo()

    def _keyword_peek(self, index: int, token: Token) -> None:
        self.emitter.peek()

    def _keyword_end(self, index: int, token: Token) -> None:
        if self.options.strict_blocks:
            if not self._blocks:
                raise UnbalancedBlock("`end` without an open `= then` block", token=token)
            self._blocks.pop()
        self.emitter.close_block()

    def _keyword_then(self, index: int, token: Token) -> None:
        if not is_operator(self.tokens.previous(index), "=", "!"):
            raise MissingEqualityBeforeThen(token)

    def _keyword_def(self, index: int, token: Token) -> None:
        target = self.tokens.previous(index)
        if not is_identifier(target):
            raise MissingIdentifierBeforeDef(token)
        name = str(target.value)
        if self.registry.declare(name):
            self.emitter.declare(name)
        else:
            self.emitter.assign(name)

    # -- operators -----------------------------------------------------------
    def _operator_arithmetic(self, index: int, token: Token) -> None:
        op = str(token.value)
        if op not in ARITHMETIC_OPERATORS:
            raise UnrecognizedToken(token)
        self.emitter.arithmetic(op)

    def _operator_swap(self, index: int, token: Token) -> None:
        self.emitter.swap()

    def _operator_dup(self, index: int, token: Token) -> None:
        self.emitter.dup()

    def _operator_equal(self, index: int, token: Token) -> None:
        branch = is_identifier(self.tokens.following(index), "then")
        self.emitter.equality(branch=branch)
        if branch and self.options.strict_blocks:
            self._blocks.append(_OpenBlock(opened_by=token))

    def _operator_else(self, index: int, token: Token) -> None:
        if self.options.strict_blocks:
            if not self._blocks:
                raise UnbalancedBlock("`!` without an open `= then` block", token=token)
            block = self._blocks[-1]
            if block.has_else:
                raise UnbalancedBlock("second `!` in the same conditional block", token=token)
            block.has_else = True
        self.emitter.else_branch()


def transpile_tokens(tokens: TokenStream, options: Optional[TranspileOptions] = None) -> TranspileResult:
    registry = VariableRegistry()
    code = Transpiler(tokens, options=options, registry=registry).run()
    return TranspileResult(code=code, tokens=tokens, variables=registry.names())


def transpile(source: str, options: Optional[TranspileOptions] = None) -> TranspileResult:
    """Lex and transpile ``source``; raises a StabelError on the first problem."""
    return transpile_tokens(lex(source), options)


__all__ = ["Transpiler", "TranspileResult", "transpile", "transpile_tokens"]
