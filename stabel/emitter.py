"""C emission for the stack-machine program."""

from __future__ import annotations

from typing import List, Optional

from .tokens import Token

SCRATCH_A = "__a__"
SCRATCH_B = "__b__"

ARITHMETIC_OPERATORS = ("+", "-", "*", "/")

PRELUDE_TEMPLATE = """\
#include <stdio.h>
#include <stdlib.h>

#define MAX_SIZE {stack_size}

int stack[MAX_SIZE];
int top = -1;
int {a};
int {b};

void push(int item) {{
    if (top == MAX_SIZE - 1) {{
        printf("Stack Overflow\\n");
        exit(1);
    }}
    stack[++top] = item;
}}

int pop(void) {{
    if (top == -1) {{
        printf("Stack Underflow\\n");
        exit(1);
    }}
    return stack[top--];
}}

int main(void) {{
"""

EPILOGUE = "}\n"


def render_prelude(stack_size: int) -> str:
    if stack_size < 1:
        raise ValueError("stack_size must be at least 1")
    return PRELUDE_TEMPLATE.format(stack_size=stack_size, a=SCRATCH_A, b=SCRATCH_B)


class CEmitter:
    """Append-only C statement buffer, grouped per source token."""

    def __init__(self, *, stack_size: int = 255, trace_comments: bool = True) -> None:
        self.prelude = render_prelude(stack_size)
        self.trace_comments = trace_comments
        self._chunks: List[List[str]] = []

    # -- grouping ----------------------------------------------------------
    def begin(self, token: Optional[Token] = None) -> None:
        """Start the statement group for ``token``."""
        chunk: List[str] = []
        if self.trace_comments and token is not None:
            chunk.append(f"// {token}")
        self._chunks.append(chunk)

    def _line(self, text: str) -> None:
        if not self._chunks:
            self._chunks.append([])
        self._chunks[-1].append(text)

    # -- statements --------------------------------------------------------
    def push_literal(self, value: int) -> None:
        self._line(f"push({value});")

    def push_variable(self, name: str) -> None:
        self._line(f"push({name});")

    def echo(self) -> None:
        self._line('printf("%d\\n", pop());')

    def peek(self) -> None:
        self._line(f"{SCRATCH_A} = pop();")
        self._line(f"push({SCRATCH_A});")
        self._line(f'printf("%d\\n", {SCRATCH_A});')

    def declare(self, name: str) -> None:
        self._line(f"int {name} = pop();")

    def assign(self, name: str) -> None:
        self._line(f"{name} = pop();")

    def arithmetic(self, op: str) -> None:
        if op not in ARITHMETIC_OPERATORS:
            raise ValueError(f"not an arithmetic operator: {op!r}")
        self._line(f"{SCRATCH_A} = pop();")
        self._line(f"push(pop() {op} {SCRATCH_A});")

    def swap(self) -> None:
        self._line(f"{SCRATCH_A} = pop();")
        self._line(f"{SCRATCH_B} = pop();")
        self._line(f"push({SCRATCH_A});")
        self._line(f"push({SCRATCH_B});")

    def dup(self) -> None:
        self._line(f"{SCRATCH_A} = pop();")
        self._line(f"push({SCRATCH_A});")
        self._line(f"push({SCRATCH_A});")

    def equality(self, *, branch: bool) -> None:
        self._line(f"{SCRATCH_B} = pop();")
        self._line(f"{SCRATCH_A} = pop();")
        if branch:
            self._line(f"if ({SCRATCH_A} == {SCRATCH_B}) {{")
        else:
            self._line(f"push({SCRATCH_A} == {SCRATCH_B});")

    def else_branch(self) -> None:
        self._line("} else {")

    def close_block(self) -> None:
        self._line("}")

    # -- output ------------------------------------------------------------
    def statements(self) -> str:
        """Emitted statements, token groups separated by a blank line."""
        groups = ["".join(f"{line}\n" for line in chunk) for chunk in self._chunks if chunk]
        return "\n".join(groups)

    def render(self) -> str:
        return self.prelude + self.statements() + EPILOGUE


__all__ = ["CEmitter", "render_prelude", "SCRATCH_A", "SCRATCH_B", "ARITHMETIC_OPERATORS"]
