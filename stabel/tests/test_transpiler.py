"""Transpiler dispatch tests (emitted text only, no C compiler needed)."""

import pytest

from stabel.config import TranspileOptions
from stabel.errors import (
    MissingEqualityBeforeThen,
    MissingIdentifierBeforeDef,
    UnbalancedBlock,
    UnrecognizedCharacter,
    UnrecognizedIdentifier,
    UnrecognizedToken,
)
from stabel.lexer import lex
from stabel.registry import VariableRegistry
from stabel.tokens import Token, TokenKind, TokenStream
from stabel.transpiler import Transpiler, transpile

PLAIN = TranspileOptions(trace_comments=False)


def body(source: str, options: TranspileOptions = PLAIN) -> list:
    """Emitted statement lines between `int main(void) {` and the closing brace."""
    code = transpile(source, options).code
    head, _, rest = code.partition("int main(void) {\n")
    assert rest.endswith("}\n")
    return [line for line in rest[:-2].splitlines() if line]


def test_integer_pushes_value() -> None:
    assert body("42") == ["push(42);"]


def test_echo_and_peek() -> None:
    assert body("1 echo") == ["push(1);", 'printf("%d\\n", pop());']
    assert body("1 peek") == ["push(1);", "__a__ = pop();", "push(__a__);", 'printf("%d\\n", __a__);']


def test_arithmetic_operand_order() -> None:
    assert body("5 3 -") == ["push(5);", "push(3);", "__a__ = pop();", "push(pop() - __a__);"]
    for op in "+*/":
        assert body(f"8 2 {op}")[-1] == f"push(pop() {op} __a__);"


def test_swap_and_dup() -> None:
    assert body("@") == ["__a__ = pop();", "__b__ = pop();", "push(__a__);", "push(__b__);"]
    assert body(":") == ["__a__ = pop();", "push(__a__);", "push(__a__);"]


def test_first_def_declares_then_assigns() -> None:
    result = transpile("1 x def 2 x def x echo", PLAIN)
    lines = body("1 x def 2 x def x echo")
    assert lines == [
        "push(1);",
        "int x = pop();",
        "push(2);",
        "x = pop();",
        "push(x);",
        'printf("%d\\n", pop());',
    ]
    assert result.variables == ["x"]


def test_declaration_target_emits_nothing() -> None:
    lines = body("1 y def")
    assert "push(y);" not in lines
    assert lines == ["push(1);", "int y = pop();"]


def test_declared_variable_as_last_token_is_pushed() -> None:
    assert body("3 z def z")[-1] == "push(z);"


def test_registry_is_shared_through_the_pass() -> None:
    registry = VariableRegistry()
    Transpiler(lex("1 a def 2 b def 3 a def"), options=PLAIN, registry=registry).run()
    assert registry.names() == ["a", "b"]


def test_equality_with_then_opens_branch() -> None:
    lines = body("5 5 = then 1 echo ! 2 echo end")
    assert "if (__a__ == __b__) {" in lines
    assert "} else {" in lines
    assert lines[-1] == "}"
    assert not any(line.startswith("push(__a__ == __b__)") for line in lines)


def test_equality_without_then_pushes_boolean() -> None:
    lines = body("5 4 = echo")
    assert "push(__a__ == __b__);" in lines
    assert not any(line.startswith("if") for line in lines)


def test_then_after_bang_is_accepted() -> None:
    lines = body("1 1 = then 1 echo ! then 2 echo end")
    assert lines.count("} else {") == 1


def test_then_requires_equality() -> None:
    with pytest.raises(MissingEqualityBeforeThen):
        transpile("1 2 + then")
    with pytest.raises(MissingEqualityBeforeThen):
        transpile("then")


def test_def_requires_identifier() -> None:
    with pytest.raises(MissingIdentifierBeforeDef):
        transpile("1 def")
    with pytest.raises(MissingIdentifierBeforeDef):
        transpile("def")


def test_unknown_identifier() -> None:
    with pytest.raises(UnrecognizedIdentifier) as info:
        transpile("1 foo")
    assert info.value.name == "foo"
    assert (info.value.line, info.value.column) == (1, 3)


def test_use_before_declaration_is_unknown() -> None:
    with pytest.raises(UnrecognizedIdentifier):
        transpile("x 1 x def")


def test_keywords_shadow_variables() -> None:
    # `echo def` declares a variable named echo, but a bare `echo` stays a keyword.
    lines = body("1 2 echo def echo")
    assert lines.count('printf("%d\\n", pop());') == 2
    assert "push(echo);" not in lines


def test_unreachable_operator_is_rejected() -> None:
    stream = TokenStream([Token(TokenKind.OPERATOR, "%")])
    with pytest.raises(UnrecognizedToken):
        Transpiler(stream).run()


def test_lex_errors_propagate() -> None:
    with pytest.raises(UnrecognizedCharacter):
        transpile("1 $ echo")


@pytest.mark.parametrize("source", [
    "end",
    "!",
    "1 1 = then 2 echo",
    "1 1 = then 2 ! 3 ! 4 end",
    "1 1 = then end end",
])
def test_strict_blocks_reject_unbalanced(source) -> None:
    with pytest.raises(UnbalancedBlock):
        transpile(source)


def test_permissive_blocks_keep_braces() -> None:
    options = TranspileOptions(trace_comments=False, strict_blocks=False)
    assert body("end", options) == ["}"]
    assert body("1 1 = then", options)[-1] == "if (__a__ == __b__) {"


def test_nested_blocks_balance() -> None:
    lines = body("1 1 = then 2 2 = then 3 echo end ! 4 echo end")
    assert lines.count("if (__a__ == __b__) {") == 2
    assert lines.count("}") == 2


def test_trace_comments_and_separators() -> None:
    code = transpile("1 echo").code
    assert '// INT(1)\npush(1);\n\n// ID(echo)\nprintf("%d\\n", pop());\n}\n' in code


def test_stack_size_option() -> None:
    code = transpile("1", TranspileOptions(stack_size=8)).code
    assert "#define MAX_SIZE 8" in code


def test_transpile_is_deterministic() -> None:
    source = "1 x def x x + : echo 3 3 = then x echo ! 0 echo end"
    assert transpile(source).code == transpile(source).code


def test_empty_program() -> None:
    assert body("") == []


def test_declaration_inside_branch_is_block_scoped_in_c() -> None:
    lines = body("1 1 = then 5 x def end x echo")
    open_at = lines.index("if (__a__ == __b__) {")
    close_at = lines.index("}")
    assert open_at < lines.index("int x = pop();") < close_at
    assert lines.index("push(x);") > close_at
