"""
Argument lexer and expression compiler tests

Tests tokenization of tag arguments and the Python code generated for
output expressions.
"""

import pytest

from stencil.lib.lexer import arguments_tokenize
from stencil.lib.parser import Parser
from stencil.lib.errors import TemplateSyntaxError
from stencil.models.parser import TokenType


def output_code(source: str) -> str:
    """Compile a single {{ }} expression and return its code"""
    return Parser("{{ " + source + " }}").parse().tokens[0].code


class TestArgumentLexer:
    """Pygments-based tokenization of tag arguments"""

    def test_import_arguments(self):
        tokens = arguments_tokenize('"forms.html" as forms')

        assert [t.type for t in tokens] == [TokenType.STRING, TokenType.VAR, TokenType.VAR]
        assert [t.match for t in tokens] == ['"forms.html"', 'as', 'forms']

    def test_dotted_call(self):
        tokens = arguments_tokenize("forms.input('a', 1)")

        assert [t.type for t in tokens] == [
            TokenType.VAR,
            TokenType.PARENOPEN,
            TokenType.STRING,
            TokenType.COMMA,
            TokenType.NUMBER,
            TokenType.PARENCLOSE,
        ]
        assert tokens[0].match == "forms.input"

    def test_line_tracking(self):
        """Tokens on later lines of a multi-line tag get their own line"""
        tokens = arguments_tokenize('"a.html"\nas\n  b', line=3)
        assert [t.line for t in tokens] == [3, 4, 5]

    def test_keywords(self):
        tokens = arguments_tokenize("true and not none")
        assert [t.type for t in tokens] == [
            TokenType.CONSTANT,
            TokenType.OPERATOR,
            TokenType.OPERATOR,
            TokenType.CONSTANT,
        ]

    def test_unknown_character(self):
        tokens = arguments_tokenize("a @ b")
        assert tokens[1].type is TokenType.OTHER
        assert tokens[1].match == "@"


class TestExpressionCompile:
    """Output expressions compile to Python"""

    def test_context_variable(self):
        assert output_code("name") == "_utils.lookup(_ctx, 'name')"

    def test_dotted_variable(self):
        assert output_code("user.name") == "_utils.attr(_utils.lookup(_ctx, 'user'), 'name')"

    def test_arithmetic(self):
        assert output_code("1 + 2 * 3") == "1 + 2 * 3"

    def test_parentheses(self):
        assert output_code("(1 + 2) * 3") == "(1 + 2) * 3"

    def test_logic(self):
        assert output_code("not a and b") == (
            "not _utils.lookup(_ctx, 'a') and _utils.lookup(_ctx, 'b')"
        )

    def test_constants(self):
        assert output_code("true") == "True"
        assert output_code("null") == "None"

    def test_call_of_context_value(self):
        """Calls of unregistered names go through a property read"""
        assert output_code('f("x", 2)') == "_utils.call(_utils.lookup(_ctx, 'f'), 'x', 2)"

    def test_empty_expression(self):
        with pytest.raises(TemplateSyntaxError, match="Empty expression"):
            Parser("{{ }}").parse()

    def test_trailing_token(self):
        with pytest.raises(TemplateSyntaxError, match='Unexpected token "b"'):
            Parser("{{ a b }}").parse()

    def test_bad_argument_list(self):
        with pytest.raises(TemplateSyntaxError, match="in argument list"):
            Parser("{{ f(a b) }}").parse()
