"""
Basic parser tests - simplest cases

Tests empty source, text, output expressions, comments and tag errors.
"""

import pytest

from stencil.lib.parser import Parser
from stencil.lib.errors import TemplateSyntaxError
from stencil.models.parser import OutputNode, TagToken, TextNode, MacroParameter


class TestEmptyAndSimple:
    """Test empty source and plain content"""

    def test_empty_source(self):
        """Empty string should parse to empty token list"""
        result = Parser("").parse()
        assert result.tokens == []

    def test_plain_text(self):
        """Text without delimiters is a single text node"""
        result = Parser("Hello World").parse()

        assert len(result.tokens) == 1
        assert isinstance(result.tokens[0], TextNode)
        assert result.tokens[0].text == "Hello World"

    def test_output_between_text(self):
        """Output expressions split the surrounding text"""
        result = Parser("a {{ b }} c").parse()

        assert [type(t) for t in result.tokens] == [TextNode, OutputNode, TextNode]
        assert result.tokens[1].code == "_utils.lookup(_ctx, 'b')"
        assert result.tokens[2].text == " c"

    def test_comments_dropped(self):
        """Comments produce no tokens"""
        result = Parser("a{# note {{ x }} #}b").parse()
        assert [t.text for t in result.tokens] == ["a", "b"]

    def test_line_numbers(self):
        """Nodes carry the line they start on"""
        result = Parser("one\ntwo\n{{ x }}\n{{ y }}").parse()
        outputs = [t for t in result.tokens if isinstance(t, OutputNode)]

        assert outputs[0].line == 3
        assert outputs[1].line == 4


class TestTagErrors:
    """Malformed tags fail with the offending line"""

    def test_unknown_tag(self):
        with pytest.raises(TemplateSyntaxError) as exc:
            Parser("\n{% frobnicate %}").parse()
        assert 'Unexpected tag "frobnicate"' in str(exc.value)
        assert exc.value.line == 2

    def test_unclosed_output(self):
        with pytest.raises(TemplateSyntaxError) as exc:
            Parser("text {{ name").parse()
        assert 'Unclosed "{{"' in str(exc.value)

    def test_empty_tag(self):
        with pytest.raises(TemplateSyntaxError, match="Empty tag"):
            Parser("{%  %}").parse()

    def test_missing_end_tag(self):
        """Missing end tag is reported at the opening tag"""
        with pytest.raises(TemplateSyntaxError) as exc:
            Parser("\n\n{% macro m() %}body").parse()
        assert 'Missing end tag for "macro"' in str(exc.value)
        assert exc.value.line == 3

    def test_unexpected_end_tag(self):
        with pytest.raises(TemplateSyntaxError, match='Unexpected end of tag "macro"'):
            Parser("{% endmacro %}").parse()


class TestMacroParsing:
    """Macro definitions become tag tokens with a signature and body"""

    def test_signature_and_body(self):
        source = '{% macro hi(n, greeting="Hi") %}{{ greeting }} {{ n }}{% endmacro %}'
        result = Parser(source).parse()
        tag = result.tokens[0]

        assert isinstance(tag, TagToken)
        assert tag.macro_is()
        assert tag.args.name == "hi"
        assert tag.args.params == [MacroParameter("n", None), MacroParameter("greeting", "'Hi'")]
        assert [getattr(n, 'code', None) for n in tag.content] == ["_l_greeting", None, "_l_n"]

    def test_macro_symbols_after_close(self):
        """The macro name is callable after endmacro; params stay inside"""
        result = Parser("{% macro hi(n) %}{{ n }}{% endmacro %}").parse()

        assert result.symbols.macros == ["hi"]
        assert result.symbols.local_is("hi")
        assert not result.symbols.local_is("n")

    def test_macro_without_parentheses(self):
        result = Parser("{% macro rule %}<hr>{% endmacro %}").parse()
        assert result.tokens[0].args.params == []

    def test_macro_requires_name(self):
        with pytest.raises(TemplateSyntaxError, match="Macro requires a name"):
            Parser("{% macro %}{% endmacro %}").parse()

    def test_duplicate_parameter(self):
        with pytest.raises(TemplateSyntaxError, match='Duplicate macro parameter "a"'):
            Parser("{% macro m(a, a) %}{% endmacro %}").parse()

    def test_invalid_default(self):
        with pytest.raises(TemplateSyntaxError, match='Invalid default'):
            Parser("{% macro m(a=b) %}{% endmacro %}").parse()

    def test_nested_macro_stays_in_body(self):
        """Macros inside macros are content of the outer macro"""
        source = "{% macro outer() %}{% macro inner() %}x{% endmacro %}{% endmacro %}"
        result = Parser(source).parse()

        assert len(result.tokens) == 1
        assert result.tokens[0].content[0].args.name == "inner"
