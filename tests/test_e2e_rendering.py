"""
End-to-end rendering tests

Tests the full pipeline: template source → Parser → Compiler → Template → output
"""

import pytest
from pathlib import Path

from stencil.config import AppSettings
from stencil.lib import runtime
from stencil.lib.engine import Engine


FORMS = (
    '{% macro input(type, name) %}<input type="{{ type }}" name="{{ name }}">{% endmacro %}\n'
    '{% macro label(text) %}<label>{{ text }}</label>{% endmacro %}\n'
    '{% macro greet() %}Hi {{ name }}{% endmacro %}\n'
)


@pytest.fixture
def engine(tmp_path):
    (tmp_path / "forms.html").write_text(FORMS)
    return Engine(root=tmp_path)


class TestBasicRendering:
    """Templates without imports"""

    def test_escaped_output(self, engine):
        assert engine.render("Hi {{ name }}", {"name": "<b>"}) == "Hi &lt;b&gt;"

    def test_missing_variable_is_empty(self, engine):
        assert engine.render("[{{ missing.deep }}]") == "[]"

    def test_arithmetic(self, engine):
        assert engine.render("{{ (1 + 2) * 3 }}") == "9"

    def test_autoescape_off(self, tmp_path):
        engine = Engine(root=tmp_path, settings=AppSettings(autoescape=False))
        assert engine.render("{{ v }}", {"v": "<i>"}) == "<i>"

    def test_local_macro(self, engine):
        source = '{% macro hi(n) %}<b>{{ n }}</b>{% endmacro %}{{ hi("<x>") }}'
        assert engine.render(source) == "<b>&lt;x&gt;</b>"

    def test_macro_default(self, engine):
        source = '{% macro hi(n="you") %}Hi {{ n }}{% endmacro %}{{ hi() }}'
        assert engine.render(source) == "Hi you"


class TestImportRendering:
    """Imported macros are reachable only through their alias"""

    def test_namespaced_call(self, engine):
        source = '{% import "forms.html" as forms %}{{ forms.input("text", "user") }}'
        assert engine.render(source) == '<input type="text" name="user">'

    def test_bare_name_not_bound(self, engine):
        source = '{% import "forms.html" as forms %}[{{ input }}]'
        assert engine.render(source) == "[]"

    def test_context_not_mutated(self, engine):
        context = {"forms": "from context"}
        source = '{% import "forms.html" as forms %}{{ forms.label("x") }}'

        assert engine.render(source, context) == "<label>x</label>"
        assert context == {"forms": "from context"}

    def test_context_visible_inside_macro(self, engine):
        source = '{% import "forms.html" as f %}{{ f.greet() }}'
        assert engine.render(source, {"name": "Bob"}) == "Hi Bob"

    def test_two_aliases(self, engine):
        source = (
            '{% import "forms.html" as a %}{% import "forms.html" as b %}'
            '{{ a.label("x") }}{{ b.label("y") }}'
        )
        assert engine.render(source) == "<label>x</label><label>y</label>"

    def test_unsafe_macros_are_escaped(self, tmp_path):
        (tmp_path / "forms.html").write_text(FORMS)
        engine = Engine(root=tmp_path, settings=AppSettings(macro_output_safe=False))

        source = '{% import "forms.html" as forms %}{{ forms.label("x") }}'
        assert engine.render(source) == "&lt;label&gt;x&lt;/label&gt;"

    def test_render_file(self, tmp_path, engine):
        (tmp_path / "page.html").write_text(
            '{% import "./forms.html" as forms %}\n<p>{{ forms.label(title) }}</p>'
        )
        assert engine.render_file("page.html", {"title": "T"}) == "\n<p><label>T</label></p>"


class TestImportedMacroScope:
    """Imported macros resolve their own file's names, never the caller's"""

    @pytest.fixture
    def engine(self, tmp_path):
        (tmp_path / "lib.html").write_text(
            '{% macro b() %}B{% endmacro %}{% macro a() %}[{{ b() }}]{% endmacro %}'
        )
        (tmp_path / "x.html").write_text('{% macro t() %}X{% endmacro %}')
        (tmp_path / "y.html").write_text('{% macro t() %}Y{% endmacro %}')
        (tmp_path / "outer.html").write_text(
            '{% import "x.html" as inner %}{% macro a() %}[{{ inner.t() }}]{% endmacro %}'
        )
        return Engine(root=tmp_path)

    def test_sibling_call(self, engine):
        assert engine.render('{% import "lib.html" as ns %}{{ ns.a() }}') == "[B]"

    def test_sibling_call_ignores_caller_macro(self, engine):
        source = (
            '{% macro b() %}CALLER{% endmacro %}'
            '{% import "lib.html" as ns %}{{ ns.a() }}{{ b() }}'
        )
        assert engine.render(source) == "[B]CALLER"

    def test_own_import_used(self, engine):
        assert engine.render('{% import "outer.html" as ns %}{{ ns.a() }}') == "[X]"

    def test_own_import_ignores_caller_alias(self, engine):
        source = (
            '{% import "y.html" as inner %}{% import "outer.html" as ns %}'
            '{{ ns.a() }}{{ inner.t() }}'
        )
        assert engine.render(source) == "[X]Y"

    def test_own_import_not_exposed(self, engine):
        source = '{% import "outer.html" as ns %}[{{ ns.inner }}]'
        assert engine.render(source) == "[]"


class TestEngineCaching:
    """Compiled top-level templates are cached per path"""

    def test_compile_file_cached(self, tmp_path, engine):
        (tmp_path / "page.html").write_text("x")
        assert engine.compile_file("page.html") is engine.compile_file("page.html")

    def test_cache_invalidate(self, tmp_path, engine):
        page = tmp_path / "page.html"
        page.write_text("one")
        assert engine.render_file("page.html") == "one"

        page.write_text("two")
        assert engine.render_file("page.html") == "one"

        engine.cache_invalidate()
        assert engine.render_file("page.html") == "two"


class TestRuntime:
    """Helpers used by generated code"""

    def test_out(self):
        assert runtime.out(None) == ""
        assert runtime.out("<") == "&lt;"
        assert runtime.out(runtime.SafeString("<")) == "<"

    def test_call_non_callable(self):
        assert runtime.call(None, 1) == ""

    def test_call_safe_function(self):
        def fn():
            return "<b>"
        fn.safe = True

        assert isinstance(runtime.call(fn), runtime.SafeString)
        assert not isinstance(runtime.call(lambda: "<b>"), runtime.SafeString)

    def test_attr(self):
        assert runtime.attr({"a": 1}, "a") == 1
        assert runtime.attr(None, "a") is None
        assert runtime.attr(runtime.Namespace(x=2), "x") == 2
