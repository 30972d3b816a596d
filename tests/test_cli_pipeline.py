"""
CLI pipeline tests

Runs the plugin's pipeline stages directly on a temporary template tree.
"""

import pytest

from stencil.__main__ import env_check, source_compile, template_render, results_report
from stencil.models import ProgramState, pipeline


@pytest.fixture
def tree(tmp_path):
    inputdir = tmp_path / "in"
    inputdir.mkdir()
    (inputdir / "forms.html").write_text(
        '{% macro label(text) %}<label>{{ text }}</label>{% endmacro %}'
    )
    (inputdir / "page.html").write_text(
        '{% import "forms.html" as forms %}{{ forms.label(title) }}'
    )
    (inputdir / "ctx.yaml").write_text("title: Welcome\n")
    return inputdir, tmp_path / "out"


class TestPipeline:
    """env_check → source_compile → template_render → results_report"""

    def test_full_pipeline(self, tree):
        inputdir, outputdir = tree
        state = ProgramState(
            inputdir=inputdir,
            outputdir=outputdir,
            verbosity=0,
            inputFile="page.html",
            contextFile="ctx.yaml",
            emitSource=True,
        )

        final = pipeline(state, env_check, source_compile, template_render, results_report)

        output = outputdir / "page.html"
        assert output.read_text() == "<label>Welcome</label>"
        assert final.renderResult['characters'] == len("<label>Welcome</label>")
        assert "_l_forms = _utils.Namespace()" in (outputdir / "page.html.py").read_text()

    def test_missing_template_exits(self, tree):
        inputdir, outputdir = tree
        state = ProgramState(inputdir=inputdir, outputdir=outputdir, inputFile="nope.html")

        with pytest.raises(SystemExit):
            env_check(state)

    def test_compile_error_exits(self, tree):
        inputdir, outputdir = tree
        (inputdir / "bad.html").write_text('{% import "forms.html" %}')
        state = env_check(ProgramState(inputdir=inputdir, outputdir=outputdir, inputFile="bad.html"))

        with pytest.raises(SystemExit):
            source_compile(state)
