#!/usr/bin/env python3
"""
stencil - Template compiler with namespaced macro imports

Renders a {% tag %} / {{ output }} template from an input directory into an
output directory. Macros can be imported from sibling templates into local
namespaces:

    {% import "./formmacros.html" as forms %}
    {{ forms.input("text", "name") }}

As an aside, this codebase uses the ChRIS "plugin" concept/pattern as a
general purpose python app development framework.

Usage:
    stencil inputdir/ outputdir/ --inputFile page.html

Examples:
    # Render with a YAML context
    stencil templates/ out/ --inputFile page.html --contextFile page.yaml

    # Also write the generated Python source next to the output
    stencil templates/ out/ --inputFile page.html --emitSource -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

import yaml
from chris_plugin import chris_plugin

from .lib import Engine, TemplateError, __version__, LOG, state_connectToLogger
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
       _                  _ _
   ___| |_ ___ _ __   ___(_) |
  / __| __/ _ \ '_ \ / __| | |
  \__ \ ||  __/ | | | (__| | |
  |___/\__\___|_| |_|\___|_|_|

  Template compiler
"""

parser = ArgumentParser(
    description="stencil - Template compiler with namespaced macro imports",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Template to render (relative to inputdir)"
)

parser.add_argument(
    "--contextFile",
    default=None,
    type=str,
    help="YAML file with the render context (relative to inputdir)",
)

parser.add_argument(
    "--outputFile",
    default=None,
    type=str,
    help="Output filename within outputdir. Defaults to the template filename",
)

parser.add_argument(
    "--emitSource",
    action="store_true",
    default=False,
    help="Also write the generated Python source as <outputFile>.py",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the template
            - contextSourceFile: Resolved path to the context file, if any
            - renderOutputFile: Path of the rendered output
            - envOK: True if environment is valid

    Exits:
        1 if the template or context file is not found
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.is_file():
        print(f"Error: Template not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)
    state.inputSourceFile = input_file
    LOG(f"Template: {input_file}", level=2)

    if state.contextFile:
        context_file = state.inputdir / state.contextFile
        if not context_file.is_file():
            print(f"Error: Context file not found: {context_file}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        state.contextSourceFile = context_file
        LOG(f"Context: {context_file}", level=2)

    state.renderOutputFile = state.outputdir / (state.outputFile or Path(state.inputFile).name)
    state.renderOutputFile.parent.mkdir(parents=True, exist_ok=True)
    LOG(f"Output: {state.renderOutputFile}", level=2)

    state.envOK = True
    return state


def source_compile(inputstate: ProgramState) -> ProgramState:
    """
    Parse and compile the template (and everything it imports).

    Returns:
        ProgramState with added field:
            - compiledTemplate: Template ready to render

    Exits:
        1 if the template or an import cannot be read or parsed
    """
    state = inputstate.copy()

    LOG("Compiling template...", level=1)
    engine = Engine(root=state.inputdir)
    try:
        state.compiledTemplate = engine.compile_file(state.inputFile)
    except TemplateError as e:
        print(f"Compile error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Generated {len(state.compiledTemplate.source.splitlines())} lines of source", level=2)
    return state


def template_render(inputstate: ProgramState) -> ProgramState:
    """
    Render the compiled template with the YAML context and write the output.

    Returns:
        ProgramState with added field:
            - renderResult: Dict containing:
                - output_file: str (path to rendered output)
                - characters: int (length of rendered output)
                - source_file: Optional[str] (generated source, with --emitSource)

    Exits:
        1 if the context cannot be loaded or rendering fails
    """
    state = inputstate.copy()

    context = {}
    if state.contextSourceFile:
        try:
            context = yaml.safe_load(state.contextSourceFile.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            print(f"Error reading context file: {e}", file=sys.stderr)
            sys.exit(1)
        if not isinstance(context, dict):
            print("Error: Context file must contain a mapping", file=sys.stderr)
            sys.exit(1)

    LOG("Rendering template...", level=1)
    try:
        output = state.compiledTemplate.render(context)
    except Exception as e:
        print(f"Render error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    state.renderOutputFile.write_text(output, encoding="utf-8")

    source_file = None
    if state.emitSource:
        source_path = state.renderOutputFile.with_name(state.renderOutputFile.name + ".py")
        source_path.write_text(state.compiledTemplate.source, encoding="utf-8")
        source_file = str(source_path)
        LOG(f"Wrote generated source to {source_path}", level=2)

    state.renderResult = {
        'output_file': str(state.renderOutputFile),
        'characters': len(output),
        'source_file': source_file,
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display render results to the user.

    Exits:
        1 if renderResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.renderResult:
        print("Error: Rendering failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Render successful!", level=1)
    LOG(f"  Output: {state.renderResult['output_file']}", level=1)
    LOG(f"  Characters: {state.renderResult['characters']}", level=1)
    if state.renderResult['source_file']:
        LOG(f"  Source: {state.renderResult['source_file']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="stencil - Template compiler",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - render a template from inputdir into outputdir.

    Orchestrates the pipeline:
        1. env_check: Validate paths and environment
        2. source_compile: Parse and compile the template and its imports
        3. template_render: Render with the YAML context and write output
        4. results_report: Display results to user
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, source_compile, template_render, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
