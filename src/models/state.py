"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the render pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, contextFile,
                   outputFile, emitSource
        - env_check: inputSourceFile, contextSourceFile, renderOutputFile, envOK
        - source_compile: compiledTemplate
        - template_render: renderResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the template tree
        outputdir: Directory for rendered output
        verbosity: Logging verbosity level (1-3)
        inputFile: Template filename (relative to inputdir)
        contextFile: Optional YAML context filename (relative to inputdir)
        outputFile: Output filename (defaults to the template filename)
        emitSource: Also write the generated Python source
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the template
        contextSourceFile: Resolved path to the context file, if any
        renderOutputFile: Path the rendered output is written to
        compiledTemplate: Compiled Template object
        renderResult: Render results (output_file, characters, source_file)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    contextFile: Optional[str] = field(default=None)
    outputFile: Optional[str] = field(default=None)
    emitSource: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    contextSourceFile: Optional[Path] = field(default=None)
    renderOutputFile: Path = field(default=Path("/"))
    compiledTemplate: Optional[Any] = field(default=None)  # Template at runtime
    renderResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, contextFile, etc.)
            inputdir: Directory containing template files
            outputdir: Directory for render output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Only keep options that are ProgramState fields
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_compile,
            template_render,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
