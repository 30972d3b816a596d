"""
Compiler for stencil token trees

Transforms parsed tokens into the Python source of a render function.

Generated module layout:

    # compiled from page.html
    def _template(_ctx, _utils):
        _output = []
        _output.append('Hello ')
        _output.append(_utils.out(_utils.lookup(_ctx, 'name'), True))
        return ''.join(_output)

`_ctx` is the render context and `_utils` the runtime helper module.
Template-local names (macro parameters, macros, import aliases) are plain
Python locals carrying the configured prefix.
"""

from typing import List, Optional

from ..models.parser import Node, OutputNode, TagToken, TextNode
from .log import LOG

INDENT = "    "
FUNCTION_NAME = "_template"


class Compiler:
    """
    Compiles token trees to Python source

    Responsibilities:
    - Emit text and output nodes
    - Delegate tags to their directive compile handler
    - Wrap the result in the render function
    """

    def __init__(self, settings=None) -> None:
        """
        Initialize compiler

        Args:
            settings: AppSettings (defaults to the global appsettings)
        """
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.settings = settings

    def compile(self, tokens: List[Node], filename: Optional[str] = None) -> str:
        """
        Compile top-level tokens to module source

        Args:
            tokens: Parsed top-level nodes
            filename: Template path, recorded in a header comment

        Returns:
            Python source defining the render function

        Raises:
            RuntimeError: If a node is not a text, output or tag node
        """
        lines = [
            f"# compiled from {filename or '<string>'}",
            f"def {FUNCTION_NAME}(_ctx, _utils):",
            f"{INDENT}_output = []",
        ]
        lines.extend(self.indent(self.nodes_compile(tokens)))
        lines.append(f"{INDENT}return ''.join(_output)")

        source = '\n'.join(lines) + '\n'
        if self.settings.debug_mode:
            LOG(f"Generated source for {filename or '<string>'}:\n{source}", level=3)
        return source

    def nodes_compile(self, nodes: List[Node]) -> List[str]:
        """Compile a node list to unindented code lines"""
        lines: List[str] = []
        for node in nodes:
            lines.extend(self.node_compile(node))
        return lines

    def node_compile(self, node: Node) -> List[str]:
        if isinstance(node, TextNode):
            return [f"_output.append({node.text!r})"]

        if isinstance(node, OutputNode):
            return [f"_output.append(_utils.out({node.code}, {self.settings.autoescape!r}))"]

        if isinstance(node, TagToken):
            return node.compile(self)

        raise RuntimeError(f"Cannot compile node {node!r}")

    def indent(self, lines: List[str], depth: int = 1) -> List[str]:
        prefix = INDENT * depth
        return [prefix + line for line in lines]

    def local_make(self, name: str) -> str:
        return self.settings.local_make(name)
