"""
Parser for {% tag %} / {{ output }} template syntax

Transforms template source into a token tree.

The parser operates in two phases:
1. Scanning: Split source into text, output, comment and tag chunks
2. Processing: Lex chunk arguments, dispatch tags to their directive
   handlers, and nest block content under its opening tag

Key features:
- Configurable delimiters (see AppSettings)
- Line number tracking for error reporting
- Block tags (macro ... endmacro) with end-tag matching
- Output expressions compiled against the symbol table as they are read
- Per-parse symbol table returned with the tokens

Example:
    >>> result = Parser('{% macro hi(n) %}Hi {{ n }}{% endmacro %}').parse()
    >>> result.tokens[0].name
    'macro'
    >>> result.symbols.macros
    ['hi']
"""

import re
from typing import List, Optional, Tuple

from ..models.parser import (
    ArgToken,
    OutputNode,
    ParseContext,
    ParseResult,
    SymbolTable,
    TagToken,
    TextNode,
    Node,
)
from .errors import TemplateSyntaxError
from .expressions import ExpressionParser
from .lexer import arguments_tokenize
from .log import LOG


class Parser:
    """
    Parser for stencil template syntax

    Handles:
    - Plain text
    - {{ expression }} output
    - {# comments #}
    - {% directive args %} tags, registered in the engine's DirectiveRegistry
    - Error reporting with line numbers
    """

    def __init__(
        self,
        source: str,
        filename: Optional[str] = None,
        engine=None,
        chain: Tuple[str, ...] = (),
        debug: bool = False,
    ):
        """
        Initialize parser with source text

        Args:
            source: Raw template source text
            filename: Resolved template path, used for relative imports and errors
            engine: Engine providing settings, registry, loader and compiler
            chain: Files already being parsed (outermost first)
            debug: Enable debug output for parser operations

        Attributes:
            source: Source text being parsed
            line_number: Current line number in source (for error reporting)
            tokens: Accumulated top-level nodes
            stack: Open block tags, innermost last
            context: ParseContext handed to directive handlers
        """
        if engine is None:
            from .engine import Engine
            engine = Engine()

        self.source = source
        self.filename = filename
        self.debug = debug
        self.engine = engine
        self.settings = engine.settings
        self.registry = engine.registry
        self.line_number = 1
        self.tokens: List[Node] = []
        self.stack: List[TagToken] = []

        if filename:
            chain = chain + (filename,)
        self.context = ParseContext(
            filename=filename,
            engine=engine,
            symbols=SymbolTable(),
            chain=chain,
        )

    def parse(self) -> ParseResult:
        """
        Parse source text into a token tree

        Returns:
            ParseResult with the top-level nodes and this parse's symbol table

        Raises:
            TemplateSyntaxError: On malformed tags, unknown directives,
                                 mismatched or missing end tags
        """
        self.line_number = 1

        for chunk in self.chunks_split():
            if not chunk:
                continue

            line = self.line_number
            if chunk.startswith(self.settings.tag_open) and chunk.endswith(self.settings.tag_close):
                self.tag_process(chunk, line)
            elif chunk.startswith(self.settings.var_open) and chunk.endswith(self.settings.var_close):
                self.output_process(chunk, line)
            elif chunk.startswith(self.settings.comment_open) and chunk.endswith(self.settings.comment_close):
                pass
            else:
                self.text_process(chunk, line)

            self.line_number += chunk.count('\n')

        if self.stack:
            tag = self.stack[-1]
            self.error(f'Missing end tag for "{tag.name}"', tag.line)

        if self.debug:
            LOG(f"Parsed {len(self.tokens)} top-level nodes from {self.filename or '<string>'}", level=3)

        return ParseResult(tokens=self.tokens, symbols=self.context.symbols, filename=self.filename)

    def chunks_split(self) -> List[str]:
        """
        Split source into alternating text and delimited chunks

        Example:
            'a {{ b }} c' -> ['a ', '{{ b }}', ' c']
        """
        s = self.settings
        pattern = '({}.*?{}|{}.*?{}|{}.*?{})'.format(
            re.escape(s.tag_open), re.escape(s.tag_close),
            re.escape(s.var_open), re.escape(s.var_close),
            re.escape(s.comment_open), re.escape(s.comment_close),
        )
        return re.split(pattern, self.source, flags=re.DOTALL)

    def node_append(self, node: Node) -> None:
        """Append to the innermost open block, or the top level"""
        if self.stack:
            self.stack[-1].content.append(node)
        else:
            self.tokens.append(node)

    def text_process(self, chunk: str, line: int) -> None:
        s = self.settings
        for opener in (s.tag_open, s.var_open, s.comment_open):
            index = chunk.find(opener)
            if index != -1:
                self.error(f'Unclosed "{opener}"', line + chunk.count('\n', 0, index))
        self.node_append(TextNode(text=chunk, line=line))

    def output_process(self, chunk: str, line: int) -> None:
        inner = chunk[len(self.settings.var_open):-len(self.settings.var_close)]
        arguments = arguments_tokenize(inner, line)
        code = ExpressionParser(arguments, self.context, line).compile()
        self.node_append(OutputNode(code=code, line=line))

    def tag_process(self, chunk: str, line: int) -> None:
        """
        Dispatch a {% ... %} chunk

        Opening tags run their directive's parse handler immediately, so
        symbols they declare are visible to everything after them.
        """
        inner = chunk[len(self.settings.tag_open):-len(self.settings.tag_close)]
        match = re.match(r'\s*(\w+)', inner)
        if not match:
            self.error("Empty tag", line)

        name = match.group(1)
        arguments_line = line + inner.count('\n', 0, match.end())
        arguments = self.arguments_lex(inner[match.end():], arguments_line)

        spec = self.registry.spec_get(name)
        if spec is None:
            if name.startswith('end'):
                self.endTag_process(name[3:], arguments, line)
                return
            self.error(f'Unexpected tag "{name}"', line)

        tag = TagToken(name=spec.name, line=line, filename=self.filename, handler=spec.compile)
        tag.args = spec.parse(arguments, self.context, tag)
        self.node_append(tag)

        if spec.ends:
            self.stack.append(tag)

    def endTag_process(self, name: str, arguments: List[ArgToken], line: int) -> None:
        """
        Close the innermost open block

        A directive registered as closable but not block-forming (import)
        accepts an end tag only when nothing but whitespace follows it.
        """
        if arguments:
            self.error(f'Unexpected argument "{arguments[0].match}" to end tag', arguments[0].line)

        if self.stack and self.stack[-1].name == name:
            tag = self.stack.pop()
            spec = self.registry.spec_get(name)
            if spec is not None and spec.close is not None:
                spec.close(self.context, tag)
            return

        spec = self.registry.spec_get(name)
        if spec is not None and spec.closable and not spec.ends:
            siblings = self.stack[-1].content if self.stack else self.tokens
            for node in reversed(siblings):
                if isinstance(node, TextNode) and not node.text.strip():
                    continue
                if isinstance(node, TagToken) and node.name == name:
                    if node.closed:
                        break
                    node.closed = True
                    return
                self.error(f'Tag "{name}" does not accept content', line)

        self.error(f'Unexpected end of tag "{name}"', line)

    def arguments_lex(self, text: str, line: int) -> List[ArgToken]:
        return arguments_tokenize(text, line)

    def error(self, message: str, line: Optional[int] = None) -> None:
        """
        Report parser error

        Raises:
            TemplateSyntaxError: Always (this is an error reporting function)
        """
        raise TemplateSyntaxError(
            message,
            line if line is not None else self.line_number,
            self.filename,
        )
