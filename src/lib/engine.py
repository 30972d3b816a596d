"""
Template engine

Ties the loader, parser, directive registry and compiler together and
executes generated source into callable templates.

Example:
    >>> engine = Engine(root='templates')
    >>> engine.render('{% import "forms.html" as forms %}{{ forms.input("text", "q") }}')
    '<input type="text" name="q">'
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .compiler import Compiler, FUNCTION_NAME
from .directives import DirectiveRegistry
from .loader import FileLoader
from .log import LOG
from .parser import Parser
from ..models.parser import ParseResult
from . import runtime


class Template:
    """A compiled template"""

    def __init__(self, source: str, filename: Optional[str] = None) -> None:
        """
        Execute generated source and keep its render function

        Args:
            source: Python source produced by Compiler.compile()
            filename: Template path, used as the code object's filename
        """
        self.source = source
        self.filename = filename
        namespace: Dict[str, Any] = {}
        exec(compile(source, filename or '<template>', 'exec'), namespace)
        self.function = namespace[FUNCTION_NAME]

    def render(self, context: Optional[Dict[str, Any]] = None) -> str:
        """Render with the given context (a mapping or any object)"""
        return self.function(context if context is not None else {}, runtime)


class Engine:
    """
    Entry point for parsing, compiling and rendering templates

    Attributes:
        settings: AppSettings in effect
        loader: FileLoader resolving and reading template files
        registry: DirectiveRegistry of known tags
        compiler: Compiler shared by every parse (it holds no per-template state)
        templates: Compiled top-level templates keyed by resolved path
    """

    def __init__(
        self,
        root: Optional[Union[str, Path]] = None,
        settings=None,
        loader: Optional[FileLoader] = None,
        registry: Optional[DirectiveRegistry] = None,
    ) -> None:
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.settings = settings
        self.loader = loader or FileLoader(root, encoding=settings.encoding, cache=settings.cache_templates)
        self.registry = registry or DirectiveRegistry()
        self.compiler = Compiler(settings)
        self.templates: Dict[str, Template] = {}

    def parse(
        self,
        source: str,
        filename: Optional[str] = None,
        chain: Tuple[str, ...] = (),
    ) -> ParseResult:
        """Parse source text into tokens and a fresh symbol table"""
        return Parser(source, filename=filename, engine=self, chain=chain,
                      debug=self.settings.debug_mode).parse()

    def parse_file(
        self,
        path: Union[str, Path],
        resolve_from: Optional[str] = None,
        chain: Tuple[str, ...] = (),
    ) -> ParseResult:
        """
        Resolve, read and parse a template file

        This is the re-entry point used by the import directive. Results are
        never cached, so every caller receives its own tokens.

        Args:
            path: Template path as written
            resolve_from: Path of the referring template, if any
            chain: Files already being parsed

        Raises:
            TemplateNotFoundError: If the file cannot be read
            TemplateSyntaxError: If the file fails to parse
        """
        resolved = self.loader.resolve(str(path), resolve_from)
        LOG(f"Parsing {resolved}", level=2)
        source = self.loader.load(resolved)
        return self.parse(source, filename=str(resolved), chain=chain)

    def precompile(self, source: str, filename: Optional[str] = None) -> str:
        """Parse and compile source text to Python source"""
        result = self.parse(source, filename=filename)
        return self.compiler.compile(result.tokens, filename)

    def compile(self, source: str, filename: Optional[str] = None) -> Template:
        """Compile source text to a Template"""
        return Template(self.precompile(source, filename), filename)

    def compile_file(self, path: Union[str, Path], resolve_from: Optional[str] = None) -> Template:
        """
        Compile a template file, reusing an earlier compilation when caching is on
        """
        resolved = str(self.loader.resolve(str(path), resolve_from))
        if self.settings.cache_templates and resolved in self.templates:
            return self.templates[resolved]

        LOG(f"Compiling {resolved}", level=1)
        template = self.compile(self.loader.load(resolved), filename=resolved)
        if self.settings.cache_templates:
            self.templates[resolved] = template
        return template

    def render(self, source: str, context: Optional[Dict[str, Any]] = None,
               filename: Optional[str] = None) -> str:
        return self.compile(source, filename).render(context)

    def render_file(self, path: Union[str, Path], context: Optional[Dict[str, Any]] = None) -> str:
        return self.compile_file(path).render(context)

    def cache_invalidate(self) -> None:
        """Drop cached source text and compiled templates"""
        self.templates.clear()
        self.loader.cache_clear()
