"""
The import directive

    {% import "./formmacros.html" as forms %}
    {{ forms.input("text", "name") }}

Imports the top-level macros of another template into a locally named
namespace rather than the render context, so macros cannot override context
injected by the caller.

Parsing is a small state machine over the tag's arguments:

    INIT --STRING--> GOT_PATH --VAR "as"--> GOT_AS_KEYWORD --VAR ident--> GOT_ALIAS

On the path the imported file is parsed recursively and one AliasBinding is
collected per top-level macro. On the alias the bindings' namespace becomes
known and "<alias>.<macro>" is registered as a macro-call symbol.

Compiling emits a fresh Namespace under the alias and fills it inside a
nested function that is called immediately:

    _l_forms = _utils.Namespace()
    def _import_forms():
        _output = []
        def _m_input(_l_type=None, _l_name=None):
            ...
        _l_input = _m_input
        _l_forms.input = _m_input
        _l_forms.input.safe = True
    _import_forms()

Only the directly imported file's top-level macros are bound under the alias.
Imports inside that file are compiled into the nested scope for its macros
to call and are not exposed through the namespace.
"""

import re
from enum import Enum
from typing import Any, List

from ..models.bindings import AliasBinding, ImportPlan
from ..models.directives import reserved_is
from ..models.parser import ArgToken, Node, ParseContext, TagToken, TokenType
from .errors import TemplateSyntaxError
from .expressions import string_unquote
from .log import LOG
from . import macros


IDENTIFIER = re.compile(r'^[A-Za-z_]\w*$')


class ImportState(Enum):
    """Progress through the import tag's arguments"""
    INIT = "init"
    GOT_PATH = "got_path"
    GOT_AS_KEYWORD = "got_as_keyword"
    GOT_ALIAS = "got_alias"


def bindings_collect(tokens: List[Node], compiler: Any) -> List[AliasBinding]:
    """
    Build one binding per top-level macro, in declaration order

    Anything that is not a macro definition (text, output, other tags,
    macros nested inside other blocks) contributes nothing.
    """
    bindings: List[AliasBinding] = []
    for token in tokens:
        if not isinstance(token, TagToken) or not token.macro_is():
            continue
        function_name, body = macros.function_compile(compiler, token)
        bindings.append(AliasBinding(
            macro_name=token.args.name,
            function_name=function_name,
            body=body,
            safe=token.args.safe,
            local_name=compiler.local_make(token.args.name),
        ))
    return bindings


def imports_collect(tokens: List[Node], compiler: Any) -> List[str]:
    """
    Compile the top-level imports of an imported file

    They are bound inside the importing scope only, so its macros reach their
    own file's aliases and never the caller's.
    """
    lines: List[str] = []
    for token in tokens:
        if isinstance(token, TagToken) and token.name == 'import':
            lines.extend(token.compile(compiler))
    return lines


class ImportDirectiveParser:
    """
    Consumes the arguments of one import tag and produces its ImportPlan

    Each instance handles exactly one directive; nothing is shared between
    two imports of the same file.
    """

    def __init__(self, context: ParseContext, tag: TagToken):
        self.context = context
        self.tag = tag
        self.state = ImportState.INIT
        self.plan = ImportPlan(line=tag.line)

    def parse(self, tokens: List[ArgToken]) -> ImportPlan:
        """
        Run the state machine over all argument tokens

        Raises:
            TemplateSyntaxError: On any out-of-order token, or when the
                                 arguments end before an alias is given
            TemplateNotFoundError: When the imported file cannot be read
        """
        for token in tokens:
            self.token_feed(token)

        if self.state is not ImportState.GOT_ALIAS:
            self.error('Import requires a path followed by "as <name>"', self.tag.line)
        return self.plan

    def token_feed(self, token: ArgToken) -> None:
        if token.type is TokenType.STRING:
            self.string_accept(token)
        elif token.type is TokenType.VAR:
            self.variable_accept(token)
        else:
            self.error(f'Unexpected token "{token.match}"', token.line)

    def string_accept(self, token: ArgToken) -> None:
        if self.state is not ImportState.INIT:
            self.error(f'Unexpected string {token.match}', token.line)

        path = string_unquote(token.match)
        engine = self.context.engine
        resolved = str(engine.loader.resolve(path, self.context.filename))
        if resolved in self.context.chain:
            self.error(f'Circular import of "{path}"', token.line)

        LOG(f'Importing "{path}" from {self.context.filename or "<string>"}', level=2)
        result = engine.parse_file(resolved, chain=self.context.chain)

        self.plan.path = path
        self.plan.bindings = bindings_collect(result.tokens, engine.compiler)
        self.plan.imports = imports_collect(result.tokens, engine.compiler)
        self.state = ImportState.GOT_PATH

    def variable_accept(self, token: ArgToken) -> None:
        if self.state in (ImportState.INIT, ImportState.GOT_ALIAS):
            self.error(f'Unexpected variable "{token.match}"', token.line)

        if self.state is ImportState.GOT_PATH:
            if token.match != 'as':
                self.error(f'Expected "as" but found "{token.match}"', token.line)
            self.state = ImportState.GOT_AS_KEYWORD
            return

        alias = token.match
        if not IDENTIFIER.match(alias) or reserved_is(alias):
            self.error(f'Unexpected variable "{alias}"', token.line)

        self.plan.alias_resolve(alias)
        symbols = self.context.symbols
        for symbol in self.plan.symbols():
            symbols.macro_declare(symbol)
        symbols.local_declare(alias)
        LOG(f'Bound {len(self.plan.bindings)} macros from "{self.plan.path}" as {alias}', level=3)
        self.state = ImportState.GOT_ALIAS

    def error(self, message: str, line: int) -> None:
        raise TemplateSyntaxError(message, line, self.context.filename)


def import_parse(tokens: List[ArgToken], context: ParseContext, tag: TagToken) -> ImportPlan:
    """Parse handler registered for the import directive"""
    return ImportDirectiveParser(context, tag).parse(tokens)


def import_compile(compiler: Any, tag: TagToken) -> List[str]:
    """
    Compile handler registered for the import directive

    Introduces exactly one name (the alias) into the enclosing scope.
    """
    plan: ImportPlan = tag.args
    if plan is None or plan.alias is None:
        raise RuntimeError(f'Import on line {tag.line} compiled before its alias was resolved')

    target = compiler.local_make(plan.alias)
    scope = f"_import_{plan.alias}"

    lines = [
        f"{target} = _utils.Namespace()",
        f"def {scope}():",
        "    _output = []",
    ]
    lines.extend(compiler.indent(plan.statements(target)))
    lines.append(f"{scope}()")
    return lines
