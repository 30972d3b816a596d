"""
Parser-specific data models

Type-safe structures for parser operations and return values.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Set, Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from ..lib.engine import Engine


class TokenType(Enum):
    """Kinds of lexical units found inside tag and output arguments"""
    STRING = "string"
    VAR = "var"
    NUMBER = "number"
    CONSTANT = "constant"
    OPERATOR = "operator"
    PARENOPEN = "parenopen"
    PARENCLOSE = "parenclose"
    COMMA = "comma"
    OTHER = "other"


@dataclass
class ArgToken:
    """
    One lexical unit of a tag's arguments

    Attributes:
        type: Token kind
        match: Literal source text (quotes included for strings)
        line: 1-based source line of the token

    Example:
        For '{% import "forms.html" as forms %}' on line 1:
        [ArgToken(STRING, '"forms.html"', 1), ArgToken(VAR, 'as', 1),
         ArgToken(VAR, 'forms', 1)]
    """
    type: TokenType
    match: str
    line: int


@dataclass
class TextNode:
    """Literal template text, emitted unchanged"""
    text: str
    line: int


@dataclass
class OutputNode:
    """An {{ expression }} already compiled to a Python expression string"""
    code: str
    line: int


@dataclass
class MacroParameter:
    """A macro parameter and its default value as Python literal code"""
    name: str
    default: Optional[str] = None


@dataclass
class MacroSignature:
    """
    Parsed arguments of a {% macro %} tag

    Attributes:
        name: Macro name
        params: Declared parameters, in order
        safe: Whether the macro exposes a safe (unescaped) accessor
    """
    name: str
    params: List[MacroParameter] = field(default_factory=list)
    safe: bool = True


@dataclass
class TagToken:
    """
    A directive instance in the token tree

    Attributes:
        name: Directive name (e.g., "macro", "import")
        line: Source line of the opening tag
        filename: Template the tag was parsed from (None for inline source)
        handler: Compile handler from the directive spec
        args: Directive-specific parse result (MacroSignature, ImportPlan, ...)
        content: Nested nodes for block directives
        closed: Whether an explicit end tag has been consumed
    """
    name: str
    line: int
    filename: Optional[str]
    handler: Callable
    args: Any = None
    content: List['Node'] = field(default_factory=list)
    closed: bool = False

    def compile(self, compiler: Any) -> List[str]:
        """Generate code lines for this tag"""
        return self.handler(compiler, self)

    def macro_is(self) -> bool:
        """True for macro-definition tokens"""
        return self.name == 'macro' and isinstance(self.args, MacroSignature)


Node = Union[TextNode, OutputNode, TagToken]


@dataclass
class SymbolTable:
    """
    Names known to one compilation

    Attributes:
        macros: Expressions recognised as macro calls (e.g., "forms.input").
                Append-only.
        scopes: Stack of template-local names. The bottom scope is the
                template body, one more is pushed per macro body.
    """
    macros: List[str] = field(default_factory=list)
    scopes: List[Set[str]] = field(default_factory=lambda: [set()])

    def macro_declare(self, symbol: str) -> None:
        if symbol not in self.macros:
            self.macros.append(symbol)

    def macro_is(self, symbol: str) -> bool:
        return symbol in self.macros

    def local_declare(self, name: str) -> None:
        self.scopes[-1].add(name)

    def local_is(self, name: str) -> bool:
        return any(name in scope for scope in self.scopes)

    def scope_push(self, names: List[str]) -> None:
        self.scopes.append(set(names))

    def scope_pop(self) -> None:
        if len(self.scopes) > 1:
            self.scopes.pop()


@dataclass
class ParseContext:
    """
    State handed to directive parse handlers

    Attributes:
        filename: Resolved path of the template being parsed (None for inline)
        engine: Engine driving the compilation (loader, compiler, settings)
        symbols: Symbol table of this parse
        chain: Files currently being parsed, outermost first
    """
    filename: Optional[str]
    engine: 'Engine'
    symbols: SymbolTable
    chain: Tuple[str, ...] = ()


@dataclass
class ParseResult:
    """Top-level nodes of a parsed template plus its symbol table"""
    tokens: List[Node]
    symbols: SymbolTable
    filename: Optional[str] = None
