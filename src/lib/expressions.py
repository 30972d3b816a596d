"""
Expression compiler for output and tag arguments

Turns argument tokens into a Python expression string for generated code.

Grammar (lowest to highest precedence):
    or_expr     := and_expr ('or' and_expr)*
    and_expr    := not_expr ('and' not_expr)*
    not_expr    := ('not' | '!') not_expr | compare
    compare     := additive (('==' | '!=' | '<' | '>' | '<=' | '>=' | 'in') additive)*
    additive    := term (('+' | '-') term)*
    term        := unary (('*' | '/' | '%') unary)*
    unary       := '-' unary | postfix
    postfix     := primary ('(' arguments ')')?
    primary     := STRING | NUMBER | CONSTANT | VAR | '(' or_expr ')'

Variables resolve against the symbol table at the point they are parsed:
template-local names compile to prefixed Python locals, everything else is
read from the render context. A call whose dotted name is a registered
macro symbol (e.g. "forms.input") compiles to a direct reference.

Example:
    With "forms" imported, forms.input("a") compiles to
    _utils.call(_l_forms.input, 'a')
"""

import ast
from typing import List, Optional

from ..models.parser import ArgToken, ParseContext, TokenType
from .errors import TemplateSyntaxError


CONSTANTS = {
    'true': 'True',
    'false': 'False',
    'none': 'None',
    'null': 'None',
}

COMPARISONS = {'==', '!=', '<', '>', '<=', '>=', 'in'}


def string_unquote(match: str) -> str:
    """Value of a quoted string token"""
    try:
        return ast.literal_eval(match)
    except (ValueError, SyntaxError):
        return match[1:-1]


def literal_compile(token: ArgToken) -> Optional[str]:
    """
    Python code for a literal token, or None if the token is not a literal
    """
    if token.type is TokenType.STRING:
        return repr(string_unquote(token.match))
    if token.type is TokenType.NUMBER:
        return token.match
    if token.type is TokenType.CONSTANT:
        return CONSTANTS[token.match]
    return None


class ExpressionParser:
    """Recursive-descent compiler over a list of argument tokens"""

    def __init__(self, tokens: List[ArgToken], context: ParseContext, line: int = 1):
        self.tokens = tokens
        self.context = context
        self.line = line
        self.position = 0

    def compile(self) -> str:
        """
        Compile the whole token list as one expression

        Raises:
            TemplateSyntaxError: On empty input, unexpected or trailing tokens
        """
        if not self.tokens:
            self.error("Empty expression", self.line)

        code = self.or_parse()
        if self.position < len(self.tokens):
            token = self.tokens[self.position]
            self.error(f'Unexpected token "{token.match}"', token.line)
        return code

    def peek(self) -> Optional[ArgToken]:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def advance(self) -> ArgToken:
        token = self.peek()
        if token is None:
            last = self.tokens[-1] if self.tokens else None
            self.error("Unexpected end of expression", last.line if last else self.line)
        self.position += 1
        return token

    def operator_accept(self, *operators: str) -> Optional[str]:
        token = self.peek()
        if token is not None and token.type is TokenType.OPERATOR and token.match in operators:
            self.position += 1
            return token.match
        return None

    def or_parse(self) -> str:
        code = self.and_parse()
        while self.operator_accept('or'):
            code = f"{code} or {self.and_parse()}"
        return code

    def and_parse(self) -> str:
        code = self.not_parse()
        while self.operator_accept('and'):
            code = f"{code} and {self.not_parse()}"
        return code

    def not_parse(self) -> str:
        if self.operator_accept('not', '!'):
            return f"not {self.not_parse()}"
        return self.compare_parse()

    def compare_parse(self) -> str:
        code = self.additive_parse()
        while True:
            operator = self.operator_accept(*COMPARISONS)
            if not operator:
                return code
            code = f"{code} {operator} {self.additive_parse()}"

    def additive_parse(self) -> str:
        code = self.term_parse()
        while True:
            operator = self.operator_accept('+', '-')
            if not operator:
                return code
            code = f"{code} {operator} {self.term_parse()}"

    def term_parse(self) -> str:
        code = self.unary_parse()
        while True:
            operator = self.operator_accept('*', '/', '%')
            if not operator:
                return code
            code = f"{code} {operator} {self.unary_parse()}"

    def unary_parse(self) -> str:
        if self.operator_accept('-'):
            return f"-{self.unary_parse()}"
        return self.postfix_parse()

    def postfix_parse(self) -> str:
        token = self.peek()
        if token is not None and token.type is TokenType.VAR:
            self.position += 1
            following = self.peek()
            if following is not None and following.type is TokenType.PARENOPEN:
                callee = self.variable_compile(token.match, call=True)
                return self.call_parse(callee)
            return self.variable_compile(token.match)

        code = self.primary_parse()
        following = self.peek()
        if following is not None and following.type is TokenType.PARENOPEN:
            return self.call_parse(code)
        return code

    def call_parse(self, callee: str) -> str:
        self.advance()  # (
        arguments = [callee]
        token = self.peek()
        if token is not None and token.type is TokenType.PARENCLOSE:
            self.advance()
            return f"_utils.call({', '.join(arguments)})"

        while True:
            arguments.append(self.or_parse())
            token = self.advance()
            if token.type is TokenType.PARENCLOSE:
                break
            if token.type is not TokenType.COMMA:
                self.error(f'Unexpected token "{token.match}" in argument list', token.line)

        return f"_utils.call({', '.join(arguments)})"

    def primary_parse(self) -> str:
        token = self.advance()

        literal = literal_compile(token)
        if literal is not None:
            return literal

        if token.type is TokenType.PARENOPEN:
            code = self.or_parse()
            closing = self.advance()
            if closing.type is not TokenType.PARENCLOSE:
                self.error(f'Expected ")" but found "{closing.match}"', closing.line)
            return f"({code})"

        self.error(f'Unexpected token "{token.match}"', token.line)

    def variable_compile(self, name: str, call: bool = False) -> str:
        """
        Compile a (possibly dotted) variable reference

        Args:
            name: Variable as written (e.g., "user.name", "forms.input")
            call: Whether the reference is immediately called
        """
        symbols = self.context.symbols
        settings = self.context.engine.settings
        head, *members = name.split('.')

        if call and symbols.macro_is(name) and symbols.local_is(head):
            return '.'.join([settings.local_make(head)] + members)

        if symbols.local_is(head):
            code = settings.local_make(head)
        else:
            code = f"_utils.lookup(_ctx, {head!r})"

        for member in members:
            code = f"_utils.attr({code}, {member!r})"
        return code

    def error(self, message: str, line: int) -> None:
        raise TemplateSyntaxError(message, line, self.context.filename)
