"""
Pygments lexer for tag and output arguments

Tokenizes the text between template delimiters, e.g. the
'"forms.html" as forms' of {% import "forms.html" as forms %}, and maps the
Pygments token types onto the parser's TokenType kinds.

Token types:
- String: Quoted literals ("forms.html", 'x')
- Name: Variables, possibly dotted (forms.input)
- Number: Integer and decimal literals
- Keyword.Constant: true, false, none, null
- Operator / Operator.Word: Arithmetic, comparison, and, or, not, in
- Punctuation: Parentheses and commas
"""

from typing import List

from pygments.lexer import RegexLexer
from pygments.token import (
    Error,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Whitespace,
)

from ..models.parser import ArgToken, TokenType


class ArgumentLexer(RegexLexer):
    """
    Lexer for stencil tag arguments

    Example:
        import "forms.html" as forms

    Tokens:
        import → Name
        "forms.html" → String.Double
        as → Name
        forms → Name
    """

    name = 'Stencil arguments'
    aliases = ['stencil-args']
    filenames: List[str] = []

    tokens = {
        'root': [
            (r'\s+', Whitespace),
            (r'"(\\\\|\\"|[^"])*"', String.Double),
            (r"'(\\\\|\\'|[^'])*'", String.Single),
            (r'\d+(\.\d+)?', Number),
            (r'(true|false|none|null)\b', Keyword.Constant),
            (r'(and|or|not|in)\b', Operator.Word),
            (r'[A-Za-z_]\w*(\.[A-Za-z_]\w*)*', Name),
            (r'\(', Punctuation),
            (r'\)', Punctuation),
            (r',', Punctuation),
            (r'==|!=|<=|>=|[<>+\-*/%=!]', Operator),
        ],
    }


def tokenType_classify(ttype, value: str) -> TokenType:
    """Map a Pygments token type to the parser's TokenType"""
    if ttype in String:
        return TokenType.STRING
    if ttype in Number:
        return TokenType.NUMBER
    if ttype in Keyword.Constant:
        return TokenType.CONSTANT
    if ttype in Operator:
        return TokenType.OPERATOR
    if ttype in Name:
        return TokenType.VAR
    if ttype in Punctuation:
        return {
            '(': TokenType.PARENOPEN,
            ')': TokenType.PARENCLOSE,
            ',': TokenType.COMMA,
        }.get(value, TokenType.OTHER)
    return TokenType.OTHER


def arguments_tokenize(text: str, line: int = 1) -> List[ArgToken]:
    """
    Split argument text into typed tokens

    Whitespace is dropped; characters the lexer cannot match become OTHER
    tokens so the caller can report them.

    Args:
        text: Raw text between the tag name and the closing delimiter
        line: Source line the text starts on

    Returns:
        List of ArgToken with per-token line numbers

    Example:
        >>> [t.match for t in arguments_tokenize('"a.html" as a')]
        ['"a.html"', 'as', 'a']
    """
    lexer = ArgumentLexer(stripnl=False, ensurenl=False)
    result: List[ArgToken] = []

    for position, ttype, value in lexer.get_tokens_unprocessed(text):
        if ttype in Whitespace:
            continue
        token_line = line + text.count('\n', 0, position)
        kind = TokenType.OTHER if ttype in Error else tokenType_classify(ttype, value)
        result.append(ArgToken(type=kind, match=value, line=token_line))

    return result
