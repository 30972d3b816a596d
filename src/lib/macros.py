"""
The macro directive

    {% macro input(type, name, value="") %}
        <input type="{{ type }}" name="{{ name }}" value="{{ value }}">
    {% endmacro %}

A macro compiles to a nested Python function. In the defining template it
is bound to a local name and flagged `safe`, so its output is not escaped a
second time when printed. The import directive reuses function_compile()
and binds the same function under its namespace instead.
"""

from typing import Any, List, Tuple

from ..models.directives import reserved_is
from ..models.parser import ArgToken, MacroParameter, MacroSignature, ParseContext, TagToken, TokenType
from .errors import TemplateSyntaxError
from .expressions import literal_compile


def signature_parse(tokens: List[ArgToken], context: ParseContext, tag: TagToken) -> MacroSignature:
    """
    Parse `name(param, param=literal, ...)`

    Parentheses are optional for macros without parameters.

    Raises:
        TemplateSyntaxError: On anything but a plain name followed by a
                             well-formed parameter list
    """
    def fail(message: str, token: Any = None) -> None:
        raise TemplateSyntaxError(message, token.line if token else tag.line, context.filename)

    if not tokens or tokens[0].type is not TokenType.VAR or '.' in tokens[0].match:
        fail("Macro requires a name", tokens[0] if tokens else None)

    name = tokens[0].match
    if reserved_is(name):
        fail(f'Invalid macro name "{name}"', tokens[0])

    params: List[MacroParameter] = []
    rest = tokens[1:]
    if rest:
        if rest[0].type is not TokenType.PARENOPEN:
            fail(f'Unexpected token "{rest[0].match}"', rest[0])
        if rest[-1].type is not TokenType.PARENCLOSE:
            fail('Expected ")" to close macro parameters', rest[-1])
        params = parameters_parse(rest[1:-1], fail)

    signature = MacroSignature(
        name=name,
        params=params,
        safe=context.engine.settings.macro_output_safe,
    )
    context.symbols.scope_push([param.name for param in params])
    return signature


def parameters_parse(tokens: List[ArgToken], fail) -> List[MacroParameter]:
    params: List[MacroParameter] = []
    groups: List[List[ArgToken]] = [[]]
    for token in tokens:
        if token.type is TokenType.COMMA:
            groups.append([])
        else:
            groups[-1].append(token)

    if groups == [[]]:
        return params

    for group in groups:
        if not group:
            fail("Empty macro parameter", tokens[0])
        head = group[0]
        if head.type is not TokenType.VAR or '.' in head.match:
            fail(f'Invalid macro parameter "{head.match}"', head)
        if any(param.name == head.match for param in params):
            fail(f'Duplicate macro parameter "{head.match}"', head)

        default = None
        if len(group) > 1:
            if len(group) != 3 or group[1].match != '=' or literal_compile(group[2]) is None:
                fail(f'Invalid default for macro parameter "{head.match}"', group[1])
            default = literal_compile(group[2])
        params.append(MacroParameter(name=head.match, default=default))

    return params


def macro_close(context: ParseContext, tag: TagToken) -> None:
    """Leave the macro body; the macro becomes callable from here on"""
    context.symbols.scope_pop()
    context.symbols.local_declare(tag.args.name)
    context.symbols.macro_declare(tag.args.name)


def function_compile(compiler: Any, tag: TagToken) -> Tuple[str, List[str]]:
    """
    Generate the function definition for a macro

    Returns:
        (function name, definition lines)

    Example:
        {% macro hi(n) %}Hi {{ n }}{% endmacro %} ->
            def _m_hi(_l_n=None):
                _output = []
                _output.append('Hi ')
                _output.append(_utils.out(_l_n, True))
                return ''.join(_output)
    """
    signature: MacroSignature = tag.args
    function_name = f"_m_{signature.name}"
    params = ', '.join(
        f"{compiler.local_make(param.name)}={param.default if param.default is not None else 'None'}"
        for param in signature.params
    )

    lines = [f"def {function_name}({params}):", "    _output = []"]
    lines.extend(compiler.indent(compiler.nodes_compile(tag.content)))
    lines.append("    return ''.join(_output)")
    return function_name, lines


def macro_compile(compiler: Any, tag: TagToken) -> List[str]:
    """Define the macro and bind it in the current scope"""
    function_name, lines = function_compile(compiler, tag)
    local = compiler.local_make(tag.args.name)
    lines.append(f"{local} = {function_name}")
    if tag.args.safe:
        lines.append(f"{local}.safe = True")
    return lines
