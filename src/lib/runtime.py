"""
Runtime helpers for generated template code

Compiled templates receive this module as `_utils`.
"""

import html
from types import SimpleNamespace
from typing import Any, Mapping


class SafeString(str):
    """String that is emitted without escaping"""
    pass


class Namespace(SimpleNamespace):
    """Attribute bag holding the macros of one import directive"""

    def __contains__(self, name: str) -> bool:
        return name in self.__dict__


def lookup(ctx: Any, name: str) -> Any:
    """Read a top-level variable from the render context"""
    if isinstance(ctx, Mapping):
        return ctx.get(name)
    return getattr(ctx, name, None)


def attr(obj: Any, name: str) -> Any:
    """Property read that yields None instead of raising"""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def call(fn: Any, *args: Any) -> Any:
    """
    Call a template value

    Non-callables produce an empty string. Results of functions flagged
    `safe` are marked so out() leaves them unescaped.
    """
    if not callable(fn):
        return ""
    result = fn(*args)
    if getattr(fn, 'safe', False):
        return SafeString("" if result is None else result)
    return result


def out(value: Any, autoescape: bool = True) -> str:
    """Convert an output expression's value to text"""
    if value is None:
        return ""
    if isinstance(value, SafeString) or not autoescape:
        return str(value)
    return html.escape(str(value))
