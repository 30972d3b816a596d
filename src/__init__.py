"""
stencil - Template compiler with namespaced macro imports

Compiles {% tag %} / {{ output }} templates to Python render functions.
"""

__version__ = "1.0.0"

from .lib import (
    Parser,
    Compiler,
    DirectiveRegistry,
    Engine,
    Template,
    TemplateError,
    TemplateSyntaxError,
    TemplateNotFoundError,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "Parser",
    "Compiler",
    "DirectiveRegistry",
    "Engine",
    "Template",
    "TemplateError",
    "TemplateSyntaxError",
    "TemplateNotFoundError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
