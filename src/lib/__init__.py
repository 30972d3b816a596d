"""
stencil - Template compiler with namespaced macro imports

Compiles {% tag %} / {{ output }} templates to Python render functions.
"""

__version__ = "1.0.0"

from .parser import Parser
from .compiler import Compiler
from .directives import DirectiveRegistry
from .engine import Engine, Template
from .errors import TemplateError, TemplateSyntaxError, TemplateNotFoundError
from .log import LOG, state_connectToLogger

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
