"""
Directive registry for stencil

Maps tag names to DirectiveSpec objects carrying the parse and compile
handlers for each directive.
"""

from typing import Dict, Optional

from ..models.directives import DirectiveSpec, DirectiveCategory
from . import importer, macros


class DirectiveRegistry:
    """
    Registry of directive specifications and handlers

    Maps directive names to DirectiveSpec objects containing metadata
    and parse/compile handlers.
    """

    def __init__(self) -> None:
        """Initialize the directive registry and register all built-in directives"""
        self.specs: Dict[str, DirectiveSpec] = {}
        self.definitionDirectives_register()
        self.moduleDirectives_register()

    def register(self, spec: DirectiveSpec) -> None:
        """Register a directive specification"""
        self.specs[spec.name] = spec
        for alias in spec.aliases:
            self.specs[alias] = spec

    def spec_get(self, name: str) -> Optional[DirectiveSpec]:
        """Get full directive specification by name"""
        return self.specs.get(name)

    def definitionDirectives_register(self) -> None:
        """Register directives that define callables"""
        self.register(DirectiveSpec(
            name='macro',
            category=DirectiveCategory.DEFINITION,
            description='Defines a reusable, parameterized template fragment',
            parse=macros.signature_parse,
            compile=macros.macro_compile,
            ends=True,
            close=macros.macro_close,
            examples=['{% macro input(type, name) %}<input type="{{ type }}" name="{{ name }}">{% endmacro %}'],
        ))

    def moduleDirectives_register(self) -> None:
        """Register directives that pull in other templates"""
        self.register(DirectiveSpec(
            name='import',
            category=DirectiveCategory.MODULE,
            description='Imports the macros of another template into a local namespace',
            parse=importer.import_parse,
            compile=importer.import_compile,
            closable=True,
            examples=[
                "{% import './formmacros.html' as forms %}",
                '{% import "../shared/tags.html" as tags %}',
            ],
        ))
