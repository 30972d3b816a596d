"""
Directive specification and metadata models

Defines the structure and categories of template directives for
validation, documentation generation, and registry management.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set


class DirectiveCategory(Enum):
    """
    Categories of template directives

    Used for organization, documentation generation, and validation.
    """
    DEFINITION = "definition"    # {% macro %}
    MODULE = "module"            # {% import %}


@dataclass
class DirectiveSpec:
    """
    Specification for a template directive

    Defines metadata and the parse/compile handlers for a directive.
    Used by DirectiveRegistry to manage available directives.

    Attributes:
        name: Directive name as written after the tag delimiter
        category: Category for organization
        description: Human-readable description
        parse: Parse-time handler (arguments, context, tag) -> args
        compile: Compile-time handler (compiler, tag) -> list of code lines
        ends: Whether the directive opens a block closed by end<name>
        closable: Whether a directly following, empty end<name> is tolerated
        close: Optional handler (context, tag) run when the block closes
        examples: Example usage strings
        aliases: Alternative names for the directive
    """
    name: str
    category: DirectiveCategory
    description: str
    parse: Callable
    compile: Callable
    ends: bool = False
    closable: bool = False
    close: Optional[Callable] = None
    examples: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)


# Words with a fixed meaning inside tag arguments
RESERVED_WORDS: Set[str] = {
    'as',      # {% import "f" as name %}
}


def reserved_is(word: str) -> bool:
    """Check if a word is reserved inside tag arguments"""
    return word in RESERVED_WORDS
