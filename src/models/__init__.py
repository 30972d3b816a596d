"""
Models package for stencil

Contains data structures and type definitions for the compilation pipeline.
"""

from .state import ProgramState, pipeline
from .directives import DirectiveSpec, DirectiveCategory, RESERVED_WORDS
from .parser import (
    TokenType,
    ArgToken,
    TextNode,
    OutputNode,
    TagToken,
    MacroParameter,
    MacroSignature,
    SymbolTable,
    ParseContext,
    ParseResult,
)
from .bindings import AliasBinding, ImportPlan

__all__ = [
    "ProgramState",
    "pipeline",
    "DirectiveSpec",
    "DirectiveCategory",
    "RESERVED_WORDS",
    "TokenType",
    "ArgToken",
    "TextNode",
    "OutputNode",
    "TagToken",
    "MacroParameter",
    "MacroSignature",
    "SymbolTable",
    "ParseContext",
    "ParseResult",
    "AliasBinding",
    "ImportPlan",
]
