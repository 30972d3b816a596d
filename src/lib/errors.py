"""
Template error types

All failures abort the whole compilation; there is no partial output.
"""

from typing import Optional


class TemplateError(Exception):
    """Base class for template loading and compilation errors"""
    pass


class TemplateSyntaxError(TemplateError):
    """
    Raised when template source (or an imported template) is malformed

    Attributes:
        message: Human-readable description
        line: 1-based line number of the offending token
        filename: Template the error was found in (None for inline source)
    """

    def __init__(self, message: str, line: Optional[int] = None, filename: Optional[str] = None):
        self.message = message
        self.line = line
        self.filename = filename

        text = message
        if line is not None:
            text += f" on line {line}"
        if filename:
            text += f' in file "{filename}"'
        super().__init__(text + ".")


class TemplateNotFoundError(TemplateError):
    """Raised when a template path cannot be resolved to a readable file"""
    pass
