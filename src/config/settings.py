"""
Compiler settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use STENCIL_ prefix (e.g., STENCIL_AUTOESCAPE=false).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Compiler configuration via environment variables.

    Environment variables use STENCIL_ prefix.

    Examples:
        STENCIL_TAG_OPEN="<%"
        STENCIL_CACHE_TEMPLATES=false
        STENCIL_MACRO_OUTPUT_SAFE=false
    """

    model_config = SettingsConfigDict(
        env_prefix="STENCIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Delimiters
    tag_open: str = Field(default="{%", description="Opening delimiter for tags")
    tag_close: str = Field(default="%}", description="Closing delimiter for tags")
    var_open: str = Field(default="{{", description="Opening delimiter for output expressions")
    var_close: str = Field(default="}}", description="Closing delimiter for output expressions")
    comment_open: str = Field(default="{#", description="Opening delimiter for comments")
    comment_close: str = Field(default="#}", description="Closing delimiter for comments")

    # Code generation
    locals_prefix: str = Field(
        default="_l_",
        description="Prefix for template-local names in generated code (keeps them apart from helpers)",
    )

    autoescape: bool = Field(
        default=True,
        description="HTML-escape output expressions unless the value is marked safe",
    )

    macro_output_safe: bool = Field(
        default=True,
        description="Expose a safe accessor on macros so their output is not escaped twice",
    )

    # Loading
    cache_templates: bool = Field(
        default=True,
        description="Cache template source text and compiled top-level templates",
    )

    encoding: str = Field(default="utf-8", description="Encoding used to read template files")

    debug_mode: bool = Field(
        default=False,
        description="Log generated source during compilation",
    )

    def local_make(self, name: str) -> str:
        """
        Generate the Python identifier for a template-local name.

        Args:
            name: Template identifier (alias, macro or parameter name)

        Returns:
            Prefixed identifier (e.g., "_l_forms")

        Example:
            >>> settings = AppSettings()
            >>> settings.local_make('forms')
            '_l_forms'
        """
        return f"{self.locals_prefix}{name}"


# Singleton instance - import this in your code
appsettings = AppSettings()
