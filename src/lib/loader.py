"""
Template file resolution and reading

Paths written in templates are relative to the template that names them;
top-level paths are relative to the loader root.
"""

from pathlib import Path
from typing import Dict, Optional, Union

from .errors import TemplateNotFoundError
from .log import LOG


class FileLoader:
    """
    Resolves template paths and reads template source

    Only source text is cached. Parsed or compiled imports are never shared
    between directives.
    """

    def __init__(
        self,
        root: Optional[Union[str, Path]] = None,
        encoding: str = "utf-8",
        cache: bool = True,
    ) -> None:
        """
        Initialize loader

        Args:
            root: Base directory for paths with no referring template
                  (default: current directory)
            encoding: Encoding used to read template files
            cache: Keep source text of files already read
        """
        self.root = Path(root) if root is not None else Path.cwd()
        self.encoding = encoding
        self.cache = cache
        self.sources: Dict[str, str] = {}

    def resolve(self, path: str, resolve_from: Optional[str] = None) -> Path:
        """
        Resolve a template path

        Args:
            path: Path as written (e.g., "./forms.html", "../shared/tags.html")
            resolve_from: Path of the referring template, if any

        Returns:
            Normalized absolute path (not checked for existence)

        Example:
            >>> FileLoader('/srv').resolve('forms.html', '/srv/pages/home.html')
            PosixPath('/srv/pages/forms.html')
        """
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate.resolve()

        base = Path(resolve_from).parent if resolve_from else self.root
        return (base / candidate).resolve()

    def load(self, path: Union[str, Path]) -> str:
        """
        Read template source

        Args:
            path: Resolved template path

        Returns:
            Template source text

        Raises:
            TemplateNotFoundError: If the path is not a readable file
        """
        key = str(path)
        if self.cache and key in self.sources:
            return self.sources[key]

        file_path = Path(path)
        if not file_path.is_file():
            raise TemplateNotFoundError(f'Unable to find template "{path}".')

        try:
            source = file_path.read_text(encoding=self.encoding)
        except OSError as e:
            raise TemplateNotFoundError(f'Unable to read template "{path}": {e}') from e

        LOG(f"Read {len(source)} characters from {file_path}", level=3)
        if self.cache:
            self.sources[key] = source
        return source

    def cache_clear(self) -> None:
        """Forget all cached source text"""
        self.sources.clear()
