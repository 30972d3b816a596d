"""
Import binding models

An ImportPlan is built while the import tag's arguments are parsed. The
namespace it binds into is only known once the alias token arrives, so each
AliasBinding keeps its assignment target as a hole filled at compile time.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class AliasBinding:
    """
    One pending namespaced macro assignment

    Attributes:
        macro_name: Name of the macro in the imported file
        function_name: Name of the generated function in `body`
        body: Generated function definition lines
        safe: Whether the macro's safe accessor must be bound as well
        local_name: Local the imported file's own code calls the macro by
    """
    macro_name: str
    function_name: str
    body: List[str] = field(default_factory=list)
    safe: bool = False
    local_name: Optional[str] = None

    def statements(self, target: str) -> List[str]:
        """
        Render the binding against a concrete namespace reference

        Args:
            target: Generated-code reference to the namespace (e.g., "_l_forms")

        Returns:
            Function definition, the local sibling macros call it through,
            the namespaced assignment and the safe accessor when the macro
            has one
        """
        member = f"{target}.{self.macro_name}"
        lines = list(self.body)
        if self.local_name:
            lines.append(f"{self.local_name} = {self.function_name}")
        lines.append(f"{member} = {self.function_name}")
        if self.safe:
            lines.append(f"{member}.safe = True")
        return lines


@dataclass
class ImportPlan:
    """
    Ordered bindings of one import directive

    Attributes:
        path: Path as written in the tag
        line: Line of the import tag
        bindings: One binding per imported macro, in declaration order
        imports: Code of the imported file's own top-level imports, which
                 its macros may call through
        alias: Namespace identifier, assigned exactly once
    """
    path: str = ""
    line: int = 0
    bindings: List[AliasBinding] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)
    alias: Optional[str] = None

    def alias_resolve(self, alias: str) -> None:
        if self.alias is not None:
            raise RuntimeError(f'Import alias already resolved to "{self.alias}"')
        self.alias = alias

    def symbols(self) -> List[str]:
        """Macro-call symbols exposed by this plan (e.g., "forms.input")"""
        if self.alias is None:
            return []
        return [f"{self.alias}.{binding.macro_name}" for binding in self.bindings]

    def statements(self, target: str) -> List[str]:
        lines: List[str] = list(self.imports)
        for binding in self.bindings:
            lines.extend(binding.statements(target))
        return lines
