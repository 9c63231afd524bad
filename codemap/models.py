"""Core data models shared across codemap components."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class FunctionExport:
    """Exported function signature and documentation."""

    name: str
    description: Optional[str] = None
    params: List[str] = field(default_factory=list)
    returns: str = "void"
    is_async: bool = False
    is_default: bool = False


@dataclass
class ComponentExport:
    """Exported component, recognised by its JSX return type."""

    name: str
    description: Optional[str] = None
    props: Optional[str] = None
    is_default: bool = False


@dataclass
class TypeExport:
    """Exported type alias or interface."""

    name: str
    kind: str
    description: Optional[str] = None


@dataclass
class ConstantExport:
    """Exported all-uppercase variable."""

    name: str
    description: Optional[str] = None


@dataclass
class ExportSet:
    """Exports of a single file, each list in declaration order."""

    functions: List[FunctionExport] = field(default_factory=list)
    components: List[ComponentExport] = field(default_factory=list)
    types: List[TypeExport] = field(default_factory=list)
    constants: List[ConstantExport] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.functions or self.components or self.types or self.constants)


@dataclass
class FileRecord:
    """Facts extracted from one parsed source file."""

    path: str
    description: Optional[str] = None
    exports: ExportSet = field(default_factory=ExportSet)

    def has_exports(self) -> bool:
        return not self.exports.is_empty()
