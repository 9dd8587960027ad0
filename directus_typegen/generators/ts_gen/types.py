"""Dataclasses for TypeScript declaration generation."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from directus_typegen.core.errors import FieldResolutionError


class DeclarationMode(str, Enum):
    EXPORT = "export"  # importable module
    DECLARE = "declare"  # ambient, globally merged declarations


class OutputLayout(str, Enum):
    COMBINED = "combined"
    SPLIT = "split"


@dataclass(frozen=True)
class GeneratorConfig:
    """Options consumed once at the top of an emission run."""
    mode: DeclarationMode = DeclarationMode.EXPORT
    layout: OutputLayout = OutputLayout.COMBINED
    json_type: str = "any"
    lenient_types: bool = False
    combined_file_name: str = "models.d.ts"

    @property
    def keyword(self) -> str:
        return self.mode.value


@dataclass(frozen=True)
class RelationType:
    """Type expression of a relational field plus the interfaces it refers to."""
    type_expr: str
    references: Tuple[str, ...]


@dataclass(frozen=True)
class FieldFailure:
    collection: str
    field: str
    reason: str


@dataclass(frozen=True)
class FieldResolution:
    """Either a resolved type expression or the error that prevented it."""
    type_expr: Optional[str] = None
    references: Tuple[str, ...] = ()
    error: Optional[FieldResolutionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RenderedModel:
    name: str
    source: str
    references: Tuple[str, ...] = ()
    failures: List[FieldFailure] = field(default_factory=list)


@dataclass
class GeneratedFile:
    """Represents a generated file."""
    path: str  # Relative path from output directory
    content: str  # File contents


@dataclass
class GenerationResult:
    files: List[GeneratedFile]
    failures: List[FieldFailure] = field(default_factory=list)
