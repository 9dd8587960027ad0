"""Exception hierarchy for type generation."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping


class TypegenError(Exception):
    """Base class for every error raised by directus-typegen."""


class FieldResolutionError(TypegenError):
    """A single field could not be resolved to a type. Never fatal to the run."""

    def __init__(self, collection: str, field: str, message: str):
        super().__init__(f"{collection}.{field}: {message}")
        self.collection = collection
        self.field = field
        self.reason = message


class UnsupportedFieldTypeError(FieldResolutionError):
    def __init__(self, collection: str, field: str, type_tag: str):
        super().__init__(collection, field, f"unsupported type '{type_tag}'")
        self.type_tag = type_tag


class DanglingRelationError(FieldResolutionError):
    def __init__(self, collection: str, field: str, related_collection: str | None):
        super().__init__(
            collection,
            field,
            f"relation points at unknown collection '{related_collection}'",
        )
        self.related_collection = related_collection


class ChoiceLookupError(TypegenError):
    """The field-choice collaborator failed to answer."""


class SchemaSourceError(TypegenError):
    """The schema snapshot could not be loaded."""


class NameCollisionError(TypegenError):
    """Two or more collections resolve to the same interface name."""

    def __init__(self, collisions: Mapping[str, Iterable[str]]):
        self.collisions = {name: sorted(ids) for name, ids in collisions.items()}
        details = "; ".join(
            f"{name} <- {', '.join(ids)}" for name, ids in sorted(self.collisions.items())
        )
        super().__init__(f"Collections resolve to the same type name: {details}")


class OutputWriteError(TypegenError):
    """Writing generated files failed."""

    def __init__(self, path: Path, cause: OSError):
        super().__init__(f"Failed to write {path}: {cause}")
        self.path = path
        self.cause = cause
