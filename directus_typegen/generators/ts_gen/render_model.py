"""Render one TypeScript interface per collection."""
import logging
from typing import List

from directus_typegen.core.errors import FieldResolutionError, UnsupportedFieldTypeError
from directus_typegen.generators.ts_gen.enums import resolve_enum
from directus_typegen.generators.ts_gen.relations import resolve_alias, resolve_relation
from directus_typegen.generators.ts_gen.scalars import field_scalar_type
from directus_typegen.generators.ts_gen.types import (
    FieldFailure,
    FieldResolution,
    GeneratorConfig,
    RenderedModel,
)
from directus_typegen.generators.ts_gen.utils import class_name, property_name
from directus_typegen.schema.models import Collection, Field, Schema
from directus_typegen.services.choices import ChoiceSource, safe_lookup

log = logging.getLogger(__name__)

NEVER_TYPE = "never"
LENIENT_TYPE = "unknown"


def union_members(type_expr: str) -> List[str]:
    """Split a type expression on top-level `|`, ignoring quotes and brackets."""
    members = []
    depth = 0
    quote = None
    current = []
    escaped = False
    for char in type_expr:
        if quote:
            current.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue
        if char in "'\"":
            quote = char
        elif char in "([{<":
            depth += 1
        elif char in ")]}>":
            depth -= 1
        elif char == "|" and depth == 0:
            members.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    members.append("".join(current).strip())
    return members


def with_null(type_expr: str) -> str:
    if "null" in union_members(type_expr):
        return type_expr
    return f"{type_expr} | null"


def resolve_field_type(
    field: Field,
    collection: Collection,
    schema: Schema,
    choices: ChoiceSource,
    config: GeneratorConfig,
) -> FieldResolution:
    """
    Resolve one field: relation (reverse relation for alias fields), then
    choices, then the scalar column type. Errors come back in the result,
    unexpected ones included, so one field never aborts its collection.
    """
    try:
        if field.alias:
            relation = resolve_alias(field, collection, schema)
        else:
            relation = resolve_relation(field, collection, schema, config.json_type)
        if relation is not None:
            return FieldResolution(type_expr=relation.type_expr, references=relation.references)

        enum_type = resolve_enum(safe_lookup(choices, collection.collection, field.field))
        if enum_type is not None:
            return FieldResolution(type_expr=enum_type)

        return FieldResolution(type_expr=field_scalar_type(field, config.json_type))
    except FieldResolutionError as e:
        return FieldResolution(error=e)
    except Exception as e:
        log.exception("Unexpected error while resolving %s.%s", collection.collection, field.field,
                      extra={"collection": collection.collection, "field": field.field})
        return FieldResolution(error=FieldResolutionError(
            collection.collection, field.field, f"{type(e).__name__}: {e}",
        ))


def _doc_lines(text: str) -> List[str]:
    return [line.replace("*/", "*\\/").rstrip() for line in text.splitlines()] or [""]


def render_field(field: Field, type_expr: str) -> List[str]:
    lines = ["  /**"]
    for line in _doc_lines(field.note or "No description."):
        lines.append(f"   * {line}".rstrip())
    lines.append("   *")
    lines.append(f"   * Type in directus: {field.type}")
    lines.append(f"   * Type in database: {field.db_type or 'no column'}")
    lines.append("   */")
    lines.append(f"  {property_name(field.field)}: {type_expr};")
    return lines


def render_model(
    collection: Collection,
    schema: Schema,
    choices: ChoiceSource,
    config: GeneratorConfig,
) -> RenderedModel:
    """Generate the interface of a collection, one member per field in declared order."""
    name = class_name(collection.collection)
    references = set()
    failures = []

    lines = [f"{config.keyword} interface {name} {{"]
    for field in collection.fields.values():
        resolution = resolve_field_type(field, collection, schema, choices, config)
        if resolution.ok:
            type_expr = resolution.type_expr
            if field.nullable:
                type_expr = with_null(type_expr)
            references.update(resolution.references)
        else:
            lenient = config.lenient_types and isinstance(resolution.error, UnsupportedFieldTypeError)
            type_expr = LENIENT_TYPE if lenient else NEVER_TYPE
            failures.append(FieldFailure(collection.collection, field.field, resolution.error.reason))
            log.error(
                "Failed to get the type for %s.%s, setting it to %r: %s",
                collection.collection, field.field, type_expr, resolution.error.reason,
                extra={"collection": collection.collection, "field": field.field},
            )
        lines.append("")
        lines.extend(render_field(field, type_expr))
    lines.append("}")

    references.discard(name)
    return RenderedModel(
        name=name,
        source="\n".join(lines) + "\n",
        references=tuple(sorted(references)),
        failures=failures,
    )
