"""Build a typed Schema from a Directus schema snapshot document."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from directus_typegen.core.errors import SchemaSourceError
from directus_typegen.schema.models import (
    Collection,
    Field,
    FieldChoice,
    FieldDefinition,
    Relation,
    RelationMeta,
    Schema,
)

log = logging.getLogger(__name__)

# meta.special flags that mark a field without a physical column
ALIAS_SPECIALS = {"alias", "o2m", "m2m", "m2a", "no-data", "group", "translations", "files"}

RELATION_META_KEYS = ("many_collection", "many_field", "one_collection", "one_field", "junction_field")


def parse_special(special: Any) -> List[str]:
    """meta.special is a list in snapshots and a CSV string in the database."""
    if not special:
        return []
    if isinstance(special, str):
        return [part.strip() for part in special.split(",") if part.strip()]
    return [str(part) for part in special]


def parse_options(options: Any) -> Dict[str, Any]:
    if not options:
        return {}
    if isinstance(options, str):
        try:
            options = json.loads(options)
        except json.JSONDecodeError:
            log.warning("Ignoring field options that are not valid JSON: %r", options[:80])
            return {}
    return options if isinstance(options, dict) else {}


def is_alias_field(type_tag: Optional[str], special: Iterable[str]) -> bool:
    return type_tag == "alias" or any(flag in ALIAS_SPECIALS for flag in special)


def build_definition(
    collection: str,
    field: str,
    interface: Optional[str],
    options: Any,
) -> FieldDefinition:
    """Turn raw field meta (interface + options) into a FieldDefinition."""
    raw_choices = parse_options(options).get("choices") or []
    if not isinstance(raw_choices, list):
        log.warning("Ignoring choices of %s.%s that are not a list: %r", collection, field, raw_choices,
                    extra={"collection": collection, "field": field})
        raw_choices = []
    choices = []
    for choice in raw_choices:
        if isinstance(choice, dict):
            if "value" not in choice:
                continue
            choices.append(FieldChoice(value=choice["value"], text=choice.get("text")))
        else:
            # Bare values show up in hand-edited snapshots
            choices.append(FieldChoice(value=choice, text=str(choice)))
    return FieldDefinition(collection=collection, field=field, interface=interface, choices=choices)


def _build_field(raw: Dict[str, Any]) -> Field:
    meta = raw.get("meta") or {}
    column = raw.get("schema") or {}
    special = parse_special(meta.get("special"))
    alias = is_alias_field(raw.get("type"), special)
    if alias:
        nullable = True
    else:
        nullable = bool(column.get("is_nullable", True))
    return Field(
        collection=raw["collection"],
        field=raw["field"],
        type=raw.get("type") or "unknown",
        nullable=nullable,
        alias=alias,
        note=meta.get("note"),
        db_type=column.get("data_type"),
    )


def _build_relation(raw: Dict[str, Any]) -> Relation:
    meta = raw.get("meta") or None
    column = raw.get("schema") or {}
    relation_meta = None
    if meta:
        relation_meta = RelationMeta(
            **{key: meta.get(key) for key in RELATION_META_KEYS},
            one_allowed_collections=parse_special(meta.get("one_allowed_collections")),
        )
    return Relation(
        collection=raw["collection"],
        field=raw["field"],
        related_collection=raw.get("related_collection"),
        foreign_key_column=column.get("foreign_key_column"),
        m2m_field=raw.get("m2m_field") or (meta or {}).get("m2m_field"),
        o2m_field=raw.get("o2m_field") or (meta or {}).get("o2m_field"),
        meta=relation_meta,
    )


def parse_snapshot(document: Dict[str, Any]) -> Tuple[Schema, List[FieldDefinition]]:
    """
    Parse a snapshot document into a Schema plus the field definitions
    carrying choice metadata.

    Collections without a table (folders) are skipped, as are fields of
    collections that are not part of the snapshot.
    """
    if not isinstance(document, dict):
        raise SchemaSourceError("Schema snapshot must be a mapping")

    try:
        fields_by_collection: Dict[str, Dict[str, Field]] = {}
        definitions: List[FieldDefinition] = []
        for raw_field in document.get("fields") or []:
            field = _build_field(raw_field)
            fields_by_collection.setdefault(field.collection, {})[field.field] = field
            meta = raw_field.get("meta") or {}
            definition = build_definition(field.collection, field.field, meta.get("interface"), meta.get("options"))
            if definition.choices:
                definitions.append(definition)

        collections: Dict[str, Collection] = {}
        for raw_collection in document.get("collections") or []:
            name = raw_collection["collection"]
            if "schema" in raw_collection and raw_collection["schema"] is None:
                log.debug("Skipping folder collection %s", name, extra={"collection": name})
                continue
            meta = raw_collection.get("meta") or {}
            collections[name] = Collection(
                collection=name,
                singleton=bool(meta.get("singleton", False)),
                fields=fields_by_collection.get(name, {}),
            )

        relations = [_build_relation(raw) for raw in document.get("relations") or []]
    except (KeyError, TypeError, ValidationError) as e:
        raise SchemaSourceError(f"Malformed schema snapshot: {e}") from e

    known = set(collections)
    definitions = [d for d in definitions if d.collection in known]
    return Schema(collections=collections, relations=relations), definitions


def load_snapshot(path: Path) -> Tuple[Schema, List[FieldDefinition]]:
    """Read a JSON or YAML snapshot file as written by `directus schema snapshot`."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaSourceError(f"Cannot read schema snapshot {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            document = json.loads(text)
        else:
            document = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SchemaSourceError(f"Cannot parse schema snapshot {path}: {e}") from e

    # The REST endpoint wraps the snapshot in {"data": ...}
    if isinstance(document, dict) and "data" in document and "collections" not in document:
        document = document["data"]

    schema, definitions = parse_snapshot(document)
    log.info("Loaded %d collections and %d relations from %s",
             len(schema.collections), len(schema.relations), path)
    return schema, definitions
