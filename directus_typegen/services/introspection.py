"""Build a Schema by introspecting the database behind a Directus instance."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from sqlalchemy import Engine, inspect, select, types as sqltypes
from sqlalchemy.exc import CompileError, SQLAlchemyError
from sqlalchemy.orm import Session

from directus_typegen.core.errors import SchemaSourceError
from directus_typegen.db.models import DirectusCollection, DirectusField, DirectusRelation
from directus_typegen.schema.models import Collection, Field, Relation, RelationMeta, Schema
from directus_typegen.schema.snapshot import is_alias_field, parse_special

log = logging.getLogger(__name__)

SYSTEM_PREFIX = "directus_"

# meta.special flags that override the column type, checked in order
SPECIAL_TYPE_OVERRIDES = [
    ("uuid", "uuid"),
    ("hash", "hash"),
    ("csv", "csv"),
    ("cast-csv", "csv"),
    ("json", "json"),
    ("cast-json", "json"),
    ("boolean", "boolean"),
    ("cast-boolean", "boolean"),
    ("cast-timestamp", "timestamp"),
    ("cast-datetime", "dateTime"),
]


def column_type_tag(column_type: sqltypes.TypeEngine, special: List[str]) -> str:
    """Map a reflected column type to the Directus type tag."""
    for flag, tag in SPECIAL_TYPE_OVERRIDES:
        if flag in special:
            return tag

    # Subclasses before their bases: BigInteger < Integer, Float < Numeric, Text < String
    if isinstance(column_type, sqltypes.Boolean):
        return "boolean"
    if isinstance(column_type, sqltypes.BigInteger):
        return "bigInteger"
    if isinstance(column_type, sqltypes.Integer):
        return "integer"
    if isinstance(column_type, sqltypes.Float):
        return "float"
    if isinstance(column_type, sqltypes.Numeric):
        return "decimal"
    if isinstance(column_type, sqltypes.DateTime):
        return "timestamp" if getattr(column_type, "timezone", False) else "dateTime"
    if isinstance(column_type, sqltypes.Date):
        return "date"
    if isinstance(column_type, sqltypes.Time):
        return "time"
    if isinstance(column_type, sqltypes.Uuid):
        return "uuid"
    if isinstance(column_type, sqltypes.JSON):
        return "json"
    if isinstance(column_type, sqltypes.Text):
        return "text"
    if isinstance(column_type, sqltypes.String):
        return "string"
    if isinstance(column_type, sqltypes.LargeBinary):
        return "binary"
    if "geometry" in type(column_type).__name__.lower():
        return "geometry"
    return "unknown"


def _db_type_name(column_type: sqltypes.TypeEngine, engine: Engine) -> str:
    try:
        return column_type.compile(dialect=engine.dialect).lower()
    except CompileError:
        return type(column_type).__name__.lower()


def _foreign_key_column(foreign_keys: List[dict], column: str) -> Optional[str]:
    for fk in foreign_keys:
        if fk.get("constrained_columns") == [column] and fk.get("referred_columns"):
            return fk["referred_columns"][0]
    return None


def load_schema_from_database(engine: Engine, include_system: bool = True) -> Schema:
    """
    Rebuild the schema overview from the system tables and the live columns.

    Physical columns come first in table order, followed by alias fields
    registered in directus_fields (ordered by their sort value).
    """
    try:
        inspector = inspect(engine)
        tables = sorted(inspector.get_table_names())
        with Session(engine) as db:
            collection_rows = {row.collection: row for row in db.scalars(select(DirectusCollection))}
            field_rows = list(db.scalars(select(DirectusField).order_by(DirectusField.id.asc())))
            relation_rows = list(db.scalars(select(DirectusRelation).order_by(DirectusRelation.id.asc())))

        meta_by_collection: Dict[str, List[DirectusField]] = {}
        for row in sorted(field_rows, key=lambda r: (r.sort is None, r.sort or 0, r.id)):
            meta_by_collection.setdefault(row.collection, []).append(row)

        collections: Dict[str, Collection] = {}
        foreign_keys: Dict[str, List[dict]] = {}
        for table in tables:
            if not include_system and table.startswith(SYSTEM_PREFIX):
                continue
            metas = {row.field: row for row in meta_by_collection.get(table, [])}
            fields: Dict[str, Field] = {}
            for column in inspector.get_columns(table):
                meta = metas.get(column["name"])
                special = parse_special(meta.special if meta else None)
                fields[column["name"]] = Field(
                    collection=table,
                    field=column["name"],
                    type=column_type_tag(column["type"], special),
                    nullable=bool(column.get("nullable", True)),
                    alias=False,
                    note=meta.note if meta else None,
                    db_type=_db_type_name(column["type"], engine),
                )
            for meta in meta_by_collection.get(table, []):
                if meta.field in fields:
                    continue
                special = parse_special(meta.special)
                if not is_alias_field(None, special):
                    log.debug("directus_fields row without a column", extra={"collection": table, "field": meta.field})
                    continue
                fields[meta.field] = Field(
                    collection=table,
                    field=meta.field,
                    type="alias",
                    nullable=True,
                    alias=True,
                    note=meta.note,
                    db_type=None,
                )
            collection_row = collection_rows.get(table)
            collections[table] = Collection(
                collection=table,
                singleton=bool(collection_row.singleton) if collection_row else False,
                fields=fields,
            )
            foreign_keys[table] = inspector.get_foreign_keys(table)

        relations = []
        for row in relation_rows:
            relations.append(Relation(
                collection=row.many_collection,
                field=row.many_field,
                related_collection=row.one_collection,
                foreign_key_column=_foreign_key_column(foreign_keys.get(row.many_collection, []), row.many_field),
                meta=RelationMeta(
                    many_collection=row.many_collection,
                    many_field=row.many_field,
                    one_collection=row.one_collection,
                    one_field=row.one_field,
                    junction_field=row.junction_field,
                    one_allowed_collections=parse_special(row.one_allowed_collections),
                ),
            ))
    except SQLAlchemyError as e:
        raise SchemaSourceError(f"Database introspection failed: {e}") from e

    log.info("Introspected %d collections and %d relations", len(collections), len(relations))
    return Schema(collections=collections, relations=relations)
