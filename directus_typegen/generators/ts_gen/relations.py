"""Resolve relational fields into cross-referencing TypeScript types."""
import json
from typing import List, Optional

from directus_typegen.core.errors import DanglingRelationError
from directus_typegen.generators.ts_gen.scalars import field_scalar_type
from directus_typegen.generators.ts_gen.types import RelationType
from directus_typegen.generators.ts_gen.utils import class_name
from directus_typegen.schema.models import Collection, Field, Relation, Schema


def _target_names(relation: Relation, field: Field, schema: Schema) -> List[str]:
    """Interface names the relation can point at; several for many-to-any."""
    if relation.related_collection:
        candidates = [relation.related_collection]
    elif relation.meta and relation.meta.one_allowed_collections:
        candidates = list(relation.meta.one_allowed_collections)
    else:
        raise DanglingRelationError(field.collection, field.field, None)

    names = []
    for candidate in candidates:
        target = schema.collection_or_none(candidate)
        if target is None:
            raise DanglingRelationError(field.collection, field.field, candidate)
        names.append(class_name(target.collection))
    return names


def resolve_relation(
    field: Field,
    collection: Collection,
    schema: Schema,
    json_type: str = "any",
) -> Optional[RelationType]:
    """
    Type of a field holding a foreign key, or None when it has no relation.

    The result is a union of the expanded item and its bare key, since the
    API returns either shape depending on the requested depth:
    `Target | Target["id"]`, or `Target[] | Target["id"][]` for to-many
    relations. Without a known foreign-key column the field's own scalar
    type stands in for the key.
    """
    relation = schema.relation_for(collection.collection, field.field)
    if relation is None:
        return None

    names = _target_names(relation, field, schema)
    if len(names) == 1 and relation.foreign_key_column:
        key_type = f"{names[0]}[{json.dumps(relation.foreign_key_column)}]"
    else:
        key_type = field_scalar_type(field, json_type)

    target_type = " | ".join(names)
    if relation.is_to_many:
        if len(names) > 1:
            target_type = f"({target_type})"
        return RelationType(f"{target_type}[] | {key_type}[]", tuple(names))
    return RelationType(f"{target_type} | {key_type}", tuple(names))


def resolve_alias(field: Field, collection: Collection, schema: Schema) -> Optional[RelationType]:
    """
    Type of an alias field exposing the "one" side of a relation.

    Reverse relations always list every row pointing back here, so the
    result is an array of the many-side type.
    """
    relation = schema.reverse_relation_for(collection.collection, field.field)
    if relation is None:
        return None

    many_collection = relation.meta.many_collection or relation.collection
    target = schema.collection_or_none(many_collection)
    if target is None:
        raise DanglingRelationError(field.collection, field.field, many_collection)
    name = class_name(target.collection)
    return RelationType(f"{name}[]", (name,))
