"""Typed view of a Directus schema snapshot.

These models are built once at the collaborator boundary (snapshot file,
REST API, database introspection) so the resolvers never probe loosely
typed dictionaries.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField


class Field(BaseModel):
    model_config = ConfigDict(frozen=True)

    collection: str
    field: str
    type: str = "unknown"
    nullable: bool = True
    alias: bool = False
    note: Optional[str] = None
    db_type: Optional[str] = None


class Collection(BaseModel):
    model_config = ConfigDict(frozen=True)

    collection: str
    singleton: bool = False
    # Insertion order is the declaration order and shows up in the output
    fields: Dict[str, Field] = PydanticField(default_factory=dict)


class RelationMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    many_collection: Optional[str] = None
    many_field: Optional[str] = None
    one_collection: Optional[str] = None
    one_field: Optional[str] = None
    junction_field: Optional[str] = None
    # Many-to-any: candidate target collections when related_collection is empty
    one_allowed_collections: List[str] = PydanticField(default_factory=list)


class Relation(BaseModel):
    model_config = ConfigDict(frozen=True)

    collection: str
    field: str
    related_collection: Optional[str] = None
    foreign_key_column: Optional[str] = None
    m2m_field: Optional[str] = None
    o2m_field: Optional[str] = None
    meta: Optional[RelationMeta] = None

    @property
    def is_to_many(self) -> bool:
        return bool(self.m2m_field or self.o2m_field)


class FieldChoice(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: Any
    text: Optional[str] = None


class FieldDefinition(BaseModel):
    """Field metadata served by the choice lookup collaborator."""
    model_config = ConfigDict(frozen=True)

    collection: str
    field: str
    interface: Optional[str] = None
    choices: List[FieldChoice] = PydanticField(default_factory=list)

    @property
    def is_multiple(self) -> bool:
        return bool(self.interface and "multiple" in self.interface)


class Schema(BaseModel):
    model_config = ConfigDict(frozen=True)

    collections: Dict[str, Collection] = PydanticField(default_factory=dict)
    relations: List[Relation] = PydanticField(default_factory=list)

    def collection_or_none(self, collection_id: Optional[str]) -> Optional[Collection]:
        if collection_id is None:
            return None
        return self.collections.get(collection_id)

    def relation_for(self, collection: str, field: str) -> Optional[Relation]:
        """Forward relation declared on (collection, field)."""
        for relation in self.relations:
            if relation.collection == collection and relation.field == field:
                return relation
        return None

    def reverse_relation_for(self, collection: str, field: str) -> Optional[Relation]:
        """Relation whose "one" side exposes (collection, field) as an alias."""
        for relation in self.relations:
            if relation.meta is None:
                continue
            if relation.meta.one_collection == collection and relation.meta.one_field == field:
                return relation
        return None
