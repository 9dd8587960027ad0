"""Field-choice lookup collaborators used by the enum resolver."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from directus_typegen.core.errors import ChoiceLookupError
from directus_typegen.db.models import DirectusField
from directus_typegen.schema.models import FieldDefinition
from directus_typegen.schema.snapshot import build_definition

log = logging.getLogger(__name__)


class ChoiceSource:
    """Answers "which choices does collection.field carry?"."""

    def lookup(self, collection: str, field: str) -> Optional[FieldDefinition]:
        raise NotImplementedError

    def all(self) -> List[FieldDefinition]:
        """Every definition carrying choices, for prefetching."""
        raise NotImplementedError


class StaticChoiceSource(ChoiceSource):
    """Definitions known up front, e.g. from a snapshot file."""

    def __init__(self, definitions: Iterable[FieldDefinition] = ()):
        self._definitions: Dict[Tuple[str, str], FieldDefinition] = {
            (d.collection, d.field): d for d in definitions
        }

    def lookup(self, collection: str, field: str) -> Optional[FieldDefinition]:
        return self._definitions.get((collection, field))

    def all(self) -> List[FieldDefinition]:
        return list(self._definitions.values())


class DatabaseChoiceSource(ChoiceSource):
    """Reads field options straight from the directus_fields table."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def lookup(self, collection: str, field: str) -> Optional[FieldDefinition]:
        stmt = (
            select(DirectusField)
            .where(DirectusField.collection == collection, DirectusField.field == field)
            .limit(1)
        )
        try:
            with self.session_factory() as db:
                row = db.scalars(stmt).first()
        except SQLAlchemyError as e:
            raise ChoiceLookupError(f"directus_fields lookup failed for {collection}.{field}: {e}") from e
        if row is None:
            return None
        return build_definition(row.collection, row.field, row.interface, row.options)

    def all(self) -> List[FieldDefinition]:
        stmt = (
            select(DirectusField)
            .where(DirectusField.options.is_not(None))
            .order_by(DirectusField.collection.asc(), DirectusField.field.asc())
        )
        try:
            with self.session_factory() as db:
                rows = list(db.scalars(stmt).all())
        except SQLAlchemyError as e:
            raise ChoiceLookupError(f"directus_fields prefetch failed: {e}") from e
        definitions = [build_definition(r.collection, r.field, r.interface, r.options) for r in rows]
        return [d for d in definitions if d.choices]


class CachedChoiceSource(ChoiceSource):
    """
    Caches lookups of another source by (collection, field) for one run.

    After a successful prefetch() every lookup is answered from memory;
    otherwise each distinct key hits the wrapped source once.
    """

    def __init__(self, inner: ChoiceSource):
        self.inner = inner
        self._cache: Dict[Tuple[str, str], Optional[FieldDefinition]] = {}
        self._complete = False

    def prefetch(self) -> bool:
        try:
            definitions = self.inner.all()
        except Exception as e:
            log.warning("Choice prefetch failed, falling back to per-field lookups: %s", e)
            return False
        for definition in definitions:
            self._cache[(definition.collection, definition.field)] = definition
        self._complete = True
        log.info("Prefetched %d field definitions with choices", len(definitions))
        return True

    def lookup(self, collection: str, field: str) -> Optional[FieldDefinition]:
        key = (collection, field)
        if key in self._cache:
            return self._cache[key]
        if self._complete:
            return None
        definition = self.inner.lookup(collection, field)
        self._cache[key] = definition
        return definition

    def all(self) -> List[FieldDefinition]:
        if not self._complete:
            self.prefetch()
        return [d for d in self._cache.values() if d is not None and d.choices]


def safe_lookup(source: ChoiceSource, collection: str, field: str) -> Optional[FieldDefinition]:
    """Lookup that treats collaborator failures as "no choices"."""
    try:
        return source.lookup(collection, field)
    except ChoiceLookupError as e:
        log.warning("Choice lookup failed, using the column type: %s", e,
                    extra={"collection": collection, "field": field})
        return None
    except Exception as e:
        log.warning("Unexpected choice lookup error, using the column type: %s: %s", type(e).__name__, e,
                    extra={"collection": collection, "field": field})
        return None
