from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple
from urllib.parse import quote

import httpx

from directus_typegen.core.errors import ChoiceLookupError, SchemaSourceError
from directus_typegen.schema.models import FieldDefinition, Schema
from directus_typegen.schema.snapshot import build_definition, parse_snapshot
from directus_typegen.services.choices import ChoiceSource

log = logging.getLogger(__name__)


@dataclass
class DirectusApiClient:
    base_url: str
    token: Optional[str] = None
    timeout: float = 10.0
    transport: Optional[httpx.BaseTransport] = None

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url.rstrip("/"),
            headers=self._headers(),
            timeout=self.timeout,
            transport=self.transport,
        )

    def get(self, path: str) -> Any:
        with self._client() as client:
            r = client.get(path)
            r.raise_for_status()
            payload = r.json()
        if not isinstance(payload, dict):
            raise ValueError(f"GET {path} returned {type(payload).__name__}, expected an object")
        return payload.get("data")

    def fetch_snapshot(self) -> Tuple[Schema, List[FieldDefinition]]:
        try:
            document = self.get("/schema/snapshot")
        except (httpx.HTTPError, ValueError) as e:
            raise SchemaSourceError(f"Cannot fetch schema snapshot from {self.base_url}: {e}") from e
        schema, definitions = parse_snapshot(document)
        log.info("Fetched %d collections and %d relations from %s",
                 len(schema.collections), len(schema.relations), self.base_url)
        return schema, definitions


class ApiChoiceSource(ChoiceSource):
    """Looks up field options through the /fields endpoints."""

    def __init__(self, client: DirectusApiClient):
        self.client = client

    def lookup(self, collection: str, field: str) -> Optional[FieldDefinition]:
        path = f"/fields/{quote(collection, safe='')}/{quote(field, safe='')}"
        try:
            data = self.client.get(path)
        except httpx.HTTPStatusError as e:
            # Directus answers 403 for fields the token cannot see as well as unknown ones
            if e.response.status_code in (403, 404):
                return None
            raise ChoiceLookupError(f"GET {path} failed: {e}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise ChoiceLookupError(f"GET {path} failed: {e}") from e
        if not isinstance(data, dict):
            return None
        meta = data.get("meta") or {}
        return build_definition(collection, field, meta.get("interface"), meta.get("options"))

    def all(self) -> List[FieldDefinition]:
        try:
            data = self.client.get("/fields") or []
        except (httpx.HTTPError, ValueError) as e:
            raise ChoiceLookupError(f"GET /fields failed: {e}") from e
        definitions = []
        for raw in data:
            if not isinstance(raw, dict) or "collection" not in raw or "field" not in raw:
                log.warning("Skipping malformed /fields entry: %r", raw)
                continue
            meta = raw.get("meta") or {}
            definition = build_definition(raw["collection"], raw["field"], meta.get("interface"), meta.get("options"))
            if definition.choices:
                definitions.append(definition)
        return definitions
