"""Render the collection index and the helper types built on it."""
from typing import Iterable

from directus_typegen.generators.ts_gen.types import GeneratorConfig
from directus_typegen.generators.ts_gen.utils import class_name, property_name
from directus_typegen.schema.models import Collection


def render_index(collections: Iterable[Collection], config: GeneratorConfig) -> str:
    """`Collections` maps each collection id to its item type (an array unless singleton)."""
    lines = [f"{config.keyword} type Collections = {{"]
    for collection in collections:
        suffix = "" if collection.singleton else "[]"
        lines.append(f"  {property_name(collection.collection)}: {class_name(collection.collection)}{suffix};")
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_helpers(config: GeneratorConfig) -> str:
    keyword = config.keyword
    lines = [
        f"{keyword} type CollectionName = keyof Collections;",
        "",
        f"{keyword} type ItemIn<CollectionKey extends CollectionName> =",
        "    Collections[CollectionKey] extends (infer Item extends object)[]",
        "        ? Item",
        "        : Collections[CollectionKey];",
    ]
    return "\n".join(lines) + "\n"
