"""Orchestrator for TypeScript declaration generation."""
import logging
from typing import Dict, List, Optional

from directus_typegen.core.errors import NameCollisionError
from directus_typegen.generators.ts_gen.render_index import render_helpers, render_index
from directus_typegen.generators.ts_gen.render_model import render_model
from directus_typegen.generators.ts_gen.types import (
    DeclarationMode,
    GeneratedFile,
    GenerationResult,
    GeneratorConfig,
    OutputLayout,
    RenderedModel,
)
from directus_typegen.generators.ts_gen.utils import class_name
from directus_typegen.schema.models import Schema
from directus_typegen.services.choices import ChoiceSource

log = logging.getLogger(__name__)

DECLARATION_SUFFIX = ".d.ts"
INDEX_FILE_NAME = "index" + DECLARATION_SUFFIX

# Names emitted next to the collection interfaces
HELPER_TYPE_NAMES = ("Collections", "CollectionName", "ItemIn")


def check_name_collisions(schema: Schema, config: Optional[GeneratorConfig] = None) -> None:
    """
    Fail before emitting anything if two collections share an interface name.

    Names are compared case-insensitively since split output lands in
    `<Name>.d.ts` files on filesystems that may fold case.
    """
    reserved = list(HELPER_TYPE_NAMES)
    if config is not None and config.layout is OutputLayout.SPLIT:
        reserved.append(INDEX_FILE_NAME[: -len(DECLARATION_SUFFIX)])

    by_key: Dict[str, List[str]] = {}
    names: Dict[str, str] = {}
    for name in reserved:
        by_key[name.casefold()] = ["(reserved name)"]
        names[name.casefold()] = name
    for collection_id in schema.collections:
        name = class_name(collection_id)
        key = name.casefold()
        names.setdefault(key, name)
        by_key.setdefault(key, []).append(collection_id)
    collisions = {names[key]: ids for key, ids in by_key.items() if len(ids) > 1}
    if collisions:
        raise NameCollisionError(collisions)


def render_imports(names, config: GeneratorConfig) -> List[str]:
    """One import line per referenced interface; ambient files share global scope."""
    if config.mode is DeclarationMode.DECLARE:
        return []
    return [f'import type {{ {name} }} from "./{name}";' for name in names]


def _with_imports(imports: List[str], source: str) -> str:
    if not imports:
        return source
    return "\n".join(imports) + "\n\n" + source


def _combined_files(schema: Schema, models: List[RenderedModel], config: GeneratorConfig) -> List[GeneratedFile]:
    content = "\n".join(model.source for model in models)
    content += "\n" + render_index(schema.collections.values(), config)
    content += "\n" + render_helpers(config)
    return [GeneratedFile(path=config.combined_file_name, content=content)]


def _split_files(schema: Schema, models: List[RenderedModel], config: GeneratorConfig) -> List[GeneratedFile]:
    files = []
    for model in models:
        files.append(GeneratedFile(
            path=f"{model.name}{DECLARATION_SUFFIX}",
            content=_with_imports(render_imports(model.references, config), model.source),
        ))
    index_imports = render_imports([model.name for model in models], config)
    files.append(GeneratedFile(
        path=INDEX_FILE_NAME,
        content=_with_imports(index_imports, render_index(schema.collections.values(), config)),
    ))
    return files


def generate_types(schema: Schema, choices: ChoiceSource, config: GeneratorConfig) -> GenerationResult:
    """
    Generate declarations for every collection of the schema.

    Args:
        schema: Schema snapshot to describe
        choices: Field-choice lookup used to detect enum fields
        config: Declaration keyword, layout and type options

    Returns:
        GenerationResult with the files to write and every degraded field
    """
    check_name_collisions(schema, config)

    models = []
    for collection in schema.collections.values():
        log.debug("Rendering interface", extra={"collection": collection.collection})
        models.append(render_model(collection, schema, choices, config))

    if config.layout is OutputLayout.SPLIT:
        files = _split_files(schema, models, config)
    else:
        files = _combined_files(schema, models, config)

    failures = [failure for model in models for failure in model.failures]
    log.info("Generated %d interfaces in %d files (%d fields degraded)",
             len(models), len(files), len(failures))
    return GenerationResult(files=files, failures=failures)
