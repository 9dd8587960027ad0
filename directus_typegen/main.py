"""Command line entry point: `directus-typegen snapshot <path>`."""
import argparse
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from directus_typegen.core.config import Settings, get_settings
from directus_typegen.core.errors import SchemaSourceError, TypegenError
from directus_typegen.core.logging import configure_logging
from directus_typegen.db.session import make_engine, make_session_factory
from directus_typegen.generators.ts_gen.generator import generate_types
from directus_typegen.generators.ts_gen.types import DeclarationMode, GeneratorConfig, OutputLayout
from directus_typegen.generators.ts_gen.writer import write_files
from directus_typegen.schema.models import Schema
from directus_typegen.schema.snapshot import load_snapshot
from directus_typegen.services.choices import (
    CachedChoiceSource,
    ChoiceSource,
    DatabaseChoiceSource,
    StaticChoiceSource,
)
from directus_typegen.services.directus_api import ApiChoiceSource, DirectusApiClient
from directus_typegen.services.introspection import load_schema_from_database

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_DEGRADED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="directus-typegen",
        description="Export the Directus data model to TypeScript .d.ts files",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    snapshot = subcommands.add_parser(
        "snapshot",
        help="Export the current schema to <path>",
    )
    snapshot.add_argument("path", type=Path, help="Output file, or output directory with --split")
    snapshot.add_argument(
        "-g", "--global",
        dest="global_declarations",
        action="store_true",
        help="Generate global declarations instead of exports. Drop the file into your TypeScript project as a .d.ts file.",
    )
    snapshot.add_argument("--split", action="store_true", help="Write one file per collection plus index.d.ts")

    source = snapshot.add_mutually_exclusive_group()
    source.add_argument("--from-snapshot", type=Path, help="Schema snapshot file (JSON or YAML)")
    source.add_argument("--from-api", metavar="URL", help="Directus base URL")
    source.add_argument("--from-database", metavar="URL", help="SQLAlchemy URL of the Directus database")
    snapshot.add_argument("--token", help="Static token for --from-api")

    snapshot.add_argument("--lenient", action="store_true", help="Use `unknown` instead of `never` for unsupported types")
    snapshot.add_argument("--strict", action="store_true", help="Exit with status 3 when any field was degraded")
    snapshot.add_argument("--no-prefetch", action="store_true", help="Look up field choices one field at a time")
    return parser


def load_source(args: argparse.Namespace, settings: Settings) -> Tuple[Schema, ChoiceSource]:
    """Pick the schema source from CLI flags, falling back to settings."""
    prefetch = settings.prefetch_choices and not args.no_prefetch

    snapshot_path = args.from_snapshot
    api_url = args.from_api
    database_url = args.from_database
    if not (snapshot_path or api_url or database_url):
        if settings.snapshot_path:
            snapshot_path = Path(settings.snapshot_path)
        elif settings.directus_url:
            api_url = settings.directus_url
        elif settings.database_url:
            database_url = settings.database_url

    if snapshot_path:
        schema, definitions = load_snapshot(snapshot_path)
        return schema, StaticChoiceSource(definitions)

    if api_url:
        client = DirectusApiClient(
            base_url=api_url,
            token=args.token or settings.directus_token,
            timeout=settings.request_timeout_seconds,
        )
        schema, _ = client.fetch_snapshot()
        choices = CachedChoiceSource(ApiChoiceSource(client))
    elif database_url:
        engine = make_engine(database_url, settings.request_timeout_seconds)
        schema = load_schema_from_database(engine, include_system=settings.include_system_collections)
        choices = CachedChoiceSource(DatabaseChoiceSource(make_session_factory(engine)))
    else:
        raise SchemaSourceError(
            "No schema source configured. Pass --from-snapshot, --from-api or --from-database, "
            "or set DIRECTUS_TYPEGEN_SNAPSHOT_PATH, DIRECTUS_TYPEGEN_DIRECTUS_URL or DIRECTUS_TYPEGEN_DATABASE_URL."
        )

    if prefetch:
        choices.prefetch()
    return schema, choices


def snapshot_command(args: argparse.Namespace, settings: Settings) -> int:
    path: Path = args.path
    if args.split:
        out_dir = path
        layout = OutputLayout.SPLIT
    else:
        if path.is_dir():
            log.error("%s is a directory; pass --split to write one file per collection", path)
            return EXIT_FAILED
        out_dir = path.parent
        layout = OutputLayout.COMBINED

    config = GeneratorConfig(
        mode=DeclarationMode.DECLARE if args.global_declarations else DeclarationMode.EXPORT,
        layout=layout,
        json_type=settings.json_type,
        lenient_types=args.lenient or settings.lenient_types,
        combined_file_name=path.name,
    )

    schema, choices = load_source(args, settings)
    log.info("Exporting models to %s", path)
    result = generate_types(schema, choices, config)
    written = write_files(result.files, out_dir)
    log.info("Wrote %d files", len(written))

    if result.failures:
        log.warning("%d fields could not be typed and were degraded", len(result.failures))
        if args.strict:
            return EXIT_DEGRADED
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level)
    args = build_parser().parse_args(argv)

    try:
        if args.command == "snapshot":
            return snapshot_command(args, settings)
    except TypegenError as e:
        log.error("%s", e)
        return EXIT_FAILED
    return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
