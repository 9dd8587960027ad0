"""Shared fixtures: a small blog schema in Directus snapshot format."""
import pytest

from directus_typegen.generators.ts_gen.types import GeneratorConfig
from directus_typegen.schema.snapshot import parse_snapshot
from directus_typegen.services.choices import StaticChoiceSource


def snapshot_field(collection, field, type_tag, data_type=None, nullable=True, note=None,
                   special=None, interface=None, options=None):
    """Build one entry of a snapshot "fields" array."""
    meta = {
        "collection": collection,
        "field": field,
        "special": special,
        "interface": interface,
        "options": options,
        "note": note,
    }
    if type_tag == "alias":
        schema = None
    else:
        schema = {
            "name": field,
            "table": collection,
            "data_type": data_type or type_tag,
            "is_nullable": nullable,
        }
    return {"collection": collection, "field": field, "type": type_tag, "meta": meta, "schema": schema}


def snapshot_relation(collection, field, related_collection, fk_column="id", one_field=None, junction_field=None):
    return {
        "collection": collection,
        "field": field,
        "related_collection": related_collection,
        "meta": {
            "many_collection": collection,
            "many_field": field,
            "one_collection": related_collection,
            "one_field": one_field,
            "junction_field": junction_field,
        },
        "schema": {
            "table": collection,
            "column": field,
            "foreign_key_table": related_collection,
            "foreign_key_column": fk_column,
        } if fk_column else None,
    }


def build_snapshot_document():
    return {
        "version": 1,
        "directus": "10.8.3",
        "vendor": "postgres",
        "collections": [
            {"collection": "content", "meta": {"collection": "content", "singleton": False}, "schema": None},
            {"collection": "blog_posts", "meta": {"singleton": False}, "schema": {"name": "blog_posts"}},
            {"collection": "categories", "meta": {"singleton": False}, "schema": {"name": "categories"}},
            {"collection": "comments", "meta": {"singleton": False}, "schema": {"name": "comments"}},
            {"collection": "tags", "meta": {"singleton": False}, "schema": {"name": "tags"}},
            {"collection": "blog_posts_tags", "meta": {"singleton": False}, "schema": {"name": "blog_posts_tags"}},
            {"collection": "directus_users", "meta": None, "schema": {"name": "directus_users"}},
            {"collection": "settings", "meta": {"singleton": True}, "schema": {"name": "settings"}},
        ],
        "fields": [
            snapshot_field("blog_posts", "id", "integer", nullable=False),
            snapshot_field("blog_posts", "title", "string", "character varying", nullable=False, note="Headline"),
            snapshot_field(
                "blog_posts", "status", "string", "character varying", nullable=False,
                interface="select-dropdown",
                options={"choices": [
                    {"text": "Draft", "value": "draft"},
                    {"text": "Published", "value": "published"},
                    {"text": "It's complicated", "value": "it's"},
                ]},
            ),
            snapshot_field("blog_posts", "body", "text"),
            snapshot_field("blog_posts", "category", "integer", special=["m2o"]),
            snapshot_field("blog_posts", "author", "uuid", special=["m2o"]),
            snapshot_field("blog_posts", "comments", "alias", special=["o2m"], interface="list-o2m"),
            snapshot_field("blog_posts", "tags", "alias", special=["m2m"], interface="list-m2m"),
            snapshot_field("blog_posts", "metadata", "json"),
            snapshot_field("blog_posts", "location", "geometry.Point", "point"),
            snapshot_field("categories", "id", "integer", nullable=False),
            snapshot_field("categories", "name", "string", "character varying", nullable=False),
            snapshot_field("comments", "id", "integer", nullable=False),
            snapshot_field("comments", "post", "integer", special=["m2o"]),
            snapshot_field("comments", "text", "text", nullable=False),
            snapshot_field("tags", "id", "integer", nullable=False),
            snapshot_field("tags", "name", "string", "character varying", nullable=False),
            snapshot_field("blog_posts_tags", "id", "integer", nullable=False),
            snapshot_field("blog_posts_tags", "blog_posts_id", "integer"),
            snapshot_field("blog_posts_tags", "tags_id", "integer"),
            snapshot_field("directus_users", "id", "uuid", nullable=False),
            snapshot_field("directus_users", "email", "string", "character varying"),
            snapshot_field("settings", "id", "integer", nullable=False),
            snapshot_field("settings", "site_name", "string", "character varying", nullable=False),
        ],
        "relations": [
            snapshot_relation("blog_posts", "category", "categories"),
            snapshot_relation("blog_posts", "author", "directus_users"),
            snapshot_relation("comments", "post", "blog_posts", one_field="comments"),
            snapshot_relation("blog_posts_tags", "blog_posts_id", "blog_posts", one_field="tags", junction_field="tags_id"),
            snapshot_relation("blog_posts_tags", "tags_id", "tags", junction_field="blog_posts_id"),
        ],
    }


@pytest.fixture
def snapshot_document():
    return build_snapshot_document()


@pytest.fixture
def schema(snapshot_document):
    parsed, _ = parse_snapshot(snapshot_document)
    return parsed


@pytest.fixture
def choices(snapshot_document):
    _, definitions = parse_snapshot(snapshot_document)
    return StaticChoiceSource(definitions)


@pytest.fixture
def config():
    return GeneratorConfig()
