"""Tests for the Directus type tag to TypeScript scalar mapping."""
import pytest

from directus_typegen.core.errors import UnsupportedFieldTypeError
from directus_typegen.generators.ts_gen.scalars import field_scalar_type, scalar_type
from directus_typegen.schema.models import Field


@pytest.mark.parametrize("type_tag, expected", [
    ("boolean", "boolean"),
    ("integer", "number"),
    ("float", "number"),
    ("decimal", "number"),
    ("bigInteger", "number"),
    ("date", "string"),
    ("dateTime", "string"),
    ("time", "string"),
    ("timestamp", "string"),
    ("text", "string"),
    ("string", "string"),
    ("uuid", "string"),
    ("hash", "string"),
    ("json", "any"),
    ("csv", "string[]"),
])
def test_supported_types(type_tag, expected):
    assert scalar_type(type_tag) == expected


def test_json_type_is_configurable():
    assert scalar_type("json", json_type="unknown") == "unknown"


@pytest.mark.parametrize("type_tag", [
    "alias",
    "binary",
    "geometry",
    "geometry.Point",
    "geometry.LineString",
    "geometry.Polygon",
    "geometry.MultiPoint",
    "geometry.MultiLineString",
    "geometry.MultiPolygon",
    "unknown",
    "somethingNew",
])
def test_unsupported_types_raise(type_tag):
    with pytest.raises(ValueError):
        scalar_type(type_tag)


def test_field_scalar_type_reports_the_field():
    field = Field(collection="maps", field="area", type="geometry.Polygon")
    with pytest.raises(UnsupportedFieldTypeError) as exc_info:
        field_scalar_type(field)
    assert exc_info.value.collection == "maps"
    assert exc_info.value.field == "area"
    assert "geometry.Polygon" in str(exc_info.value)
