"""Directus type tag to TypeScript scalar type."""
from directus_typegen.core.errors import UnsupportedFieldTypeError
from directus_typegen.schema.models import Field

# Dates travel as ISO strings over the wire, never as Date objects
SCALAR_TYPE_MAP = {
    "boolean": "boolean",
    "integer": "number",
    "float": "number",
    "decimal": "number",
    "bigInteger": "number",
    "date": "string",
    "dateTime": "string",
    "time": "string",
    "timestamp": "string",
    "text": "string",
    "string": "string",
    "uuid": "string",
    "hash": "string",
    "csv": "string[]",
}


def scalar_type(type_tag: str, json_type: str = "any") -> str:
    """
    Map a primitive type tag to a TypeScript type.

    alias, binary, geometry variants, unknown and unrecognized tags have no
    mapping and raise ValueError.
    """
    if type_tag == "json":
        return json_type
    try:
        return SCALAR_TYPE_MAP[type_tag]
    except KeyError:
        raise ValueError(f"unsupported type '{type_tag}'") from None


def field_scalar_type(field: Field, json_type: str = "any") -> str:
    """Scalar type of a field; unsupported tags are reported, never defaulted."""
    try:
        return scalar_type(field.type, json_type)
    except ValueError:
        raise UnsupportedFieldTypeError(field.collection, field.field, field.type) from None
