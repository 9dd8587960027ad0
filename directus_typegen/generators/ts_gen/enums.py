"""Render fields with a fixed set of choices as literal unions."""
import json
from typing import Any, Optional

from directus_typegen.generators.ts_gen.utils import string_literal
from directus_typegen.schema.models import FieldDefinition


def choice_literal(value: Any) -> str:
    if isinstance(value, str):
        return string_literal(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return json.dumps(value)
    return string_literal(json.dumps(value))


def resolve_enum(definition: Optional[FieldDefinition]) -> Optional[str]:
    """
    `'draft' | 'published'` for a field with choices, `('a' | 'b')[]` when
    the interface allows several, None when there are no choices.
    """
    if definition is None or not definition.choices:
        return None
    union = " | ".join(choice_literal(choice.value) for choice in definition.choices)
    if definition.is_multiple:
        return f"({union})[]"
    return union
