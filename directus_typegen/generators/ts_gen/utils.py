"""Naming helpers: collection identifiers to TypeScript names."""
import json
import re
from typing import Dict, List, Tuple

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
UNSAFE_CHARS_RE = re.compile(r"[^0-9A-Za-z_]+")

UNCOUNTABLE = {
    "data", "metadata", "media", "news", "series", "species", "information",
    "equipment", "feedback", "software", "sheep", "fish", "deer", "rice",
    "money", "music",
}

IRREGULAR: Dict[str, str] = {
    "people": "person",
    "men": "man",
    "women": "woman",
    "children": "child",
    "teeth": "tooth",
    "feet": "foot",
    "geese": "goose",
    "mice": "mouse",
    "oxen": "ox",
    "criteria": "criterion",
    "phenomena": "phenomenon",
    "indices": "index",
    "appendices": "appendix",
    "matrices": "matrix",
    "vertices": "vertex",
    "movies": "movie",
    "cookies": "cookie",
    "zombies": "zombie",
    "caches": "cache",
    "niches": "niche",
    "shoes": "shoe",
    "quizzes": "quiz",
    "buses": "bus",
    "lives": "life",
    "wives": "wife",
    "knives": "knife",
    "valves": "valve",
    "menus": "menu",
    "gurus": "guru",
}

# Ordered (pattern, replacement) rules; the first match wins
SINGULAR_RULES: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"(ss|us|is|alias|atlas|canvas|gas)$"), r"\1"),
    (re.compile(r"(analy|diagno|parenthe|progno|synop|the|cri)ses$"), r"\1sis"),
    (re.compile(r"([^aeiouy]|qu)ies$"), r"\1y"),
    (re.compile(r"(ar|(?:wo|[ae])l|[eo][ao])ves$"), r"\1f"),
    (re.compile(r"(x|ch|sh|ss|zz)es$"), r"\1"),
    (re.compile(r"([^aou]us|alias|atlas|canvas|gas)es$"), r"\1"),
    (re.compile(r"s$"), ""),
]


def singularize(word: str) -> str:
    """Singularize one lower-case English word."""
    lowered = word.lower()
    if not lowered or lowered in UNCOUNTABLE:
        return lowered
    if lowered in IRREGULAR:
        return IRREGULAR[lowered]
    for pattern, replacement in SINGULAR_RULES:
        if pattern.search(lowered):
            return pattern.sub(replacement, lowered, count=1)
    return lowered


def singularize_identifier(identifier: str) -> str:
    """Singularize the last `_` segment of a snake_case identifier."""
    parts = UNSAFE_CHARS_RE.sub("_", identifier).split("_")
    for index in range(len(parts) - 1, -1, -1):
        if parts[index]:
            parts[index] = singularize(parts[index])
            break
    return "_".join(parts)


def upper_camel_case(value: str) -> str:
    """Convert snake_case to UpperCamelCase, skipping empty segments."""
    parts = [part for part in UNSAFE_CHARS_RE.sub("_", value).split("_") if part]
    name = "".join(part[:1].upper() + part[1:].lower() for part in parts)
    if not name:
        return "_"
    if name[0].isdigit():
        return "_" + name
    return name


def class_name(collection_id: str) -> str:
    """Interface name for a collection: `blog_posts` -> `BlogPost`."""
    return upper_camel_case(singularize_identifier(collection_id))


def property_name(name: str) -> str:
    """Property key, quoted when it is not a valid TypeScript identifier."""
    if IDENTIFIER_RE.match(name):
        return name
    return json.dumps(name)


def string_literal(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    escaped = escaped.replace("\n", "\\n").replace("\r", "\\r")
    return f"'{escaped}'"
