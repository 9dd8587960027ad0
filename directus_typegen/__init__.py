"""Generate TypeScript declarations from a Directus schema."""

__version__ = "0.1.0"
