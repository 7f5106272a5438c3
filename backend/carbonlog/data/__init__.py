"""Schema documents and built-in fallback schemas."""

from carbonlog.data.defaults import (
    DEFAULT_FORM_SCHEMA,
    DEFAULT_IDENTIFICATION_SCHEMA,
)
from carbonlog.data.schema_store import SchemaStore

__all__ = [
    "DEFAULT_FORM_SCHEMA",
    "DEFAULT_IDENTIFICATION_SCHEMA",
    "SchemaStore",
]
