"""Schema store: loads the form and identification schemas from YAML.

Loading fails soft. Any read, parse or validation problem is logged,
recorded in :attr:`SchemaStore.errors`, and answered with the built-in
default schema so the session can still start.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from carbonlog.data.defaults import (
    DEFAULT_FORM_SCHEMA,
    DEFAULT_IDENTIFICATION_SCHEMA,
)
from carbonlog.exceptions import SchemaLoadError
from carbonlog.models.schema import FormSchema, IdentificationSchema

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent
DEFAULT_FORM_SCHEMA_PATH = DATA_DIR / "form-config.yaml"
DEFAULT_IDENTIFICATION_SCHEMA_PATH = DATA_DIR / "identification-config.yaml"

_M = TypeVar("_M", bound=BaseModel)


def read_schema_document(path: Path, model: type[_M]) -> _M:
    """Read and validate one YAML schema document.

    Raises:
        SchemaLoadError: If the file is unreadable, not valid YAML, not a
            mapping, or does not match ``model``.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read schema document {path}: {exc}"
        raise SchemaLoadError(msg) from exc

    try:
        raw: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise SchemaLoadError(msg) from exc

    if not isinstance(raw, dict):
        msg = f"Schema document {path} must contain a mapping at the top level"
        raise SchemaLoadError(msg)

    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        msg = f"Schema document {path} does not match {model.__name__}: {exc}"
        raise SchemaLoadError(msg) from exc


class SchemaStore:
    """Supplies the session's form and identification schemas.

    Args:
        form_source: Path to the form schema YAML document.
        identification_source: Path to the identification schema YAML
            document.

    Each schema is loaded at most once; later calls return the cached
    instance.
    """

    def __init__(
        self,
        form_source: Path = DEFAULT_FORM_SCHEMA_PATH,
        identification_source: Path = DEFAULT_IDENTIFICATION_SCHEMA_PATH,
    ) -> None:
        self._form_source = Path(form_source)
        self._identification_source = Path(identification_source)
        self._form_schema: FormSchema | None = None
        self._identification_schema: IdentificationSchema | None = None
        self.errors: list[str] = []

    async def load(self) -> FormSchema:
        if self._form_schema is None:
            schema = await asyncio.to_thread(self._read_form_schema)
            # Another load may have finished while this one was in the thread
            if self._form_schema is None:
                self._form_schema = schema
        return self._form_schema

    async def load_identification_schema(self) -> IdentificationSchema:
        if self._identification_schema is None:
            schema = await asyncio.to_thread(self._read_identification_schema)
            if self._identification_schema is None:
                self._identification_schema = schema
        return self._identification_schema

    def load_sync(self) -> FormSchema:
        """Blocking variant of :meth:`load` for non-async callers."""
        if self._form_schema is None:
            self._form_schema = self._read_form_schema()
        return self._form_schema

    def load_identification_schema_sync(self) -> IdentificationSchema:
        """Blocking variant of :meth:`load_identification_schema`."""
        if self._identification_schema is None:
            self._identification_schema = self._read_identification_schema()
        return self._identification_schema

    @property
    def used_fallback(self) -> bool:
        return bool(self.errors)

    def _read_form_schema(self) -> FormSchema:
        try:
            schema = read_schema_document(self._form_source, FormSchema)
        except SchemaLoadError as exc:
            self._record_error(exc)
            return DEFAULT_FORM_SCHEMA
        logger.info("Loaded form schema from %s", self._form_source)
        return schema

    def _read_identification_schema(self) -> IdentificationSchema:
        try:
            schema = read_schema_document(
                self._identification_source, IdentificationSchema
            )
        except SchemaLoadError as exc:
            self._record_error(exc)
            return DEFAULT_IDENTIFICATION_SCHEMA
        logger.info(
            "Loaded identification schema from %s", self._identification_source
        )
        return schema

    def _record_error(self, exc: SchemaLoadError) -> None:
        logger.warning("%s; using built-in default schema", exc)
        self.errors.append(str(exc))
