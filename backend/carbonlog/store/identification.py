"""Identification store: the active identification and its history."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from carbonlog.models.entry import Identification, IdentificationRecord, utc_now
from carbonlog.store.persistence import (
    CURRENT_IDENTIFICATION_KEY,
    IDENTIFICATION_HISTORY_KEY,
)

if TYPE_CHECKING:
    from carbonlog.store.persistence import KeyValueStorage

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10

_HISTORY_ADAPTER = TypeAdapter(list[IdentificationRecord])


class IdentificationStore:
    """Owns the current identification and a bounded, most-recent-first
    history of earlier ones used for input suggestions.

    Args:
        storage: Where the current record and the history are persisted.
        history_limit: Maximum number of history records kept.
        clock: Source of ``lastUsed`` timestamps.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        history_limit: int = HISTORY_LIMIT,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._storage = storage
        self._history_limit = history_limit
        self._clock = clock
        self._current = self._load_current()
        self._history = self._load_history()

    def save(self, data: Identification | Mapping[str, Any]) -> Identification:
        """Make ``data`` the current identification and record it in history.

        A history record with the same company, project and reporter is
        refreshed and moved to the front; otherwise a new record is
        prepended. The history is then cut to ``history_limit``.

        Raises:
            pydantic.ValidationError: If ``data`` is missing a field.
        """
        raw = data.model_dump() if isinstance(data, Identification) else dict(data)
        identification = Identification.model_validate(raw)
        record = IdentificationRecord(
            **identification.model_dump(), last_used=self._clock()
        )
        key = identification.history_key()
        history = [r for r in self._history if r.history_key() != key]
        history.insert(0, record)

        self._current = identification
        self._history = history[: self._history_limit]

        self._storage.set(
            CURRENT_IDENTIFICATION_KEY,
            identification.model_dump(mode="json", by_alias=True),
        )
        self._storage.set(
            IDENTIFICATION_HISTORY_KEY,
            _HISTORY_ADAPTER.dump_python(self._history, mode="json", by_alias=True),
        )
        logger.info(
            "Saved identification for %s / %s (%s)",
            identification.company,
            identification.project,
            identification.reporter,
        )
        return identification.model_copy()

    def get_current(self) -> Identification | None:
        if self._current is None:
            return None
        return self._current.model_copy()

    @property
    def history(self) -> list[IdentificationRecord]:
        return [record.model_copy() for record in self._history]

    def unique_values(self, field_name: str) -> list[str]:
        """Sorted distinct non-blank values of one field across the history.

        ``field_name`` may be the camelCase schema name (``reportingMonth``)
        or the attribute name (``reporting_month``).
        """
        attribute = _attribute_name(field_name)
        if attribute is None:
            return []
        values: set[str] = set()
        for record in self._history:
            value = getattr(record, attribute)
            if isinstance(value, str) and value.strip():
                values.add(value)
        return sorted(values)

    def clear_current(self) -> None:
        """Forget the current identification; the history is kept."""
        self._current = None
        self._storage.delete(CURRENT_IDENTIFICATION_KEY)

    def _load_current(self) -> Identification | None:
        raw = self._storage.get(CURRENT_IDENTIFICATION_KEY)
        if raw is None:
            return None
        try:
            return Identification.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring corrupt current identification", exc_info=True)
            return None

    def _load_history(self) -> list[IdentificationRecord]:
        raw = self._storage.get(IDENTIFICATION_HISTORY_KEY)
        if raw is None:
            return []
        try:
            history = _HISTORY_ADAPTER.validate_python(raw)
        except ValidationError:
            logger.warning("Ignoring corrupt identification history", exc_info=True)
            return []
        return history[: self._history_limit]


def _attribute_name(field_name: str) -> str | None:
    for name, info in IdentificationRecord.model_fields.items():
        if field_name in (name, info.alias):
            return name
    return None
