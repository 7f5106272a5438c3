"""Entry store: the logged entries of the active session.

Each operation computes the next :class:`~carbonlog.store.state.SessionState`
with a pure transition, swaps it in, and only then writes the entry list to
storage. A failed write therefore never leaves the in-memory list half
updated, and a failed submission never touches it at all.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from carbonlog.calculator import total_emissions
from carbonlog.exceptions import SubmissionError, SubmissionInProgressError
from carbonlog.formatting import format_emissions
from carbonlog.models.entry import (
    Entry,
    SessionSummary,
    SubmissionRecord,
    SubmitOutcome,
    utc_now,
)
from carbonlog.store import state as transitions
from carbonlog.store.persistence import ENTRIES_KEY, SUBMITTED_HISTORY_KEY
from carbonlog.store.state import SessionState

if TYPE_CHECKING:
    from carbonlog.models.entry import (
        EditingSession,
        EmissionsResult,
        Identification,
    )
    from carbonlog.store.gateway import SubmissionGateway
    from carbonlog.store.persistence import KeyValueStorage

logger = logging.getLogger(__name__)

NOTHING_TO_SUBMIT = "No entries to submit"
SUBMISSION_FAILED = "Submission failed. Please try again later."

_ENTRIES_ADAPTER = TypeAdapter(list[Entry])
_SUBMISSIONS_ADAPTER = TypeAdapter(list[SubmissionRecord])


def _millis() -> int:
    return time.time_ns() // 1_000_000


class EntryStore:
    """Owns the ordered entry list and the single editing session.

    Args:
        storage: Persistence for the entry list and submission history.
        gateway: Where :meth:`submit_all` sends the batch.
        identification: Returns the identification to snapshot onto new
            entries and submissions.
        clock: Source of entry timestamps.
        id_source: Source of time-derived ids in milliseconds. Ids are
            bumped past the largest id seen so they stay unique and
            increasing even when the clock stalls.
        submit_timeout: Optional limit in seconds on a gateway call.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        gateway: SubmissionGateway,
        identification: Callable[[], Identification | None] = lambda: None,
        clock: Callable[[], datetime] = utc_now,
        id_source: Callable[[], int] = _millis,
        submit_timeout: float | None = None,
    ) -> None:
        self._storage = storage
        self._gateway = gateway
        self._identification = identification
        self._clock = clock
        self._id_source = id_source
        self._submit_timeout = submit_timeout
        self._state = SessionState(entries=tuple(self._load_entries()))
        self._last_id = max(
            (e.id for e in self._state.entries if e.id is not None), default=0
        )
        self._is_submitting = False

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def entries(self) -> list[Entry]:
        return [entry.model_copy(deep=True) for entry in self._state.entries]

    @property
    def editing(self) -> EditingSession | None:
        session = transitions.active_editing(self._state)
        return session.model_copy(deep=True) if session is not None else None

    @property
    def is_submitting(self) -> bool:
        return self._is_submitting

    @property
    def state(self) -> SessionState:
        return self._state

    def get(self, entry_id: int) -> Entry:
        """Return a copy of one entry.

        Raises:
            EntryNotFoundError: If no entry has ``entry_id``.
        """
        return self._state.require(entry_id).model_copy(deep=True)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            identification=self._identification(),
            entry_count=len(self._state.entries),
            total_emissions=total_emissions(self._state.entries),
        )

    def submission_history(self) -> list[SubmissionRecord]:
        """Archived submissions, most recent first."""
        raw = self._storage.get(SUBMITTED_HISTORY_KEY)
        if raw is None:
            return []
        try:
            return _SUBMISSIONS_ADAPTER.validate_python(raw)
        except ValidationError:
            logger.warning("Ignoring corrupt submission history", exc_info=True)
            return []

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(
        self, data: Mapping[str, str], footprint: EmissionsResult | None
    ) -> Entry:
        """Log a new entry at the end of the list.

        Raises:
            SubmissionInProgressError: If a submission is pending.
        """
        self._ensure_idle()
        entry = Entry(
            id=self._next_id(),
            timestamp=self._clock(),
            data=dict(data),
            carbon_footprint=footprint,
            identification=self._identification(),
        )
        self._apply(transitions.add_entry(self._state, entry))
        logger.info("Added entry %s", entry.id)
        return entry.model_copy(deep=True)

    def update(
        self,
        entry_id: int,
        data: Mapping[str, str],
        footprint: EmissionsResult | None,
    ) -> Entry:
        """Replace an entry's data and footprint and close the editing session.

        Raises:
            EntryNotFoundError: If no entry has ``entry_id``.
            SubmissionInProgressError: If a submission is pending.
        """
        self._ensure_idle()
        new_state, updated = transitions.update_entry(
            self._state, entry_id, data, footprint, self._clock()
        )
        self._apply(new_state)
        logger.info("Updated entry %s", entry_id)
        return updated.model_copy(deep=True)

    def delete(self, entry_id: int) -> None:
        """Remove an entry.

        Raises:
            EntryNotFoundError: If no entry has ``entry_id``.
            SubmissionInProgressError: If a submission is pending.
        """
        self._ensure_idle()
        self._apply(transitions.delete_entry(self._state, entry_id))
        logger.info("Deleted entry %s", entry_id)

    def start_editing(self, entry_id: int) -> EditingSession:
        self._state = transitions.start_editing(self._state, entry_id)
        return self._require_editing()

    def duplicate(self, entry_id: int) -> EditingSession:
        self._state = transitions.duplicate_entry(self._state, entry_id)
        return self._require_editing()

    def cancel_editing(self) -> None:
        self._state = transitions.cancel_editing(self._state)

    def commit(
        self, data: Mapping[str, str], footprint: EmissionsResult | None
    ) -> Entry:
        """Save the form: update the entry being edited, otherwise add one.

        A duplicate session or an editing session whose entry was deleted
        produces a new entry.
        """
        session = transitions.active_editing(self._state)
        if session is not None and session.entry.id is not None:
            return self.update(session.entry.id, data, footprint)
        entry = self.add(data, footprint)
        self.cancel_editing()
        return entry

    def clear_all(self) -> None:
        self._ensure_idle()
        count = len(self._state.entries)
        self._apply(transitions.clear_all(self._state))
        logger.info("Cleared %d entries", count)

    async def submit_all(self) -> SubmitOutcome:
        """Send every entry to the gateway as one submission.

        On success the submission is archived and the entry list cleared.
        On failure the entries are kept so the caller can retry.

        Raises:
            SubmissionInProgressError: If another submission is pending.
        """
        if self._is_submitting:
            msg = "A submission is already in progress"
            raise SubmissionInProgressError(msg)
        if not self._state.entries:
            return SubmitOutcome(success=False, message=NOTHING_TO_SUBMIT)

        self._is_submitting = True
        try:
            record = self._build_submission()
            try:
                await self._send(record)
            except (SubmissionError, TimeoutError):
                logger.exception("Submission of %d entries failed", record.entry_count)
                return SubmitOutcome(success=False, message=SUBMISSION_FAILED)
            self._archive(record)
        finally:
            self._is_submitting = False

        logger.info(
            "Submitted %d entries, %.2f kg CO2",
            record.entry_count,
            record.total_emissions,
        )
        return SubmitOutcome(
            success=True,
            message=(
                f"Successfully submitted {record.entry_count} entries with "
                f"total emissions of {format_emissions(record.total_emissions)}!"
            ),
            record=record,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _send(self, record: SubmissionRecord) -> None:
        if self._submit_timeout is None:
            await self._gateway.submit(record)
        else:
            await asyncio.wait_for(
                self._gateway.submit(record), timeout=self._submit_timeout
            )

    def _build_submission(self) -> SubmissionRecord:
        entries = [entry.model_copy(deep=True) for entry in self._state.entries]
        return SubmissionRecord(
            id=self._next_id(),
            timestamp=self._clock(),
            identification=self._identification(),
            entries=entries,
            total_emissions=total_emissions(entries),
            entry_count=len(entries),
        )

    def _archive(self, record: SubmissionRecord) -> None:
        # The cleared entry list reaches storage before the archive does
        history = [record, *self.submission_history()]
        self._state = transitions.clear_all(self._state)
        self._persist_entries()
        try:
            self._storage.set(
                SUBMITTED_HISTORY_KEY,
                _SUBMISSIONS_ADAPTER.dump_python(history, mode="json", by_alias=True),
            )
        except OSError:
            logger.exception(
                "Submission %s was accepted but could not be archived", record.id
            )

    def _apply(self, new_state: SessionState) -> None:
        self._state = new_state
        self._persist_entries()

    def _persist_entries(self) -> None:
        self._storage.set(
            ENTRIES_KEY,
            _ENTRIES_ADAPTER.dump_python(
                list(self._state.entries), mode="json", by_alias=True
            ),
        )

    def _load_entries(self) -> list[Entry]:
        raw = self._storage.get(ENTRIES_KEY)
        if raw is None:
            return []
        try:
            return _ENTRIES_ADAPTER.validate_python(raw)
        except ValidationError:
            logger.warning("Ignoring corrupt saved entries", exc_info=True)
            return []

    def _next_id(self) -> int:
        self._last_id = max(self._id_source(), self._last_id + 1)
        return self._last_id

    def _ensure_idle(self) -> None:
        if self._is_submitting:
            msg = "Entries cannot change while a submission is in progress"
            raise SubmissionInProgressError(msg)

    def _require_editing(self) -> EditingSession:
        session = self.editing
        if session is None:
            msg = "Editing session was not opened"
            raise RuntimeError(msg)
        return session
