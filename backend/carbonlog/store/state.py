"""Pure state transitions for the session's entry set.

Every function takes a :class:`SessionState` and returns a new one; inputs
are never mutated. The :class:`~carbonlog.store.entries.EntryStore` applies
these transitions and persists the result, so the rules here can be tested
without any storage.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import TYPE_CHECKING

from carbonlog.exceptions import EntryNotFoundError
from carbonlog.models.entry import EditingSession, Entry

if TYPE_CHECKING:
    from collections.abc import Mapping

    from carbonlog.models.entry import EmissionsResult


@dataclass(frozen=True)
class SessionState:
    """Logged entries in display order plus the optional editing session."""

    entries: tuple[Entry, ...] = ()
    editing: EditingSession | None = None

    def find(self, entry_id: int | None) -> Entry | None:
        if entry_id is None:
            return None
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def require(self, entry_id: int | None) -> Entry:
        entry = self.find(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry


def add_entry(state: SessionState, entry: Entry) -> SessionState:
    """Append a fully formed entry (id and timestamp already assigned)."""
    if entry.id is None:
        msg = "Cannot add an entry without an id"
        raise ValueError(msg)
    if state.find(entry.id) is not None:
        msg = f"Entry id {entry.id} is already in use"
        raise ValueError(msg)
    return replace(state, entries=(*state.entries, entry.model_copy(deep=True)))


def update_entry(
    state: SessionState,
    entry_id: int,
    data: Mapping[str, str],
    footprint: EmissionsResult | None,
    timestamp: datetime,
) -> tuple[SessionState, Entry]:
    """Replace data and footprint of one entry and close the editing session.

    The entry keeps its id and identification snapshot; its timestamp is
    refreshed.

    Raises:
        EntryNotFoundError: If no entry has ``entry_id``. ``state`` is left
            as it was.
    """
    current = state.require(entry_id)
    updated = current.model_copy(
        update={
            "data": dict(data),
            "carbon_footprint": footprint,
            "timestamp": timestamp,
        },
        deep=True,
    )
    entries = tuple(updated if e.id == entry_id else e for e in state.entries)
    return SessionState(entries=entries, editing=None), updated


def delete_entry(state: SessionState, entry_id: int) -> SessionState:
    """Remove one entry.

    An editing session on the removed entry is left in place;
    :func:`active_editing` reports it as absent.
    """
    state.require(entry_id)
    entries = tuple(e for e in state.entries if e.id != entry_id)
    return replace(state, entries=entries)


def start_editing(state: SessionState, entry_id: int) -> SessionState:
    entry = state.require(entry_id)
    session = EditingSession(entry=entry.model_copy(deep=True), is_duplicate=False)
    return replace(state, editing=session)


def duplicate_entry(state: SessionState, entry_id: int) -> SessionState:
    """Open an editing session on an unsaved copy of an entry.

    The copy has no id, so committing it creates a new entry. The source
    entry is not touched.
    """
    source = state.require(entry_id)
    copy = Entry(
        id=None,
        timestamp=source.timestamp,
        data=dict(source.data),
        carbon_footprint=(
            source.carbon_footprint.model_copy()
            if source.carbon_footprint is not None
            else None
        ),
        identification=(
            source.identification.model_copy()
            if source.identification is not None
            else None
        ),
    )
    return replace(state, editing=EditingSession(entry=copy, is_duplicate=True))


def cancel_editing(state: SessionState) -> SessionState:
    return replace(state, editing=None)


def clear_all(state: SessionState) -> SessionState:
    return SessionState()


def active_editing(state: SessionState) -> EditingSession | None:
    """The editing session, or None if it points at a deleted entry."""
    session = state.editing
    if session is None:
        return None
    if session.is_duplicate:
        return session
    if state.find(session.entry.id) is None:
        return None
    return session
