"""Session state stores and their persistence."""

from carbonlog.store.entries import EntryStore
from carbonlog.store.gateway import SimulatedGateway, SubmissionGateway
from carbonlog.store.identification import IdentificationStore
from carbonlog.store.persistence import (
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
)
from carbonlog.store.state import SessionState

__all__ = [
    "EntryStore",
    "IdentificationStore",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "SessionState",
    "SimulatedGateway",
    "SubmissionGateway",
]
