"""Custom exception hierarchy for carbonlog."""

from __future__ import annotations


class CarbonLogError(Exception):
    """Base exception for all carbonlog errors."""


class SchemaLoadError(CarbonLogError):
    """Raised when a schema document cannot be read or decoded."""


class EntryNotFoundError(CarbonLogError):
    """Raised when an entry id does not match any logged entry."""

    def __init__(self, entry_id: int | None) -> None:
        super().__init__(f"No entry with id {entry_id}")
        self.entry_id = entry_id


class SubmissionError(CarbonLogError):
    """Raised when the remote submission of the entry batch fails."""


class SubmissionInProgressError(CarbonLogError):
    """Raised when a submission is started while another is still pending."""
