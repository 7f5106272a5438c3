"""Entry, identification and submission models."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

FormValues = dict[str, str]


def utc_now() -> datetime:
    return datetime.now(UTC)


class RecordModel(BaseModel):
    """Base for camelCase-aliased persisted records."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmissionsResult(RecordModel):
    """Emissions estimate for one entry.

    ``total_emissions`` is the product of the four other values, rounded to
    two decimal places.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    total_emissions: float
    emission_factor: float
    condition_multiplier: float
    base_consumption: float
    operation_hours: float


class Identification(RecordModel):
    """Who is reporting, for which project and period."""

    company: str = Field(min_length=1)
    reporter: str = Field(min_length=1)
    project: str = Field(min_length=1)
    reporting_month: str = Field(min_length=1)
    reporting_year: str = Field(min_length=1)

    @field_validator("*", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            v = str(v)
        if isinstance(v, str):
            return v.strip()
        return v

    def history_key(self) -> tuple[str, str, str]:
        """Identity used to de-duplicate the identification history."""
        return (self.company, self.project, self.reporter)


class IdentificationRecord(Identification):
    """An identification as kept in the history, with its last use."""

    last_used: datetime = Field(default_factory=utc_now)


class Entry(RecordModel):
    """One logged equipment-usage record with its computed emissions.

    ``id`` is ``None`` only for a duplicate that has not been saved yet.
    """

    id: int | None
    timestamp: datetime = Field(default_factory=utc_now)
    data: FormValues = Field(default_factory=dict)
    carbon_footprint: EmissionsResult | None = None
    identification: Identification | None = None


class EditingSession(RecordModel):
    """The entry currently loaded into the form for editing."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    entry: Entry
    is_duplicate: bool = False


class SubmissionRecord(RecordModel):
    """An archived batch of submitted entries."""

    id: int
    timestamp: datetime = Field(default_factory=utc_now)
    identification: Identification | None = None
    entries: list[Entry]
    total_emissions: float
    entry_count: int


class SubmitOutcome(RecordModel):
    """Definite result of a submit-all call."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    success: bool
    message: str
    record: SubmissionRecord | None = None


class SessionSummary(RecordModel):
    """Overview of the current batch before submission."""

    identification: Identification | None = None
    entry_count: int
    total_emissions: float
