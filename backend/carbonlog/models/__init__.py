"""Domain models for carbonlog."""

from carbonlog.models.entry import (
    EditingSession,
    EmissionsResult,
    Entry,
    FormValues,
    Identification,
    IdentificationRecord,
    SessionSummary,
    SubmissionRecord,
    SubmitOutcome,
)
from carbonlog.models.enums import FieldType
from carbonlog.models.schema import (
    CalculationSchema,
    ConditionalShow,
    FormField,
    FormSchema,
    IdentificationSchema,
    Section,
    SelectOption,
)

__all__ = [
    "CalculationSchema",
    "ConditionalShow",
    "EditingSession",
    "EmissionsResult",
    "Entry",
    "FieldType",
    "FormField",
    "FormSchema",
    "FormValues",
    "Identification",
    "IdentificationRecord",
    "IdentificationSchema",
    "Section",
    "SelectOption",
    "SessionSummary",
    "SubmissionRecord",
    "SubmitOutcome",
]
