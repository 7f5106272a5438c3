"""carbonlog: equipment usage logging with CO₂ emissions estimates.

Usage::

    from carbonlog import create_session

    session = create_session()
    errors = session.validate(values)
    preview = session.preview(values)
    result = session.save_form(values)
"""

from carbonlog.calculator import EmissionsCalculator, total_emissions
from carbonlog.config import Settings
from carbonlog.data.schema_store import SchemaStore
from carbonlog.forms.validator import validate, validate_identification
from carbonlog.forms.visibility import is_visible
from carbonlog.models.entry import (
    EditingSession,
    EmissionsResult,
    Entry,
    Identification,
    SubmissionRecord,
    SubmitOutcome,
)
from carbonlog.models.enums import FieldType
from carbonlog.models.schema import (
    CalculationSchema,
    FormField,
    FormSchema,
    IdentificationSchema,
)
from carbonlog.session import SessionContext, create_session
from carbonlog.store.entries import EntryStore
from carbonlog.store.identification import IdentificationStore

__all__ = [
    "CalculationSchema",
    "EditingSession",
    "EmissionsCalculator",
    "EmissionsResult",
    "Entry",
    "EntryStore",
    "FieldType",
    "FormField",
    "FormSchema",
    "Identification",
    "IdentificationSchema",
    "IdentificationStore",
    "SchemaStore",
    "SessionContext",
    "Settings",
    "SubmissionRecord",
    "SubmitOutcome",
    "create_session",
    "is_visible",
    "total_emissions",
    "validate",
    "validate_identification",
]
