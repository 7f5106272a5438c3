"""Session context: the one object that owns a logging session's state.

Usage::

    from carbonlog import create_session

    session = create_session()
    session.identify({"company": "Acme", ...})
    result = session.save_form({"fuelType": "diesel", ...})
    outcome = await session.entries.submit_all()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from carbonlog.calculator import EmissionsCalculator
from carbonlog.config import Settings
from carbonlog.data.schema_store import SchemaStore
from carbonlog.exceptions import SubmissionInProgressError
from carbonlog.forms.validator import validate, validate_identification
from carbonlog.store.entries import EntryStore
from carbonlog.store.gateway import SimulatedGateway
from carbonlog.store.identification import IdentificationStore
from carbonlog.store.persistence import JsonFileStorage

if TYPE_CHECKING:
    from collections.abc import Mapping

    from carbonlog.models.entry import EmissionsResult, Entry, Identification
    from carbonlog.models.schema import FormSchema, IdentificationSchema
    from carbonlog.store.gateway import SubmissionGateway
    from carbonlog.store.persistence import KeyValueStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormResult:
    """Outcome of saving the entry form.

    ``entry`` is None exactly when ``errors`` is non-empty.
    """

    entry: Entry | None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class IdentifyResult:
    identification: Identification | None
    errors: dict[str, str] = field(default_factory=dict)


class SessionContext:
    """Wires the schemas, calculator and stores of one session together.

    Args:
        form_schema: The loaded equipment entry schema.
        identification_schema: The loaded identification schema.
        storage: Persistence shared by the stores.
        gateway: Submission target for :meth:`EntryStore.submit_all`.
        schema_warnings: Messages from a schema load that fell back to the
            built-in defaults.
        submit_timeout: Optional limit in seconds on a submission.
    """

    def __init__(
        self,
        form_schema: FormSchema,
        identification_schema: IdentificationSchema,
        storage: KeyValueStorage,
        gateway: SubmissionGateway,
        schema_warnings: list[str] | None = None,
        submit_timeout: float | None = None,
    ) -> None:
        self.form_schema = form_schema
        self.identification_schema = identification_schema
        self.schema_warnings = list(schema_warnings or [])
        self.calculator = EmissionsCalculator(form_schema.calculations)
        self.identification = IdentificationStore(storage)
        self.entries = EntryStore(
            storage,
            gateway,
            identification=self.identification.get_current,
            submit_timeout=submit_timeout,
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def identify(self, values: Mapping[str, Any]) -> IdentifyResult:
        """Validate and save the session identification."""
        errors = validate_identification(self.identification_schema, values)
        if errors:
            return IdentifyResult(identification=None, errors=errors)
        try:
            saved = self.identification.save(values)
        except ValidationError as exc:
            return IdentifyResult(
                identification=None,
                errors=_identification_errors(self.identification_schema, exc),
            )
        return IdentifyResult(identification=saved)

    def validate(self, values: Mapping[str, Any]) -> dict[str, str]:
        return validate(self.form_schema, values)

    def calculate(self, values: Mapping[str, Any]) -> EmissionsResult:
        return self.calculator.calculate(values)

    def preview(self, values: Mapping[str, Any]) -> EmissionsResult | None:
        return self.calculator.preview(values)

    def save_form(self, values: Mapping[str, Any]) -> FormResult:
        """Validate the form and, if valid, commit it to the entry store.

        Updates the entry being edited, or adds a new entry when nothing
        (or a duplicate) is being edited.
        """
        errors = self.validate(values)
        if errors:
            return FormResult(entry=None, errors=errors)
        data = {
            name: str(value) for name, value in values.items() if value is not None
        }
        footprint = self.calculate(data)
        return FormResult(entry=self.entries.commit(data, footprint))

    def close(self) -> None:
        """End the session. Saved entries stay persisted for the next one."""
        self.entries.cancel_editing()
        self._closed = True
        logger.info("Session closed")

    def reset(self) -> None:
        """Start over: drop all entries and the current identification.

        Identification history and archived submissions are kept.

        Raises:
            SubmissionInProgressError: If a submission is pending.
        """
        if self.entries.is_submitting:
            msg = "Cannot reset while a submission is in progress"
            raise SubmissionInProgressError(msg)
        self.entries.clear_all()
        self.identification.clear_current()
        self._closed = False
        logger.info("Session reset")


def _identification_errors(
    schema: IdentificationSchema, exc: ValidationError
) -> dict[str, str]:
    """Field errors for an identification the schema let through.

    The schema document may mark fields optional or leave them out, while an
    identification always needs all five.
    """
    labels = {f.name: f.label for f in schema.iter_fields()}
    errors: dict[str, str] = {}
    for error in exc.errors():
        name = str(error["loc"][0]) if error["loc"] else "identification"
        label = labels.get(name, name)
        if error["type"] in ("missing", "string_too_short"):
            message = f"{label} is required"
        else:
            message = f"{label}: {error['msg']}"
        errors.setdefault(name, message)
    return errors


def create_session(
    settings: Settings | None = None,
    *,
    storage: KeyValueStorage | None = None,
    gateway: SubmissionGateway | None = None,
) -> SessionContext:
    """Create a session from settings, loading both schemas.

    This is the recommended way to start a session. Schema problems do not
    fail it; they end up in :attr:`SessionContext.schema_warnings`.
    """
    settings = settings or Settings.from_env()
    schemas = SchemaStore(
        settings.form_schema_path, settings.identification_schema_path
    )
    form_schema = schemas.load_sync()
    identification_schema = schemas.load_identification_schema_sync()
    return SessionContext(
        form_schema=form_schema,
        identification_schema=identification_schema,
        storage=(
            storage if storage is not None else JsonFileStorage(settings.data_dir)
        ),
        gateway=gateway
        or SimulatedGateway(
            success_rate=settings.submit_success_rate,
            delay=settings.submit_delay,
        ),
        schema_warnings=schemas.errors,
        submit_timeout=settings.submit_timeout,
    )
