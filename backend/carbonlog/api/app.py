"""FastAPI application: create_app factory with /api endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from carbonlog.config import Settings
from carbonlog.exceptions import EntryNotFoundError, SubmissionInProgressError
from carbonlog.formatting import (
    format_consumption,
    format_emissions,
    format_entry_label,
    format_period,
)
from carbonlog.store.entries import NOTHING_TO_SUBMIT

if TYPE_CHECKING:
    from carbonlog.session import SessionContext

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


def _dump(model: Any) -> Any:
    if model is None:
        return None
    return model.model_dump(mode="json", by_alias=True)


def create_app(
    *,
    session: SessionContext | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    session
        Optional pre-built session for dependency injection (e.g. tests).
        If not provided, one is created from ``settings`` on first request.
    settings
        Settings for the lazily created session and for CORS. Read from the
        environment when omitted.
    """
    settings = settings or Settings.from_env()
    app = FastAPI(title="carbonlog", version=API_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state so tests can inject a session
    app.state.session = session

    def _get_session() -> SessionContext:
        current: SessionContext | None = app.state.session
        if current is not None:
            return current
        from carbonlog.session import create_session

        current = create_session(settings)
        app.state.session = current
        if current.schema_warnings:
            logger.warning(
                "Session started with fallback schema: %s", current.schema_warnings
            )
        return current

    def _not_found(exc: EntryNotFoundError) -> HTTPException:
        return HTTPException(status_code=404, detail=str(exc))

    def _busy(exc: SubmissionInProgressError) -> HTTPException:
        return HTTPException(status_code=409, detail=str(exc))

    # ------------------------------------------------------------------
    # GET /api/health
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": API_VERSION}

    # ------------------------------------------------------------------
    # Schemas
    # ------------------------------------------------------------------

    @app.get("/api/schema")
    def form_schema() -> dict[str, Any]:
        s = _get_session()
        return {
            "schema": _dump(s.form_schema),
            "warnings": s.schema_warnings,
        }

    @app.get("/api/identification-schema")
    def identification_schema() -> dict[str, Any]:
        s = _get_session()
        return {
            "schema": _dump(s.identification_schema),
            "warnings": s.schema_warnings,
        }

    # ------------------------------------------------------------------
    # Live feedback: validation and emissions preview
    # ------------------------------------------------------------------

    @app.post("/api/validate")
    def validate(values: dict[str, Any] = Body(...)) -> dict[str, Any]:
        errors = _get_session().validate(values)
        return {"valid": not errors, "errors": errors}

    @app.post("/api/calculate")
    def calculate(
        values: dict[str, Any] = Body(...), preview: bool = False
    ) -> dict[str, Any] | None:
        s = _get_session()
        result = s.preview(values) if preview else s.calculate(values)
        return _dump(result)

    # ------------------------------------------------------------------
    # Identification
    # ------------------------------------------------------------------

    @app.get("/api/identification")
    def get_identification() -> dict[str, Any] | None:
        return _dump(_get_session().identification.get_current())

    @app.put("/api/identification")
    def put_identification(values: dict[str, Any] = Body(...)) -> dict[str, Any]:
        result = _get_session().identify(values)
        if result.errors:
            raise HTTPException(status_code=422, detail={"errors": result.errors})
        return _dump(result.identification)

    @app.get("/api/identification/suggestions/{field_name}")
    def identification_suggestions(field_name: str) -> list[str]:
        s = _get_session()
        field = next(
            (f for f in s.identification_schema.iter_fields() if f.name == field_name),
            None,
        )
        if field is None:
            raise HTTPException(
                status_code=404, detail=f"Unknown field '{field_name}'"
            )
        if not field.save_previous:
            return []
        return s.identification.unique_values(field_name)

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    @app.get("/api/entries")
    def list_entries() -> list[dict[str, Any]]:
        listed = []
        for entry in _get_session().entries.entries:
            payload = _dump(entry)
            payload["label"] = format_entry_label(entry)
            payload["consumptionFormatted"] = format_consumption(entry)
            listed.append(payload)
        return listed

    @app.post("/api/entries", status_code=201)
    def save_entry(values: dict[str, Any] = Body(...)) -> dict[str, Any]:
        try:
            result = _get_session().save_form(values)
        except SubmissionInProgressError as exc:
            raise _busy(exc) from exc
        if not result.ok:
            raise HTTPException(status_code=422, detail={"errors": result.errors})
        return _dump(result.entry)

    @app.get("/api/entries/{entry_id}")
    def get_entry(entry_id: int) -> dict[str, Any]:
        try:
            return _dump(_get_session().entries.get(entry_id))
        except EntryNotFoundError as exc:
            raise _not_found(exc) from exc

    @app.put("/api/entries/{entry_id}")
    def update_entry(
        entry_id: int, values: dict[str, Any] = Body(...)
    ) -> dict[str, Any]:
        s = _get_session()
        errors = s.validate(values)
        if errors:
            raise HTTPException(status_code=422, detail={"errors": errors})
        data = {k: str(v) for k, v in values.items() if v is not None}
        try:
            entry = s.entries.update(entry_id, data, s.calculate(data))
        except EntryNotFoundError as exc:
            raise _not_found(exc) from exc
        except SubmissionInProgressError as exc:
            raise _busy(exc) from exc
        return _dump(entry)

    @app.delete("/api/entries/{entry_id}", status_code=204)
    def delete_entry(entry_id: int) -> None:
        try:
            _get_session().entries.delete(entry_id)
        except EntryNotFoundError as exc:
            raise _not_found(exc) from exc
        except SubmissionInProgressError as exc:
            raise _busy(exc) from exc

    @app.delete("/api/entries", status_code=204)
    def clear_entries() -> None:
        try:
            _get_session().entries.clear_all()
        except SubmissionInProgressError as exc:
            raise _busy(exc) from exc

    # ------------------------------------------------------------------
    # Editing session
    # ------------------------------------------------------------------

    @app.post("/api/entries/{entry_id}/edit")
    def start_editing(entry_id: int) -> dict[str, Any] | None:
        try:
            return _dump(_get_session().entries.start_editing(entry_id))
        except EntryNotFoundError as exc:
            raise _not_found(exc) from exc

    @app.post("/api/entries/{entry_id}/duplicate")
    def duplicate_entry(entry_id: int) -> dict[str, Any] | None:
        try:
            return _dump(_get_session().entries.duplicate(entry_id))
        except EntryNotFoundError as exc:
            raise _not_found(exc) from exc

    @app.get("/api/editing")
    def get_editing() -> dict[str, Any] | None:
        return _dump(_get_session().entries.editing)

    @app.delete("/api/editing", status_code=204)
    def cancel_editing() -> None:
        _get_session().entries.cancel_editing()

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    @app.post("/api/entries/submit")
    async def submit_entries() -> dict[str, Any]:
        s = _get_session()
        try:
            outcome = await s.entries.submit_all()
        except SubmissionInProgressError as exc:
            raise _busy(exc) from exc
        if not outcome.success:
            status = 400 if outcome.message == NOTHING_TO_SUBMIT else 502
            raise HTTPException(status_code=status, detail=outcome.message)
        return _dump(outcome)

    @app.get("/api/submissions")
    def submissions() -> list[dict[str, Any]]:
        return [_dump(r) for r in _get_session().entries.submission_history()]

    @app.get("/api/summary")
    def summary() -> dict[str, Any]:
        s = _get_session()
        result = s.entries.summary()
        payload = _dump(result)
        payload["totalEmissionsFormatted"] = format_emissions(result.total_emissions)
        payload["isSubmitting"] = s.entries.is_submitting
        payload["reportingPeriod"] = (
            format_period(result.identification)
            if result.identification is not None
            else None
        )
        return payload

    return app
