"""Tests for IdentificationStore history and suggestions."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from carbonlog.models.entry import Identification
from carbonlog.store.identification import IdentificationStore
from carbonlog.store.persistence import (
    CURRENT_IDENTIFICATION_KEY,
    IDENTIFICATION_HISTORY_KEY,
    MemoryStorage,
)


def _ident(
    company: str = "Acme",
    reporter: str = "Ann",
    project: str = "Bridge",
    month: str = "03",
    year: str = "2025",
) -> dict[str, str]:
    return {
        "company": company,
        "reporter": reporter,
        "project": project,
        "reportingMonth": month,
        "reportingYear": year,
    }


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2025, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


def _make_store(storage: MemoryStorage | None = None, **kwargs: object) -> IdentificationStore:
    return IdentificationStore(
        storage if storage is not None else MemoryStorage(),
        clock=_Clock(),
        **kwargs,  # type: ignore[arg-type]
    )


# ---------------------------------------------------------------------------
# save
# ---------------------------------------------------------------------------


class TestSave:
    def test_sets_current(self) -> None:
        store = _make_store()
        saved = store.save(_ident())
        assert saved.company == "Acme"
        assert store.get_current() == saved

    def test_accepts_model(self) -> None:
        store = _make_store()
        model = Identification.model_validate(_ident())
        assert store.save(model) == model

    def test_strips_whitespace(self) -> None:
        saved = _make_store().save(_ident(company="  Acme  "))
        assert saved.company == "Acme"

    def test_missing_field_rejected(self) -> None:
        store = _make_store()
        values = _ident()
        del values["reporter"]
        with pytest.raises(ValidationError):
            store.save(values)
        assert store.get_current() is None
        assert store.history == []

    def test_persists_current_and_history(self) -> None:
        storage = MemoryStorage()
        _make_store(storage).save(_ident())
        assert storage.get(CURRENT_IDENTIFICATION_KEY)["reportingMonth"] == "03"
        history = storage.get(IDENTIFICATION_HISTORY_KEY)
        assert len(history) == 1
        assert "lastUsed" in history[0]


class TestHistory:
    def test_same_key_moves_to_front_without_duplicating(self) -> None:
        store = _make_store()
        store.save(_ident(company="A"))
        store.save(_ident(company="B"))
        store.save(_ident(company="A", month="04"))

        history = store.history
        assert [r.company for r in history] == ["A", "B"]
        assert history[0].reporting_month == "04"

    def test_refresh_updates_last_used(self) -> None:
        store = _make_store()
        store.save(_ident())
        first_used = store.history[0].last_used
        store.save(_ident())
        assert store.history[0].last_used > first_used

    def test_different_reporter_is_new_record(self) -> None:
        store = _make_store()
        store.save(_ident(reporter="Ann"))
        store.save(_ident(reporter="Bob"))
        assert len(store.history) == 2

    def test_capped_at_ten(self) -> None:
        store = _make_store()
        for i in range(12):
            store.save(_ident(company=f"C{i}"))
        history = store.history
        assert len(history) == 10
        assert history[0].company == "C11"
        assert history[-1].company == "C2"

    def test_custom_limit(self) -> None:
        store = _make_store(history_limit=2)
        for name in ("A", "B", "C"):
            store.save(_ident(company=name))
        assert [r.company for r in store.history] == ["C", "B"]

    def test_reloads_from_storage(self) -> None:
        storage = MemoryStorage()
        _make_store(storage).save(_ident(company="Kept"))
        reloaded = _make_store(storage)
        current = reloaded.get_current()
        assert current is not None
        assert current.company == "Kept"
        assert reloaded.history[0].company == "Kept"

    def test_corrupt_storage_ignored(self) -> None:
        storage = MemoryStorage()
        storage.set(CURRENT_IDENTIFICATION_KEY, {"company": ""})
        storage.set(IDENTIFICATION_HISTORY_KEY, "garbage")
        store = _make_store(storage)
        assert store.get_current() is None
        assert store.history == []

    def test_clear_current_keeps_history(self) -> None:
        storage = MemoryStorage()
        store = _make_store(storage)
        store.save(_ident())
        store.clear_current()
        assert store.get_current() is None
        assert CURRENT_IDENTIFICATION_KEY not in storage
        assert len(store.history) == 1


class TestUniqueValues:
    def test_sorted_and_distinct(self) -> None:
        store = _make_store()
        store.save(_ident(company="Zeta", reporter="Ann"))
        store.save(_ident(company="Alpha", reporter="Bob"))
        store.save(_ident(company="Zeta", reporter="Cid"))
        assert store.unique_values("company") == ["Alpha", "Zeta"]

    def test_accepts_schema_name(self) -> None:
        store = _make_store()
        store.save(_ident(month="11"))
        store.save(_ident(reporter="Bob", month="02"))
        assert store.unique_values("reportingMonth") == ["02", "11"]
        assert store.unique_values("reporting_month") == ["02", "11"]

    def test_unknown_field(self) -> None:
        store = _make_store()
        store.save(_ident())
        assert store.unique_values("nope") == []

    def test_empty_history(self) -> None:
        assert _make_store().unique_values("company") == []
