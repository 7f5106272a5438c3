"""Runtime settings read from the environment.

A ``.env`` file in the working directory is loaded first, so local
overrides do not need to be exported.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from carbonlog.data.schema_store import (
    DEFAULT_FORM_SCHEMA_PATH,
    DEFAULT_IDENTIFICATION_SCHEMA_PATH,
)
from carbonlog.store.gateway import DEFAULT_DELAY_SECONDS, DEFAULT_SUCCESS_RATE

DEFAULT_DATA_DIR = Path(".carbonlog")
DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        msg = f"{name} must be a number, got {raw!r}"
        raise ValueError(msg) from exc


@dataclass(frozen=True)
class Settings:
    """Where state lives, which schemas to load, and how submission behaves."""

    data_dir: Path = DEFAULT_DATA_DIR
    form_schema_path: Path = DEFAULT_FORM_SCHEMA_PATH
    identification_schema_path: Path = DEFAULT_IDENTIFICATION_SCHEMA_PATH
    submit_delay: float = DEFAULT_DELAY_SECONDS
    submit_success_rate: float = DEFAULT_SUCCESS_RATE
    submit_timeout: float | None = None
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)

    @classmethod
    def from_env(cls, *, load_env_file: bool = True) -> Settings:
        if load_env_file:
            load_dotenv(Path.cwd() / ".env")

        timeout_raw = os.environ.get("CARBONLOG_SUBMIT_TIMEOUT", "").strip()
        origins_raw = os.environ.get("CARBONLOG_CORS_ORIGINS", "")
        origins = tuple(o.strip() for o in origins_raw.split(",") if o.strip())

        return cls(
            data_dir=Path(os.environ.get("CARBONLOG_DATA_DIR") or DEFAULT_DATA_DIR),
            form_schema_path=Path(
                os.environ.get("CARBONLOG_FORM_SCHEMA") or DEFAULT_FORM_SCHEMA_PATH
            ),
            identification_schema_path=Path(
                os.environ.get("CARBONLOG_IDENTIFICATION_SCHEMA")
                or DEFAULT_IDENTIFICATION_SCHEMA_PATH
            ),
            submit_delay=_float_env("CARBONLOG_SUBMIT_DELAY", DEFAULT_DELAY_SECONDS),
            submit_success_rate=_float_env(
                "CARBONLOG_SUBMIT_SUCCESS_RATE", DEFAULT_SUCCESS_RATE
            ),
            submit_timeout=(
                _float_env("CARBONLOG_SUBMIT_TIMEOUT", 0.0) if timeout_raw else None
            ),
            cors_origins=origins or DEFAULT_CORS_ORIGINS,
        )
