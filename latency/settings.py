from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Literal, Mapping, Optional

UnitPolicy = Literal["compat", "table"]
EmptyGroups = Literal["nan", "drop"]

UNIT_POLICIES = ("compat", "table")
EMPTY_GROUP_POLICIES = ("nan", "drop")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_DATA_PATH = Path("data") / "output.csv"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8050

ENV_PREFIX = "LATENCY_"
_TRUE_TOKENS = {"1", "true", "yes", "on", "y", "t"}


@dataclass(frozen=True)
class DashboardSettings:
    data_path: Path = DEFAULT_DATA_PATH
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    debug: bool = False
    unit_policy: UnitPolicy = "compat"
    empty_groups: EmptyGroups = "nan"
    log_level: str = "INFO"


def _as_bool(value: object, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_TOKENS


def _as_choice(value: object, choices: tuple, default: str) -> str:
    s = str(value or "").strip().lower()
    return s if s in choices else default


def normalize_settings(raw: Mapping[str, object]) -> DashboardSettings:
    data_path = raw.get("data_path") or DEFAULT_DATA_PATH
    host = str(raw.get("host") or DEFAULT_HOST).strip() or DEFAULT_HOST

    port = raw.get("port", DEFAULT_PORT)
    try:
        port = int(port)
    except (TypeError, ValueError):
        port = DEFAULT_PORT
    port = max(1, min(65535, port))

    log_level = str(raw.get("log_level") or "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        log_level = "INFO"

    return DashboardSettings(
        data_path=Path(data_path),
        host=host,
        port=port,
        debug=_as_bool(raw.get("debug")),
        unit_policy=_as_choice(raw.get("unit_policy"), UNIT_POLICIES, "compat"),  # type: ignore[arg-type]
        empty_groups=_as_choice(raw.get("empty_groups"), EMPTY_GROUP_POLICIES, "nan"),  # type: ignore[arg-type]
        log_level=log_level,
    )


def load_settings(environ: Optional[Mapping[str, str]] = None, **overrides: object) -> DashboardSettings:
    """Build settings from ``LATENCY_*`` environment variables, then apply non-None overrides."""
    environ = os.environ if environ is None else environ
    raw: dict = {}
    for f in fields(DashboardSettings):
        env_key = ENV_PREFIX + f.name.upper()
        if env_key in environ:
            raw[f.name] = environ[env_key]
    raw.update({k: v for k, v in overrides.items() if v is not None})
    return normalize_settings(raw)
