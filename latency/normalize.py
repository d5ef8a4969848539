"""Mixed-unit duration strings -> milliseconds.

Two unit policies are supported:

``compat``
    The historical rule: a unit of exactly ``"s"`` is multiplied by 1000 and
    every other unit (``"ms"``, anything unrecognized, or no unit at all) is
    taken to already be in milliseconds. Durations written as ``12.3µs`` or
    ``850ns`` are mis-converted under this rule (``µ`` is not matched by the
    unit pattern, so ``12.3µs`` reads as ``12.3 s``). This is the default so
    existing dashboards keep their numbers.

``table``
    Looks the unit up in :data:`UNIT_TO_MILLIS`. Unknown or missing units
    produce a missing value instead of a guess.
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

import pandas as pd

from latency.settings import UNIT_POLICIES, UnitPolicy

# one or more digits, at most one decimal point; first match wins
VALUE_PATTERN = re.compile(r"\d+\.?\d*|\.\d+")
UNIT_PATTERN = re.compile(r"[a-z]+")
WIDE_UNIT_PATTERN = re.compile(r"[a-zµμ]+")

UNIT_TO_MILLIS = {
    "ns": 1e-6,
    "us": 1e-3,
    "µs": 1e-3,
    "μs": 1e-3,
    "ms": 1.0,
    "s": 1000.0,
    "sec": 1000.0,
    "m": 60_000.0,
    "min": 60_000.0,
    "h": 3_600_000.0,
}


class ParsedTime(NamedTuple):
    value: Optional[float]
    unit: Optional[str]
    millis: Optional[float]


def _check_policy(policy: str) -> None:
    if policy not in UNIT_POLICIES:
        raise ValueError(f"Unknown unit policy {policy!r}; expected one of {', '.join(UNIT_POLICIES)}")


def to_millis(value: Optional[float], unit: Optional[str], *, policy: UnitPolicy = "compat") -> Optional[float]:
    _check_policy(policy)
    if value is None:
        return None
    if policy == "compat":
        return value * 1000.0 if unit == "s" else value
    factor = UNIT_TO_MILLIS.get(unit) if unit is not None else None
    if factor is None:
        return None
    return value * factor


def parse_time(raw: object, *, policy: UnitPolicy = "compat") -> ParsedTime:
    """Split a duration like ``"1.5s"`` into magnitude, unit and milliseconds.

    Missing parts come back as ``None``; malformed input never raises.
    """
    _check_policy(policy)
    if raw is None or pd.isna(raw):
        return ParsedTime(None, None, None)
    text = str(raw)

    match = VALUE_PATTERN.search(text)
    value = float(match.group(0)) if match else None

    unit_pattern = UNIT_PATTERN if policy == "compat" else WIDE_UNIT_PATTERN
    unit_match = unit_pattern.search(text)
    unit = unit_match.group(0) if unit_match else None

    return ParsedTime(value, unit, to_millis(value, unit, policy=policy))


def normalize_times(df: pd.DataFrame, *, policy: UnitPolicy = "compat", time_col: str = "Time") -> pd.DataFrame:
    """Return a copy of ``df`` with ``TimeValue``, ``TimeUnit`` and ``TimeMillis`` columns."""
    _check_policy(policy)
    out = df.copy()
    if time_col not in out.columns:
        out[time_col] = pd.Series(pd.NA, index=out.index, dtype="string")

    parsed = [parse_time(v, policy=policy) for v in out[time_col].tolist()]
    out["TimeValue"] = pd.Series([p.value for p in parsed], index=out.index, dtype="float64")
    out["TimeUnit"] = pd.Series([p.unit for p in parsed], index=out.index, dtype="string")
    out["TimeMillis"] = pd.Series([p.millis for p in parsed], index=out.index, dtype="float64")
    return out


def count_value_gaps(df: pd.DataFrame) -> int:
    if "TimeMillis" not in df.columns:
        return 0
    return int(df["TimeMillis"].isna().sum())
