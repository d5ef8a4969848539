from __future__ import annotations

import numpy as np
import pandas as pd

from latency.settings import EMPTY_GROUP_POLICIES, EmptyGroups

_CORRECT_TOKENS = {
    "true": 1.0, "1": 1.0, "1.0": 1.0, "yes": 1.0,
    "false": 0.0, "0": 0.0, "0.0": 0.0, "no": 0.0,
}


def average_by_model(df: pd.DataFrame, *, empty_groups: EmptyGroups = "nan") -> pd.DataFrame:
    """Mean ``TimeMillis`` per ``Model`` over the rows where it is present.

    A model whose rows all lack a usable time gets a NaN average, or is left
    out when ``empty_groups="drop"``. Rows without a model are ignored.
    """
    if empty_groups not in EMPTY_GROUP_POLICIES:
        raise ValueError(f"Unknown empty-group policy {empty_groups!r}; expected one of {', '.join(EMPTY_GROUP_POLICIES)}")
    if df.empty or "Model" not in df.columns:
        return pd.DataFrame({"Model": pd.Series(dtype="string"), "AverageTimeMillis": pd.Series(dtype="float64")})

    base = df.dropna(subset=["Model"])
    grouped = (
        base.groupby("Model", sort=True)["TimeMillis"]
        .mean()
        .reset_index()
        .rename(columns={"TimeMillis": "AverageTimeMillis"})
    )
    grouped["AverageTimeMillis"] = grouped["AverageTimeMillis"].astype("float64")
    if empty_groups == "drop":
        grouped = grouped.dropna(subset=["AverageTimeMillis"])
    return grouped.reset_index(drop=True)


def _correct_as_float(value: object) -> float:
    if value is None or pd.isna(value):
        return float("nan")
    if isinstance(value, (bool, np.bool_)):
        return float(value)
    return _CORRECT_TOKENS.get(str(value).strip().lower(), float("nan"))


def summarize_models(df: pd.DataFrame) -> pd.DataFrame:
    """Per-model row counts, usable-sample counts, and accuracy from the optional ``Correct`` column."""
    columns = ["Model", "Runs", "Samples", "Accuracy"]
    if df.empty or "Model" not in df.columns:
        return pd.DataFrame(columns=columns)

    base = df.dropna(subset=["Model"]).copy()
    if "Correct" in base.columns:
        base["_correct"] = base["Correct"].map(_correct_as_float).astype("float64")
    else:
        base["_correct"] = float("nan")
    millis = base["TimeMillis"] if "TimeMillis" in base.columns else pd.Series(float("nan"), index=base.index)
    base["_usable"] = millis.notna()

    summary = (
        base.groupby("Model", sort=True)
        .agg(
            Runs=("_usable", "size"),
            Samples=("_usable", "sum"),
            Accuracy=("_correct", "mean"),
        )
        .reset_index()
    )
    summary["Runs"] = summary["Runs"].astype(int)
    summary["Samples"] = summary["Samples"].astype(int)
    return summary[columns]
