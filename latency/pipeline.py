from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import pandas as pd

from latency.aggregate import average_by_model, summarize_models
from latency.charts import build_latency_chart, to_vega_spec
from latency.loader import file_signature, load_results
from latency.normalize import count_value_gaps, normalize_times
from latency.settings import DEFAULT_DATA_PATH, EmptyGroups, UnitPolicy

logger = logging.getLogger(__name__)


# ---------------- Public API (Streamlit parity + FastAPI use) ----------------
@lru_cache(maxsize=4)
def _load_latency_data_cached(signature: Tuple[str, float], unit_policy: UnitPolicy) -> Dict[str, object]:
    path = signature[0]
    records = load_results(path)
    normalized = normalize_times(records, policy=unit_policy)
    value_gaps = count_value_gaps(normalized)
    if value_gaps:
        logger.warning("%d of %d rows in %s have no usable time; excluded from averages", value_gaps, len(normalized), path)
    return {
        "files": [path],
        "unit_policy": unit_policy,
        "records": records,
        "normalized": normalized,
        "value_gaps": value_gaps,
    }


def load_latency_data(path: Optional[Union[str, Path]] = None, *, unit_policy: UnitPolicy = "compat") -> Dict[str, object]:
    """Load and normalize the results file, reusing the cached result while its mtime is unchanged."""
    path = Path(path) if path is not None else DEFAULT_DATA_PATH
    return _load_latency_data_cached(file_signature(path), unit_policy)


def build_aggregate(ctx: Dict[str, Any], *, empty_groups: EmptyGroups = "nan") -> pd.DataFrame:
    normalized: pd.DataFrame = ctx.get("normalized", pd.DataFrame()).copy()
    return average_by_model(normalized, empty_groups=empty_groups)


def run_pipeline(
    path: Optional[Union[str, Path]] = None,
    *,
    unit_policy: UnitPolicy = "compat",
    empty_groups: EmptyGroups = "nan",
) -> pd.DataFrame:
    """Load, normalize and aggregate in one call. Raises the loader's errors unchanged."""
    ctx = load_latency_data(path, unit_policy=unit_policy)
    return build_aggregate(ctx, empty_groups=empty_groups)


def compute_latency(ctx: Dict[str, Any], *, empty_groups: EmptyGroups = "nan", title: Optional[str] = None) -> Dict[str, Any]:
    normalized: pd.DataFrame = ctx.get("normalized", pd.DataFrame()).copy()
    aggregate = average_by_model(normalized, empty_groups=empty_groups)
    summary = summarize_models(normalized)

    fastest = None
    plotted = aggregate.dropna(subset=["AverageTimeMillis"]).sort_values("AverageTimeMillis").head(1)
    if not plotted.empty:
        fastest = {"model": str(plotted.iloc[0]["Model"]), "average_time_ms": float(plotted.iloc[0]["AverageTimeMillis"])}

    return {
        "settings": {"unit_policy": ctx.get("unit_policy", "compat"), "empty_groups": empty_groups},
        "files": list(ctx.get("files", [])),
        "kpis": {
            "models": int(len(aggregate)),
            "rows": int(len(normalized)),
            "value_gaps": int(ctx.get("value_gaps", 0) or 0),
            "fastest_model": fastest,
        },
        "aggregate": aggregate.to_dict(orient="records"),
        "summary": summary.to_dict(orient="records"),
        "charts": {"average_latency": to_vega_spec(build_latency_chart(aggregate, title=title))},
    }
