from __future__ import annotations

import logging
import math
from typing import Literal, Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse, Response

from latency.charts import render_page
from latency.pipeline import build_aggregate, compute_latency, load_latency_data
from latency.settings import DashboardSettings, load_settings
from latency_api.schemas import HealthResponse, MetaModelsResponse, SettingsModel

logger = logging.getLogger(__name__)

PAGE_TITLE = "Solver Latency Dashboard"


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def create_app(settings: Optional[DashboardSettings] = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="Solver Latency Dashboard API", version="0.1.0")
    app.state.settings = settings

    def _ctx(unit_policy: Optional[str]):
        return load_latency_data(settings.data_path, unit_policy=unit_policy or settings.unit_policy)

    @app.get("/", response_class=HTMLResponse)
    def index():
        try:
            ctx = _ctx(None)
            aggregate = build_aggregate(ctx, empty_groups=settings.empty_groups)
            return HTMLResponse(content=render_page(aggregate, title=PAGE_TITLE))
        except Exception as exc:
            logger.exception("index failed")
            return _error(exc)

    @app.get("/health")
    def health():
        return _json(HealthResponse().model_dump())

    @app.get("/meta/settings")
    def meta_settings():
        return _json(SettingsModel.from_settings(settings).model_dump())

    @app.get("/meta/models")
    def meta_models():
        try:
            records: pd.DataFrame = _ctx(None).get("records", pd.DataFrame())
            if records.empty or "Model" not in records.columns:
                return _json(MetaModelsResponse(models=[]).model_dump())
            models = sorted(str(x) for x in records["Model"].dropna().unique().tolist())
            return _json(MetaModelsResponse(models=models).model_dump())
        except Exception as exc:
            logger.exception("meta_models failed")
            return _error(exc)

    @app.get("/latency")
    def latency(
        unit_policy: Optional[Literal["compat", "table"]] = Query(default=None),
        empty_groups: Optional[Literal["nan", "drop"]] = Query(default=None),
    ):
        try:
            ctx = _ctx(unit_policy)
            return _json(compute_latency(ctx, empty_groups=empty_groups or settings.empty_groups))
        except Exception as exc:
            logger.exception("latency failed")
            return _error(exc)

    @app.get("/export/aggregate")
    def export_aggregate():
        try:
            ctx = _ctx(None)
            export_df = build_aggregate(ctx, empty_groups=settings.empty_groups)
        except Exception as exc:
            logger.exception("export_aggregate failed")
            return _error(exc)
        csv_bytes = export_df.to_csv(index=False).encode("utf-8")
        return Response(
            content=csv_bytes,
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=average_latency.csv"},
        )

    return app


app = create_app()
