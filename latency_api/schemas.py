from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel

from latency.settings import DashboardSettings


class SettingsModel(BaseModel):
    data_path: str
    host: str
    port: int
    debug: bool = False
    unit_policy: Literal["compat", "table"] = "compat"
    empty_groups: Literal["nan", "drop"] = "nan"

    @classmethod
    def from_settings(cls, settings: DashboardSettings) -> "SettingsModel":
        return cls(
            data_path=str(settings.data_path),
            host=settings.host,
            port=settings.port,
            debug=settings.debug,
            unit_policy=settings.unit_policy,
            empty_groups=settings.empty_groups,
        )


class MetaModelsResponse(BaseModel):
    models: List[str]


class HealthResponse(BaseModel):
    status: str = "ok"
