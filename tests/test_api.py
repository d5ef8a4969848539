"""Tests for the FastAPI dashboard server."""

import io

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from latency.settings import DashboardSettings
from latency_api.main import create_app


@pytest.fixture
def client(sample_csv) -> TestClient:
    return TestClient(create_app(DashboardSettings(data_path=sample_csv)))


class TestPages:

    def test_index_serves_chart_page(self, client) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "vega" in response.text
        assert "CSP Solver" in response.text

    def test_health(self, client) -> None:
        assert client.get("/health").json() == {"status": "ok"}

    def test_settings(self, client, sample_csv) -> None:
        body = client.get("/meta/settings").json()
        assert body["data_path"] == str(sample_csv)
        assert body["unit_policy"] == "compat"
        assert body["port"] == 8050


class TestLatencyEndpoint:

    def test_payload_is_json_safe(self, client) -> None:
        response = client.get("/latency")
        assert response.status_code == 200
        body = response.json()
        rows = {row["Model"]: row["AverageTimeMillis"] for row in body["aggregate"]}
        assert rows["CSP Solver"] == pytest.approx(2.0)
        assert rows["Stochastic Solver"] is None
        assert body["kpis"]["value_gaps"] == 2

    def test_query_overrides(self, client) -> None:
        body = client.get("/latency", params={"empty_groups": "drop", "unit_policy": "table"}).json()
        assert body["settings"] == {"unit_policy": "table", "empty_groups": "drop"}
        assert "Stochastic Solver" not in [row["Model"] for row in body["aggregate"]]

    def test_rejects_unknown_policy(self, client) -> None:
        assert client.get("/latency", params={"unit_policy": "smart"}).status_code == 422

    def test_models(self, client) -> None:
        assert client.get("/meta/models").json() == {
            "models": ["Brute Force Solver", "CSP Solver", "Stochastic Solver"]
        }


class TestExport:

    def test_aggregate_csv(self, client) -> None:
        response = client.get("/export/aggregate")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "average_latency.csv" in response.headers["content-disposition"]
        df = pd.read_csv(io.StringIO(response.text))
        assert list(df.columns) == ["Model", "AverageTimeMillis"]
        assert len(df) == 3


class TestErrors:

    def test_missing_file_is_500_with_type(self, tmp_path) -> None:
        client = TestClient(create_app(DashboardSettings(data_path=tmp_path / "missing.csv")))
        response = client.get("/latency")
        assert response.status_code == 500
        assert response.json()["type"] == "FileError"

    def test_export_missing_file_is_500_json(self, tmp_path) -> None:
        client = TestClient(create_app(DashboardSettings(data_path=tmp_path / "missing.csv")))
        response = client.get("/export/aggregate")
        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json()["type"] == "FileError"

    def test_export_ragged_file_is_500_json(self, write_csv) -> None:
        path = write_csv("Model,Time\nm1,1ms\nm2\n", name="ragged.csv")
        client = TestClient(create_app(DashboardSettings(data_path=path)))
        response = client.get("/export/aggregate")
        assert response.status_code == 500
        assert response.json()["type"] == "ParseError"

    def test_malformed_file_is_500_with_type(self, write_csv) -> None:
        path = write_csv("Name,Time\nm1,1ms\n", name="bad.csv")
        client = TestClient(create_app(DashboardSettings(data_path=path)))
        response = client.get("/meta/models")
        assert response.status_code == 500
        assert response.json()["type"] == "SchemaError"
