# tests/test_integrations.py
"""ERP / HR connectors with a mocked requests session, and source selection."""

import base64
from unittest.mock import MagicMock

import pytest
import requests

from esg_portal.errors import IntegrationError
from esg_portal.integrations import (
    SAMPLE_METRICS,
    ERPConnector,
    HRConnector,
    StaticDataSource,
    build_source,
)


def mock_session(*payloads):
    """Session whose successive GETs return the given JSON payloads."""
    session = MagicMock()
    responses = []
    for payload in payloads:
        response = MagicMock()
        response.json.return_value = payload
        response.raise_for_status.return_value = None
        responses.append(response)
    session.get.side_effect = responses
    return session


def as_map(metrics):
    return {m.metric_name: m.value for m in metrics}


class TestStaticSource:

    def test_fetch_sample_metrics(self):
        source = StaticDataSource("Workday", "hr", SAMPLE_METRICS["hr"])
        metrics = source.fetch(2024)
        assert len(metrics) == len(SAMPLE_METRICS["hr"]["social"])
        assert all(m.category == "social" and m.reporting_year == 2024 for m in metrics)

    def test_describe(self):
        source = StaticDataSource("SAP", "erp", {})
        assert source.describe() == {"kind": "erp", "system": "SAP", "source": "StaticDataSource"}


class TestERPConnector:

    def test_fetch_energy_and_revenue_metrics(self):
        session = mock_session(
            {"total": 1000, "renewable_pct": 35, "period": "2024"},
            {"revenue": 5_000_000, "costs": 3_000_000, "year": 2024},
        )
        connector = ERPConnector("https://erp.example.com/", "key", "SAP", session=session)
        metrics = connector.fetch(2024)
        assert as_map(metrics) == {
            "energyConsumption": 1000.0,
            "renewableEnergyPercentage": 35.0,
            "scope2Emissions": 500.0,
            "revenue": 5_000_000.0,
        }
        revenue = next(m for m in metrics if m.metric_name == "revenue")
        assert revenue.category == "governance"
        assert revenue.unit == "USD"

        energy_call, financial_call = session.get.call_args_list
        assert energy_call.args[0] == "https://erp.example.com/api/energy/consumption"
        assert energy_call.kwargs["params"] == {"startDate": "2024-01-01", "endDate": "2024-12-31"}
        assert energy_call.kwargs["headers"]["Authorization"] == "Bearer key"
        assert financial_call.args[0] == "https://erp.example.com/api/financial/revenue"
        assert financial_call.kwargs["params"] == {"year": 2024}

    def test_financial_data(self):
        session = mock_session({"revenue": 5_000_000, "costs": 3_000_000})
        connector = ERPConnector("https://erp.example.com", "key", "Oracle", session=session)
        data = connector.get_financial_data(2023)
        assert data == {"revenue": 5_000_000, "operating_costs": 3_000_000, "year": 2023}
        assert session.get.call_args.args[0].endswith("/rest/financial/summary")

    def test_request_failure_raises(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("refused")
        connector = ERPConnector("https://erp.example.com", "key", "SAP", session=session)
        with pytest.raises(IntegrationError) as exc:
            connector.fetch()
        assert exc.value.system == "SAP"
        assert exc.value.status_code == 502

    def test_non_object_payload_raises(self):
        connector = ERPConnector("https://erp.example.com", "key", "SAP", session=mock_session([1, 2]))
        with pytest.raises(IntegrationError):
            connector.fetch()


class TestHRConnector:

    def test_fetch_social_metrics(self):
        session = mock_session(
            {"total": 500, "newHires": 50, "turnoverRate": 9},
            {"female_pct": 48, "leadership_diversity": 30},
            {"lost_time_rate": 0.5, "training_hours": 32},
        )
        connector = HRConnector("https://hr.example.com", "key", "Workday", session=session)
        metrics = as_map(connector.fetch(2024))
        assert metrics["totalEmployees"] == 500.0
        assert metrics["femaleEmployeesPercentage"] == 48.0
        assert metrics["lostTimeInjuryRate"] == 0.5
        assert metrics["trainingHoursPerEmployee"] == 32.0
        assert session.get.call_count == 3

    def test_bamboohr_basic_auth(self):
        connector = HRConnector("https://hr.example.com", "abc", "BambooHR", session=MagicMock())
        expected = base64.b64encode(b"abc:x").decode()
        assert connector.headers()["Authorization"] == f"Basic {expected}"


class TestBuildSource:

    def test_static_by_default(self):
        source = build_source("erp", {"INTEGRATION_MODE": "static", "ERP_SYSTEM": "SAP"})
        assert isinstance(source, StaticDataSource)
        assert source.system == "SAP"

    def test_live_connector(self):
        source = build_source("hr", {
            "INTEGRATION_MODE": "live", "HR_SYSTEM": "ADP",
            "HR_BASE_URL": "https://hr.example.com", "HR_API_KEY": "k",
        })
        assert isinstance(source, HRConnector)
        assert source.base_url == "https://hr.example.com"

    def test_live_without_url_raises(self):
        with pytest.raises(IntegrationError):
            build_source("erp", {"INTEGRATION_MODE": "live", "ERP_SYSTEM": "SAP"})

    def test_unknown_kind(self):
        with pytest.raises(IntegrationError):
            build_source("crm", {})
