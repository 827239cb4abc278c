# tests/test_reporting.py
"""Report builder: gaps, verdicts and report sections."""

from datetime import date, timedelta
from types import SimpleNamespace

from esg_portal.reporting import build_report, find_gaps, readiness_verdict
from esg_portal.scoring import MetricInput, compute_scores


def rec(category, name, value, target=None, year=2024):
    return MetricInput(
        category=category, metric_name=name, value=value, target=target,
        reporting_year=year, company_id=1,
    )


class FakeCompany:
    id = 1
    name = "Acme Corp"
    sector = "technology"

    def to_dict(self):
        return {"id": self.id, "name": self.name, "sector": self.sector}


class TestFindGaps:

    def test_below_threshold_is_gap(self):
        gaps = find_gaps([
            rec("environmental", "renewableEnergyPercentage", 20),
            rec("governance", "ethicsTrainingCompletion", 95),
        ])
        assert [g["metric"] for g in gaps] == ["renewableEnergyPercentage"]
        assert gaps[0]["score"] == 20.0

    def test_lower_is_better_gap(self):
        gaps = find_gaps([rec("environmental", "scope1Emissions", 40000)])
        assert gaps[0]["score"] == 25.0

    def test_informational_metric_never_gap(self):
        assert find_gaps([rec("social", "totalEmployees", 3)]) == []

    def test_worst_first(self):
        gaps = find_gaps([rec("social", "a", 50, 100), rec("social", "b", 10, 100)])
        assert [g["metric"] for g in gaps] == ["b", "a"]


class TestVerdict:

    def test_levels(self):
        assert readiness_verdict(85, [])[0] == "on_track"
        assert readiness_verdict(85, [{}])[0] == "minor_gaps"
        assert readiness_verdict(55, [{}] * 5)[0] == "action_needed"
        assert readiness_verdict(10, [])[0] == "significant_work"


class TestBuildReport:

    def test_sections(self):
        records = [
            rec("environmental", "scope1Emissions", 5000),
            rec("environmental", "scope1Emissions", 8000),
            rec("social", "femaleEmployeesPercentage", 45),
            rec("governance", "independentDirectorsPercentage", 60),
        ]
        documents = [
            SimpleNamespace(id=1, title="Policy", status="Approved", due_date=None),
            SimpleNamespace(
                id=2, title="Late", status="Pending Review",
                due_date=date.today() - timedelta(days=1),
            ),
        ]
        snapshot = compute_scores(records, documents)
        emissions = {"reporting_year": 2024, "scope1": 8000.0, "scope2": 0.0, "scope3": 0.0, "total": 8000.0}

        report = build_report(FakeCompany(), snapshot, records, emissions, documents, reporting_year=2024)

        assert report["company"]["name"] == "Acme Corp"
        assert report["metrics"]["environmental"]["scope1Emissions"]["value"] == 8000
        assert report["metrics"]["environmental"]["scope1Emissions"]["unit"] == "tCO2e"
        assert "GRI-305-1" in report["metrics"]["environmental"]["scope1Emissions"]["references"]
        assert report["emissions"]["total"] == 8000.0
        assert set(report["frameworks"]) == {"GRI", "SASB", "TCFD", "CSRD"}
        assert report["documents"]["total"] == 2
        assert [d["id"] for d in report["documents"]["overdue"]] == [2]
        assert report["scores"]["compliance_rate"] == 50
        assert report["verdict"] in ("on_track", "minor_gaps", "action_needed", "significant_work")
