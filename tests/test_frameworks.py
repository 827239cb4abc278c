# tests/test_frameworks.py
"""Framework coverage and metric references."""

from esg_portal.frameworks import (
    all_framework_coverage,
    framework_coverage,
    framework_summary,
    metric_references,
    required_metrics,
)
from esg_portal.metrics_catalog import FRAMEWORKS


class TestFrameworkCoverage:

    def test_full_coverage(self):
        coverage = framework_coverage("TCFD", FRAMEWORKS["TCFD"]["required_metrics"])
        assert coverage["score"] == 100
        assert coverage["missing"] == []

    def test_partial_coverage_recommends_missing(self):
        coverage = framework_coverage("tcfd", ["scope1Emissions", "scope2Emissions"])
        assert coverage["framework"] == "TCFD"
        assert coverage["score"] == 40
        assert "Add scope3Emissions for TCFD compliance" in coverage["recommendations"]

    def test_unknown_framework(self):
        coverage = framework_coverage("XYZ", ["scope1Emissions"])
        assert coverage["score"] == 0
        assert coverage["missing"] == []

    def test_sasb_sector_metrics(self):
        base = required_metrics("SASB")
        tech = required_metrics("SASB", "Technology")
        assert "dataBreaches" not in base
        assert "dataBreaches" in tech
        assert len(tech) == len(set(tech))

    def test_all_frameworks(self):
        coverage = all_framework_coverage([])
        assert set(coverage) == {"GRI", "SASB", "TCFD", "CSRD"}
        assert all(c["score"] == 0 for c in coverage.values())


class TestReferences:

    def test_scope1_references(self):
        refs = metric_references("scope1Emissions")
        assert refs[0] == "GRI-305-1"
        assert {"GRI", "SASB", "TCFD", "CSRD"} <= set(refs)

    def test_unknown_metric(self):
        assert metric_references("madeUp") == []

    def test_summary_hides_required_lists(self):
        summary = framework_summary()
        assert "required_metrics" not in summary["GRI"]
        assert "sector_metrics" not in summary["SASB"]
        assert summary["TCFD"]["name"] == "TCFD Recommendations"
