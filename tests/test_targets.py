# tests/test_targets.py
"""Target trajectories and industry benchmarking."""

import pytest

from esg_portal.errors import ValidationError
from esg_portal.targets import benchmark, percentile, performance_rating, track_target


class TestTrackTarget:

    def test_linear_trajectory(self):
        result = track_target(1000, 600, 2030, "scope1Emissions", current_year=2026)
        assert [p["year"] for p in result["trajectory"]] == [2026, 2027, 2028, 2029, 2030]
        assert [p["value"] for p in result["trajectory"]] == [1000, 900, 800, 700, 600]
        assert [p["is_target"] for p in result["trajectory"]] == [False] * 4 + [True]
        assert result["required_annual_reduction"] == 10.0
        assert result["feasibility"] == "achievable"
        assert result["recommendations"] == ["Implement renewable energy and efficiency programs"]

    def test_steep_target_is_challenging(self):
        result = track_target(1000, 200, 2028, current_year=2026)
        assert result["required_annual_reduction"] == 40.0
        assert result["feasibility"] == "challenging"
        assert result["recommendations"] == ["Consider extending timeline or setting interim targets"]

    def test_increase_target(self):
        result = track_target(40, 44, 2027, "renewableEnergyPercentage", current_year=2026)
        assert result["required_annual_reduction"] == -10.0
        assert result["feasibility"] == "achievable"

    def test_past_target_year_rejected(self):
        with pytest.raises(ValidationError) as exc:
            track_target(1000, 500, 2026, current_year=2026)
        assert exc.value.errors == ["Target year must be in the future"]

    def test_zero_current_value_rejected(self):
        with pytest.raises(ValidationError):
            track_target(0, 10, 2030, current_year=2026)


class TestBenchmark:

    @pytest.mark.parametrize("metric,company,expected", [
        ("scope1Intensity", 2.0, "excellent"),
        ("scope1Intensity", 2.5, "good"),
        ("scope1Intensity", 3.0, "below_average"),
        ("femalePercentage", 40, "excellent"),
        ("femalePercentage", 35, "good"),
        ("femalePercentage", 20, "below_average"),
    ])
    def test_performance_rating(self, metric, company, expected):
        assert performance_rating(metric, company, {"scope1Intensity": 2.5, "femalePercentage": 35}[metric]) == expected

    def test_percentile(self):
        assert percentile(50, 100) == 90
        assert percentile(90, 100) == 75
        assert percentile(100, 100) == 50

    def test_compare_sector(self):
        result = benchmark("Manufacturing", {"scope1Intensity": 60.0, "femalePercentage": 28, "unknown": 5})
        assert result["sector"] == "manufacturing"
        assert set(result["comparison"]) == {"scope1Intensity", "femalePercentage"}
        assert result["comparison"]["scope1Intensity"]["performance"] == "below_average"
        assert result["overall_score"] == 70  # (90 + 50) / 2
        assert result["recommendations"] == ["Improve scope1Intensity performance"]

    def test_unknown_sector_uses_technology(self):
        result = benchmark("mining", {"femalePercentage": 35})
        assert result["comparison"]["femalePercentage"]["industry"] == 35

    def test_nothing_comparable(self):
        assert benchmark("financial", {})["overall_score"] == 0
