# tests/test_validation.py
"""Metric validation: numeric checks, percentages, units, emissions limits, rules."""

from types import SimpleNamespace

import pytest

from esg_portal.errors import ValidationError
from esg_portal.validation import validate_metric, validate_submission


def rule(**kwargs):
    defaults = {"min_value": None, "max_value": None, "required_unit": None, "error_message": ""}
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


class TestValidateMetric:

    def test_valid_value_is_parsed(self):
        result = validate_metric("environmental", "energyConsumption", "1500")
        assert result.is_valid
        assert result.value == 1500.0

    def test_unknown_category(self):
        result = validate_metric("financial", "revenue", 10)
        assert result.errors == ["Unknown category: financial"]

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_missing_value(self, value):
        assert validate_metric("social", "newHires", value).errors == ["Value is required"]

    def test_non_numeric(self):
        assert validate_metric("social", "newHires", "many").errors == ["Value must be a number"]

    def test_negative_rejected(self):
        result = validate_metric("environmental", "wasteGenerated", -5)
        assert "Value cannot be negative" in result.errors
        assert result.value is None

    def test_negative_allowed_for_delta_metrics(self):
        assert validate_metric("environmental", "emissionsChange", -12).is_valid
        assert validate_metric("social", "customVariance", -3).is_valid

    def test_percentage_range(self):
        result = validate_metric("social", "femaleEmployeesPercentage", 120)
        assert result.errors == ["Percentage values must be between 0 and 100"]

    def test_custom_metric_with_percent_unit_range_checked(self):
        result = validate_metric("environmental", "recycledShare", 150, unit="%")
        assert result.errors == ["Percentage values must be between 0 and 100"]
        assert validate_metric("environmental", "recycledShare", 55, unit="%").is_valid

    def test_unit_mismatch(self):
        result = validate_metric("environmental", "energyConsumption", 10, unit="kWh")
        assert result.errors == ["Expected unit: MWh, got: kWh"]

    def test_emissions_warning(self):
        result = validate_metric("environmental", "scope3Emissions", 60000)
        assert result.is_valid
        assert len(result.warnings) == 1

    def test_emissions_implausible(self):
        result = validate_metric("environmental", "scope1Emissions", 2_000_000)
        assert result.errors == ["Emissions value seems unusually high. Please verify."]

    def test_benchmark_below_average(self):
        result = validate_metric("environmental", "renewableEnergyPercentage", 20)
        assert result.warnings == ["Below industry average. Consider improvement initiatives."]

    def test_benchmark_excellent_lower_is_better(self):
        result = validate_metric("social", "turnoverRate", 5)
        assert result.warnings == ["Excellent performance! Above industry leaders."]

    def test_rule_bounds_and_unit(self):
        r = rule(min_value=10, required_unit="count", error_message="Board too small")
        result = validate_metric("governance", "boardSize", 5, unit="people", rule=r)
        assert "Board too small" in result.errors
        assert "Expected unit: count" in result.errors

    def test_rule_max_default_message(self):
        result = validate_metric("governance", "boardSize", 30, rule=rule(max_value=20))
        assert result.errors == ["Value must be at most 20"]


class TestValidateSubmission:

    def test_empty_values_skipped(self):
        accepted = validate_submission({
            "environmental": {"energyConsumption": 100, "waterWithdrawal": ""},
            "social": {},
        })
        assert list(accepted) == ["environmental"]
        assert list(accepted["environmental"]) == ["energyConsumption"]

    def test_errors_are_collected(self):
        with pytest.raises(ValidationError) as exc:
            validate_submission({
                "environmental": {"energyConsumption": -1},
                "social": {"turnoverRate": 150},
            })
        assert exc.value.errors == [
            "environmental.energyConsumption: Value cannot be negative",
            "social.turnoverRate: Percentage values must be between 0 and 100",
        ]
        assert exc.value.status_code == 400

    def test_units_checked(self):
        with pytest.raises(ValidationError):
            validate_submission(
                {"environmental": {"energyConsumption": 5}}, units={"energyConsumption": "GJ"}
            )
