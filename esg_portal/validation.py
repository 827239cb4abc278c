"""
ESG data validation

Per-metric checks applied before metrics are stored:
- value must be a finite number
- negative values only for delta / variance metrics
- percentages within 0-100
- unit must match the catalog unit when one is given
- emissions plausibility limits
- optional database ValidationRule (min / max / unit)

Benchmark comparisons produce warnings, never errors.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from esg_portal.errors import ValidationError
from esg_portal.metrics_catalog import (
    CATEGORIES,
    get_metric,
    is_delta_metric,
    is_percentage_metric,
)
from esg_portal.scoring import as_number

logger = logging.getLogger(__name__)

EMISSIONS_WARNING_LEVEL = 50_000
EMISSIONS_MAX = 1_000_000


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    value: Optional[float] = None

    def to_dict(self):
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "value": self.value,
        }


def _benchmark_warnings(entry, value):
    benchmark = (entry or {}).get("benchmark")
    if not benchmark:
        return []
    if entry.get("lower_is_better"):
        below = value > benchmark["good"]
        excellent = value <= benchmark["excellent"]
    else:
        below = value < benchmark["good"]
        excellent = value >= benchmark["excellent"]
    if below:
        return ["Below industry average. Consider improvement initiatives."]
    if excellent:
        return ["Excellent performance! Above industry leaders."]
    return []


def validate_metric(category, metric_name, value, unit=None, rule=None):
    """
    Validate one submitted metric value.

    Args:
        category: environmental / social / governance
        metric_name: catalog or custom metric name
        value: raw submitted value (string or number)
        unit: submitted unit, checked against the catalog when both are present
        rule: optional ValidationRule row with min_value / max_value /
            required_unit / error_message

    Returns a ValidationResult; `value` holds the parsed float when valid.
    """
    if category not in CATEGORIES:
        return ValidationResult(False, [f"Unknown category: {category}"])

    if value is None or (isinstance(value, str) and not value.strip()):
        return ValidationResult(False, ["Value is required"])

    number = as_number(value)
    if number is None:
        return ValidationResult(False, ["Value must be a number"])

    errors = []
    warnings = []
    entry = get_metric(category, metric_name)

    if number < 0 and not is_delta_metric(metric_name):
        errors.append("Value cannot be negative")

    if (is_percentage_metric(metric_name) or unit == "%") and not (0 <= number <= 100):
        errors.append("Percentage values must be between 0 and 100")

    if entry and unit and unit != entry["unit"]:
        errors.append(f"Expected unit: {entry['unit']}, got: {unit}")

    if "Emissions" in metric_name:
        if number > EMISSIONS_MAX:
            errors.append("Emissions value seems unusually high. Please verify.")
        elif number > EMISSIONS_WARNING_LEVEL:
            warnings.append(
                f"Emissions above typical industry average of {EMISSIONS_WARNING_LEVEL:,} {unit or 'tCO2e'}"
            )

    if rule is not None:
        if rule.min_value is not None and number < rule.min_value:
            errors.append(rule.error_message or f"Value must be at least {rule.min_value}")
        elif rule.max_value is not None and number > rule.max_value:
            errors.append(rule.error_message or f"Value must be at most {rule.max_value}")
        if rule.required_unit and unit != rule.required_unit:
            errors.append(f"Expected unit: {rule.required_unit}")

    if not errors:
        warnings.extend(_benchmark_warnings(entry, number))

    return ValidationResult(not errors, errors, warnings, number if not errors else None)


def validate_submission(metrics_by_category, units=None, rules=None):
    """
    Validate a {category: {metric_name: value}} payload.

    Empty values are skipped. Returns {category: {metric_name: ValidationResult}}
    for the accepted metrics, or raises ValidationError listing every failure
    as "category.metric: message".
    """
    units = units or {}
    rules = rules or {}
    accepted = {}
    errors = []

    for category, metrics in (metrics_by_category or {}).items():
        if not metrics:
            continue
        for metric_name, value in metrics.items():
            if value is None or value == "":
                continue
            result = validate_metric(
                category,
                metric_name,
                value,
                unit=units.get(metric_name),
                rule=rules.get((category, metric_name)),
            )
            if result.is_valid:
                accepted.setdefault(category, {})[metric_name] = result
            else:
                errors.extend(f"{category}.{metric_name}: {e}" for e in result.errors)

    if errors:
        logger.info(f"Rejected submission with {len(errors)} validation error(s)")
        raise ValidationError(errors)
    return accepted
