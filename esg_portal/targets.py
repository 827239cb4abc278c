"""
Target tracking and peer benchmarking.

track_target() lays out a straight-line path from the current value to a
target value by the target year and judges whether the yearly change it
needs is realistic. benchmark() rates a company's figures against sector
averages.
"""

from datetime import date

from esg_portal.errors import ValidationError
from esg_portal.scoring import round_half_up

# Yearly change (as a fraction of the current value) still considered achievable
ACHIEVABLE_ANNUAL_CHANGE = 0.1

INDUSTRY_BENCHMARKS = {
    "technology": {"scope1Intensity": 2.5, "scope2Intensity": 15.2, "femalePercentage": 35},
    "manufacturing": {"scope1Intensity": 45.8, "scope2Intensity": 32.1, "femalePercentage": 28},
    "financial": {"scope1Intensity": 1.2, "scope2Intensity": 8.9, "femalePercentage": 42},
}
DEFAULT_SECTOR = "technology"

# Benchmark metrics where a lower company figure is the better one
LOWER_IS_BETTER = ("scope1Intensity", "scope2Intensity", "turnoverRate")


def target_recommendations(annual_change, metric=None):
    recommendations = []
    if abs(annual_change) > ACHIEVABLE_ANNUAL_CHANGE:
        recommendations.append("Consider extending timeline or setting interim targets")
    if metric and "emissions" in metric.lower():
        recommendations.append("Implement renewable energy and efficiency programs")
    return recommendations


def track_target(current_value, target_value, target_year, metric=None, current_year=None):
    """
    Linear trajectory from `current_value` (this year) to `target_value` in `target_year`.

    Returns {"metric", "trajectory", "required_annual_reduction" (% of the
    current value per year), "feasibility", "recommendations"}.
    Raises ValidationError when the target year is not in the future or the
    current value is zero.
    """
    current_year = current_year or date.today().year
    years = target_year - current_year
    errors = []
    if years <= 0:
        errors.append("Target year must be in the future")
    if current_value == 0:
        errors.append("Current value must be non-zero")
    if errors:
        raise ValidationError(errors)

    annual_change = (current_value - target_value) / current_value / years
    trajectory = [
        {
            "year": current_year + i,
            "value": round(current_value - (current_value - target_value) * i / years, 2),
            "is_target": i == years,
        }
        for i in range(years + 1)
    ]
    return {
        "metric": metric,
        "trajectory": trajectory,
        "required_annual_reduction": round(annual_change * 100, 2),
        "feasibility": "achievable" if abs(annual_change) <= ACHIEVABLE_ANNUAL_CHANGE else "challenging",
        "recommendations": target_recommendations(annual_change, metric),
    }


def performance_rating(metric, company, industry):
    ratio = company / industry
    if metric in LOWER_IS_BETTER:
        if ratio <= 0.9:
            return "excellent"
        return "good" if ratio <= 1.1 else "below_average"
    if ratio >= 1.1:
        return "excellent"
    return "good" if ratio >= 0.9 else "below_average"


def percentile(company, industry):
    """Rough percentile from the distance to the industry figure, in either direction."""
    ratio = company / industry
    if ratio <= 0.8 or ratio >= 1.2:
        return 90
    if ratio <= 0.9 or ratio >= 1.1:
        return 75
    return 50


def benchmark(sector, metrics):
    """
    Compare company figures to sector averages.

    Unknown sectors use the technology averages; metrics without a sector
    average are left out. overall_score is the mean percentile (0 when
    nothing could be compared).
    """
    sector = (sector or DEFAULT_SECTOR).lower()
    industry = INDUSTRY_BENCHMARKS.get(sector, INDUSTRY_BENCHMARKS[DEFAULT_SECTOR])

    comparison = {}
    for metric, value in (metrics or {}).items():
        industry_value = industry.get(metric)
        if not industry_value or value is None:
            continue
        comparison[metric] = {
            "company": value,
            "industry": industry_value,
            "performance": performance_rating(metric, value, industry_value),
            "percentile": percentile(value, industry_value),
        }

    percentiles = [c["percentile"] for c in comparison.values()]
    return {
        "sector": sector,
        "comparison": comparison,
        "overall_score": int(round_half_up(sum(percentiles) / len(percentiles))) if percentiles else 0,
        "recommendations": [
            f"Improve {metric} performance"
            for metric, c in comparison.items()
            if c["performance"] == "below_average"
        ],
    }
