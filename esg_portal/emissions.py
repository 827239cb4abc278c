"""
GHG Protocol Emissions Calculator

Scope 1 (direct), Scope 2 (purchased energy) and Scope 3 (value chain)
emissions in tCO2e from activity quantities and fixed emission factors.

Activity keys are snake_case; the camelCase names sent by the browser client
(naturalGas, electricityConsumption, purchasedGoods, ...) are accepted too.
Missing or non-numeric quantities count as zero.
"""

import re
from dataclasses import dataclass, field, asdict

from esg_portal.scoring import as_number

# tCO2e per unit of fuel
SCOPE1_FACTORS = {
    "natural_gas": 0.0053,  # per m³
    "diesel": 2.68,         # per liter
    "gasoline": 2.31,       # per liter
    "coal": 2.42,           # per kg
}

# Grid emission factors, tCO2e per MWh
GRID_FACTORS = {
    "US": 0.4,
    "EU": 0.3,
    "China": 0.6,
    "India": 0.8,
    "Global": 0.5,
}
DEFAULT_REGION = "Global"

STEAM_FACTOR = 0.2     # tCO2e per MWh
COOLING_FACTOR = 0.15  # tCO2e per MWh

SCOPE3_CATEGORIES = (
    "purchased_goods",
    "capital_goods",
    "fuel_energy_activities",
    "upstream_transport",
    "waste_generated",
    "business_travel",
    "employee_commuting",
    "downstream_transport",
    "use_of_products",
    "end_of_life_treatment",
)

# Spend / activity based factors; categories not listed use the default
SCOPE3_FACTORS = {
    "purchased_goods": 0.5,    # per currency unit
    "capital_goods": 0.3,
    "business_travel": 0.2,    # per km
    "employee_commuting": 0.15,
    "waste_generated": 0.4,    # per tonne
}
SCOPE3_DEFAULT_FACTOR = 0.1

# Older client field names
_ALIASES = {
    "electricity_consumption": "electricity",
    "steam_consumption": "steam",
    "cooling_consumption": "cooling",
    "employee_count": "employees",
    "production_units": "production",
}

# Sanity limits used by validate_ghg_totals
MAX_SCOPE1 = 10_000_000
MAX_SCOPE2 = 10_000_000
MAX_SCOPE3 = 50_000_000


@dataclass
class ScopeResult:
    total: float = 0.0
    breakdown: dict = field(default_factory=dict)


@dataclass
class EmissionsBreakdown:
    scope1: ScopeResult
    scope2: ScopeResult
    scope3: ScopeResult
    region: str = DEFAULT_REGION
    grid_factor: float = GRID_FACTORS[DEFAULT_REGION]
    intensity: dict = field(default_factory=dict)

    @property
    def scope1_total(self):
        return self.scope1.total

    @property
    def scope2_total(self):
        return self.scope2.total

    @property
    def scope3_total(self):
        return self.scope3.total

    @property
    def total(self):
        return round(self.scope1.total + self.scope2.total + self.scope3.total, 2)

    def to_dict(self):
        data = asdict(self)
        data["scope1_total"] = self.scope1_total
        data["scope2_total"] = self.scope2_total
        data["scope3_total"] = self.scope3_total
        data["total"] = self.total
        return data


def _snake(key):
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def normalize_activity(data):
    """Snake-case keys, resolve aliases and coerce values to floats (0 when invalid)."""
    activity = {}
    for key, value in (data or {}).items():
        name = _snake(key)
        name = _ALIASES.get(name, name)
        number = as_number(value)
        activity[name] = number if number is not None else 0.0
    return activity


def grid_factor(region):
    return GRID_FACTORS.get(region or DEFAULT_REGION, GRID_FACTORS[DEFAULT_REGION])


def calculate_scope1(activity):
    combustion = sum(activity.get(fuel, 0.0) * factor for fuel, factor in SCOPE1_FACTORS.items())
    process = activity.get("process_emissions", 0.0)
    fugitive = activity.get("fugitive_emissions", 0.0)
    return ScopeResult(
        total=round(combustion + process + fugitive, 2),
        breakdown={
            "fuel_combustion": round(combustion, 2),
            "process_emissions": process,
            "fugitive_emissions": fugitive,
        },
    )


def calculate_scope2(activity, region=None):
    factor = grid_factor(region)
    electricity = activity.get("electricity", 0.0) * factor
    steam = activity.get("steam", 0.0) * STEAM_FACTOR
    cooling = activity.get("cooling", 0.0) * COOLING_FACTOR
    return ScopeResult(
        total=round(electricity + steam + cooling, 2),
        breakdown={
            "electricity": round(electricity, 2),
            "steam": round(steam, 2),
            "cooling": round(cooling, 2),
        },
    )


def calculate_scope3(activity):
    total = 0.0
    breakdown = {}
    for category in SCOPE3_CATEGORIES:
        emissions = activity.get(category, 0.0) * SCOPE3_FACTORS.get(category, SCOPE3_DEFAULT_FACTOR)
        breakdown[category] = round(emissions, 2)
        total += emissions
    return ScopeResult(total=round(total, 2), breakdown=breakdown)


def calculate_intensity(total, revenue=None, employees=None, production=None):
    """Emissions intensity ratios; each is omitted unless its denominator is positive."""
    intensity = {}
    if revenue and revenue > 0:
        intensity["revenue_intensity"] = round(total / revenue, 6)  # tCO2e per currency unit
    if employees and employees > 0:
        intensity["employee_intensity"] = round(total / employees, 2)
    if production and production > 0:
        intensity["production_intensity"] = round(total / production, 2)
    return intensity


def compute_emissions(activity_data, region=None):
    """
    Compute scope 1/2/3 emissions and intensity ratios.

    Args:
        activity_data: dict of activity quantities (fuel volumes, MWh, spend)
            plus optional revenue / employees / production denominators
        region: grid region code; unknown or missing regions use "Global"

    Returns an EmissionsBreakdown.
    """
    activity = normalize_activity(activity_data)
    resolved_region = region if region in GRID_FACTORS else DEFAULT_REGION

    result = EmissionsBreakdown(
        scope1=calculate_scope1(activity),
        scope2=calculate_scope2(activity, resolved_region),
        scope3=calculate_scope3(activity),
        region=resolved_region,
        grid_factor=grid_factor(resolved_region),
    )
    result.intensity = calculate_intensity(
        result.total,
        revenue=activity.get("revenue"),
        employees=activity.get("employees"),
        production=activity.get("production"),
    )
    return result


def validate_ghg_totals(scope1=0, scope2=0, scope3=0):
    """Sanity-check reported scope totals. Returns a list of error messages."""
    values = [as_number(v) or 0.0 for v in (scope1, scope2, scope3)]
    s1, s2, s3 = values
    errors = []
    if any(v < 0 for v in values):
        errors.append("Emission values cannot be negative")
    if s1 > MAX_SCOPE1 or s2 > MAX_SCOPE2 or s3 > MAX_SCOPE3:
        errors.append("Emission values seem unusually high")
    if s1 + s2 + s3 == 0:
        errors.append("At least one scope must have emissions data")
    return errors
