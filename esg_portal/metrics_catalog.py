"""
ESG Metric Catalog

Standard metrics accepted by the data-entry API, grouped by category.

Each metric has:
- unit: Expected unit of measure ("%" for percentages)
- framework: Primary GRI disclosure reference
- description: Human-readable label
- target: Default scoring target (None = informational, not scored)
- lower_is_better: Scores as target/value instead of value/target
- allow_negative: Delta / variance metrics that may legitimately be negative
- benchmark: Optional {"good": x, "excellent": y} industry thresholds used for
  validation warnings

Framework definitions (GRI, SASB, TCFD, CSRD/ESRS) list the disclosure topics
per category and the metrics each framework requires for a complete
disclosure.
"""

CATEGORIES = ("environmental", "social", "governance")

STANDARD_METRICS = {
    "environmental": {
        "scope1Emissions": {
            "unit": "tCO2e", "framework": "GRI-305-1",
            "description": "Direct GHG emissions",
            "target": 10000, "lower_is_better": True,
        },
        "scope2Emissions": {
            "unit": "tCO2e", "framework": "GRI-305-2",
            "description": "Energy indirect GHG emissions",
            "target": 5000, "lower_is_better": True,
        },
        "scope3Emissions": {
            "unit": "tCO2e", "framework": "GRI-305-3",
            "description": "Other indirect GHG emissions",
            "target": 50000, "lower_is_better": True,
        },
        "emissionsChange": {
            "unit": "% YoY", "framework": "GRI-305-5",
            "description": "Year-over-year change in total emissions",
            "target": None, "allow_negative": True,
        },
        "energyConsumption": {
            "unit": "MWh", "framework": "GRI-302-1",
            "description": "Energy consumption within organization",
            "target": 20000, "lower_is_better": True,
        },
        "renewableEnergyPercentage": {
            "unit": "%", "framework": "GRI-302-1",
            "description": "Renewable energy share",
            "target": 100,
            "benchmark": {"good": 50, "excellent": 80},
        },
        "waterWithdrawal": {
            "unit": "m³", "framework": "GRI-303-3",
            "description": "Water withdrawal",
            "target": 100000, "lower_is_better": True,
        },
        "wasteGenerated": {
            "unit": "tonnes", "framework": "GRI-306-3",
            "description": "Waste generated",
            "target": 1000, "lower_is_better": True,
        },
        "wasteRecycledPercentage": {
            "unit": "%", "framework": "GRI-306-4",
            "description": "Share of waste diverted from disposal",
            "target": 100,
            "benchmark": {"good": 60, "excellent": 85},
        },
    },
    "social": {
        "totalEmployees": {
            "unit": "count", "framework": "GRI-2-7",
            "description": "Total number of employees",
            "target": None,
        },
        "newHires": {
            "unit": "count", "framework": "GRI-401-1",
            "description": "New employee hires",
            "target": None,
        },
        "turnoverRate": {
            "unit": "%", "framework": "GRI-401-1",
            "description": "Employee turnover rate",
            "target": 10, "lower_is_better": True,
            "benchmark": {"good": 15, "excellent": 8},
        },
        "femaleEmployeesPercentage": {
            "unit": "%", "framework": "GRI-405-1",
            "description": "Female employees percentage",
            "target": 50,
            "benchmark": {"good": 30, "excellent": 50},
        },
        "leadershipDiversityPercentage": {
            "unit": "%", "framework": "GRI-405-1",
            "description": "Share of leadership roles held by under-represented groups",
            "target": 40,
        },
        "lostTimeInjuryRate": {
            "unit": "rate", "framework": "GRI-403-9",
            "description": "Lost-time injury frequency rate",
            "target": 1, "lower_is_better": True,
            "benchmark": {"good": 2, "excellent": 1},
        },
        "trainingHoursPerEmployee": {
            "unit": "hours", "framework": "GRI-404-1",
            "description": "Average training hours per employee",
            "target": 40,
        },
        "headcountVariance": {
            "unit": "count", "framework": "GRI-2-7",
            "description": "Change in headcount versus prior year",
            "target": None, "allow_negative": True,
        },
    },
    "governance": {
        "boardSize": {
            "unit": "count", "framework": "GRI-2-9",
            "description": "Total board members",
            "target": None,
        },
        "independentDirectorsPercentage": {
            "unit": "%", "framework": "GRI-2-9",
            "description": "Independent directors percentage",
            "target": 75,
            "benchmark": {"good": 50, "excellent": 75},
        },
        "womenOnBoardPercentage": {
            "unit": "%", "framework": "GRI-405-1",
            "description": "Women on the board",
            "target": 40,
        },
        "ethicsTrainingCompletion": {
            "unit": "%", "framework": "GRI-205-2",
            "description": "Ethics training completion rate",
            "target": 100,
            "benchmark": {"good": 90, "excellent": 95},
        },
        "dataBreaches": {
            "unit": "count", "framework": "GRI-418-1",
            "description": "Substantiated data privacy breaches",
            "target": 0, "lower_is_better": True,
        },
        "revenue": {
            "unit": "USD", "framework": "GRI-201-1",
            "description": "Revenue (direct economic value generated)",
            "target": None,
        },
    },
}

# Name fragments that mark a metric as a delta / variance (may be negative)
DELTA_KEYWORDS = ("Change", "Delta", "Variance")

FRAMEWORKS = {
    "GRI": {
        "name": "GRI Standards",
        "description": "Global Reporting Initiative Standards",
        "categories": {
            "environmental": {
                "GRI-302": "Energy",
                "GRI-303": "Water and Effluents",
                "GRI-305": "Emissions",
                "GRI-306": "Waste",
            },
            "social": {
                "GRI-401": "Employment",
                "GRI-403": "Occupational Health and Safety",
                "GRI-405": "Diversity and Equal Opportunity",
            },
            "governance": {
                "GRI-2-9": "Governance structure and composition",
                "GRI-205": "Anti-corruption",
            },
        },
        "required_metrics": [
            "scope1Emissions", "scope2Emissions", "energyConsumption",
            "totalEmployees", "femaleEmployeesPercentage", "lostTimeInjuryRate",
            "boardSize", "independentDirectorsPercentage",
        ],
    },
    "SASB": {
        "name": "SASB Standards",
        "description": "Sustainability Accounting Standards Board",
        "categories": {
            "environmental": ["Energy Management", "GHG Emissions", "Water Management"],
            "social": ["Labor Practices", "Employee Health & Safety", "Human Rights"],
            "governance": [
                "Business Ethics", "Competitive Behavior",
                "Management of Legal & Regulatory Environment",
            ],
        },
        "required_metrics": [
            "scope1Emissions", "energyConsumption", "lostTimeInjuryRate",
            "ethicsTrainingCompletion",
        ],
        # Added on top of required_metrics when a sector is given
        "sector_metrics": {
            "technology": ["energyConsumption", "dataBreaches", "femaleEmployeesPercentage"],
            "manufacturing": ["scope1Emissions", "waterWithdrawal", "wasteGenerated"],
            "financial": ["dataBreaches", "ethicsTrainingCompletion", "womenOnBoardPercentage"],
        },
    },
    "TCFD": {
        "name": "TCFD Recommendations",
        "description": "Task Force on Climate-related Financial Disclosures",
        "pillars": ["Governance", "Strategy", "Risk Management", "Metrics and Targets"],
        "required_metrics": [
            "scope1Emissions", "scope2Emissions", "scope3Emissions",
            "energyConsumption", "renewableEnergyPercentage",
        ],
    },
    "CSRD": {
        "name": "CSRD/ESRS",
        "description": "Corporate Sustainability Reporting Directive",
        "standards": [
            "ESRS E1-E5 (Environmental)", "ESRS S1-S4 (Social)", "ESRS G1-G2 (Governance)",
        ],
        "required_metrics": [
            "scope1Emissions", "scope2Emissions", "scope3Emissions",
            "energyConsumption", "renewableEnergyPercentage", "waterWithdrawal",
            "wasteGenerated", "totalEmployees", "femaleEmployeesPercentage",
            "lostTimeInjuryRate", "trainingHoursPerEmployee", "ethicsTrainingCompletion",
        ],
    },
}


def get_metric(category, metric_name):
    """Return the catalog entry for a metric, or None if it is not standard."""
    return STANDARD_METRICS.get(category, {}).get(metric_name)


def find_metric(metric_name):
    """Look up a metric by name across categories. Returns (category, entry) or (None, None)."""
    for category, metrics in STANDARD_METRICS.items():
        if metric_name in metrics:
            return category, metrics[metric_name]
    return None, None


def is_delta_metric(metric_name):
    _, entry = find_metric(metric_name)
    if entry and entry.get("allow_negative"):
        return True
    return any(k in metric_name for k in DELTA_KEYWORDS)


def is_percentage_metric(metric_name):
    _, entry = find_metric(metric_name)
    if entry:
        return entry["unit"] == "%"
    return "Percentage" in metric_name


def default_targets():
    """Scoring targets for every scored catalog metric: {name: (target, lower_is_better)}."""
    targets = {}
    for metrics in STANDARD_METRICS.values():
        for name, entry in metrics.items():
            if entry.get("target") is not None:
                targets[name] = (entry["target"], entry.get("lower_is_better", False))
    return targets


def informational_metrics():
    """Catalog metrics stored for reporting but excluded from category scores."""
    return {
        name
        for metrics in STANDARD_METRICS.values()
        for name, entry in metrics.items()
        if entry.get("target") is None
    }
