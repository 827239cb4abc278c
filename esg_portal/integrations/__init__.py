"""
External data sources.

`build_source(kind, config)` returns the source the app is configured for:
live ERP/HR connectors when INTEGRATION_MODE is "live", otherwise a
StaticDataSource serving the sample figures below.
"""

from esg_portal.errors import IntegrationError
from esg_portal.integrations.base import ExternalDataSource, HTTPDataSource, StaticDataSource
from esg_portal.integrations.erp import ERPConnector
from esg_portal.integrations.hr import HRConnector

SAMPLE_METRICS = {
    "erp": {
        "environmental": {
            "energyConsumption": (18500, "MWh"),
            "renewableEnergyPercentage": (42, "%"),
            "scope2Emissions": (9250, "tCO2e"),
        },
        "governance": {
            "revenue": (48_000_000, "USD"),
        },
    },
    "hr": {
        "social": {
            "totalEmployees": (1250, "count"),
            "newHires": (140, "count"),
            "turnoverRate": (11, "%"),
            "femaleEmployeesPercentage": (44, "%"),
            "leadershipDiversityPercentage": (31, "%"),
            "lostTimeInjuryRate": (0.8, "rate"),
            "trainingHoursPerEmployee": (26, "hours"),
        },
    },
}

_CONNECTORS = {
    "erp": (ERPConnector, "ERP"),
    "hr": (HRConnector, "HR"),
}


SOURCE_KINDS = tuple(_CONNECTORS)


def build_source(kind, config):
    if kind not in _CONNECTORS:
        raise IntegrationError(kind, "unknown integration type")
    connector_cls, prefix = _CONNECTORS[kind]
    system = config.get(f"{prefix}_SYSTEM", "")

    if config.get("INTEGRATION_MODE") != "live":
        return StaticDataSource(system, kind, SAMPLE_METRICS[kind])

    base_url = config.get(f"{prefix}_BASE_URL")
    if not base_url:
        raise IntegrationError(system or prefix, f"{prefix}_BASE_URL is not configured")
    return connector_cls(
        base_url,
        config.get(f"{prefix}_API_KEY", ""),
        system,
        timeout=config.get("INTEGRATION_TIMEOUT", 15),
    )


__all__ = [
    "ExternalDataSource",
    "HTTPDataSource",
    "StaticDataSource",
    "ERPConnector",
    "HRConnector",
    "SAMPLE_METRICS",
    "SOURCE_KINDS",
    "build_source",
]
