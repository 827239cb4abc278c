"""
Compliance framework mapping (GRI / SASB / TCFD / CSRD).

Coverage is the share of a framework's required metrics that a company has
reported, with the missing ones turned into recommendations.
"""

from esg_portal.metrics_catalog import FRAMEWORKS, find_metric


def required_metrics(framework, sector=None):
    definition = FRAMEWORKS.get(framework)
    if not definition:
        return []
    required = list(definition["required_metrics"])
    if sector:
        for name in definition.get("sector_metrics", {}).get(sector.lower(), []):
            if name not in required:
                required.append(name)
    return required


def framework_coverage(framework, reported, sector=None):
    """
    Score how completely `reported` metrics cover a framework.

    Args:
        framework: "GRI", "SASB", "TCFD" or "CSRD" (case-insensitive)
        reported: iterable of metric names with a reported value
        sector: optional sector for SASB industry-specific metrics

    Returns {"framework", "score", "present", "missing", "recommendations"}.
    Unknown frameworks score 0 with empty lists.
    """
    key = (framework or "").upper()
    required = required_metrics(key, sector)
    if not required:
        return {"framework": key, "score": 0, "present": [], "missing": [], "recommendations": []}

    reported = set(reported)
    present = [m for m in required if m in reported]
    missing = [m for m in required if m not in reported]
    return {
        "framework": key,
        "score": round(len(present) / len(required) * 100),
        "present": present,
        "missing": missing,
        "recommendations": [f"Add {m} for {key} compliance" for m in missing],
    }


def all_framework_coverage(reported, sector=None):
    reported = set(reported)
    return {fw: framework_coverage(fw, reported, sector) for fw in FRAMEWORKS}


def metric_references(metric_name):
    """Framework references for a metric: its GRI disclosure plus every framework requiring it."""
    _, entry = find_metric(metric_name)
    refs = []
    if entry:
        refs.append(entry["framework"])
    for key, definition in FRAMEWORKS.items():
        if metric_name in definition["required_metrics"]:
            refs.append(key)
    return refs


def framework_summary():
    """Framework table without the internal required-metric lists, for the API."""
    return {
        key: {k: v for k, v in definition.items() if k not in ("required_metrics", "sector_metrics")}
        for key, definition in FRAMEWORKS.items()
    }
