"""
ESG Score Aggregator

Turns a flat list of metric records into per-category scores, an overall
score and a compliance rate.

Records and documents may be ORM rows, MetricInput instances or plain dicts;
fields are read by name. Scoring per record:
- with a target:    min(max(value / target * 100, 0), 100)
- lower-is-better:  min(max(target / value * 100, 0), 100), value <= 0 scores 100
- without a target: the raw value

The overall score is the mean of the three category scores, and 0 unless
every category has at least one scored record.
"""

import json
import math
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Optional

from esg_portal.metrics_catalog import CATEGORIES

APPROVED_STATUS = "Approved"


@dataclass
class MetricInput:
    category: str
    metric_name: str
    value: float
    unit: Optional[str] = None
    target: Optional[float] = None
    reporting_year: Optional[int] = None
    company_id: Optional[int] = None

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        return cls(
            category=data["category"],
            metric_name=data["metric_name"],
            value=data["value"],
            unit=data.get("unit"),
            target=data.get("target"),
            reporting_year=data.get("reporting_year"),
            company_id=data.get("company_id"),
        )


@dataclass
class ScoreSnapshot:
    company_id: Optional[int] = None
    environmental_score: float = 0.0
    social_score: float = 0.0
    governance_score: float = 0.0
    overall_score: float = 0.0
    compliance_rate: int = 0
    total_entries: int = 0
    calculated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )

    def category_scores(self):
        return {
            "environmental": self.environmental_score,
            "social": self.social_score,
            "governance": self.governance_score,
        }

    def to_dict(self):
        data = asdict(self)
        data["calculated_at"] = self.calculated_at.isoformat()
        return data


def _field(obj, name):
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def as_number(value):
    """Float value, or None for missing / non-numeric / NaN input."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def round_half_up(value, digits=0):
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def normalize(value, target, lower_is_better=False):
    """Score a value against its target on a 0-100 scale."""
    if lower_is_better:
        if value <= 0:
            return 100.0
        ratio = target / value * 100
    else:
        if target <= 0:
            return 100.0
        ratio = value / target * 100
    return min(max(ratio, 0.0), 100.0)


def compliance_rate(documents):
    """Percentage of approved documents, rounded to a whole number."""
    documents = list(documents or [])
    if not documents:
        return 0
    approved = sum(
        1 for d in documents
        if str(_field(d, "status") or "").strip().lower() == APPROVED_STATUS.lower()
    )
    return int(round_half_up(100 * approved / len(documents)))


def latest_records(records):
    """Keep the last record per (company, year, category, metric); input order decides."""
    latest = {}
    for record in records:
        key = (
            _field(record, "company_id"),
            _field(record, "reporting_year"),
            _field(record, "category"),
            _field(record, "metric_name"),
        )
        latest.pop(key, None)
        latest[key] = record
    return list(latest.values())


def compute_scores(records, documents=(), default_targets=None, skip_metrics=(), company_id=None):
    """
    Aggregate metric records into a ScoreSnapshot.

    Args:
        records: iterable of metric records (category, metric_name, value, target)
        documents: iterable of compliance documents (status)
        default_targets: {metric_name: (target, lower_is_better)} used when a
            record carries no target of its own
        skip_metrics: metric names left out of scoring when they have no target
        company_id: stamped onto the snapshot

    Never raises for empty or partial input; missing categories score 0.
    """
    default_targets = default_targets or {}
    scored = {c: [] for c in CATEGORIES}
    total_entries = 0

    for record in records:
        total_entries += 1
        category = _field(record, "category")
        if category not in scored:
            continue
        value = as_number(_field(record, "value"))
        if value is None:
            continue

        name = _field(record, "metric_name")
        default = default_targets.get(name)
        target = as_number(_field(record, "target"))
        lower_is_better = bool(default[1]) if default else False
        if target is None and default:
            target = as_number(default[0])

        if target is not None:
            scored[category].append(normalize(value, target, lower_is_better))
        elif name not in skip_metrics:
            scored[category].append(value)

    averages = {
        c: (sum(values) / len(values) if values else 0.0)
        for c, values in scored.items()
    }
    if all(scored[c] for c in CATEGORIES):
        overall = sum(averages.values()) / len(CATEGORIES)
    else:
        overall = 0.0

    return ScoreSnapshot(
        company_id=company_id,
        environmental_score=round(averages["environmental"], 2),
        social_score=round(averages["social"], 2),
        governance_score=round(averages["governance"], 2),
        overall_score=round(overall, 2),
        compliance_rate=compliance_rate(documents),
        total_entries=total_entries,
    )


def dumps_records(records):
    """Serialize MetricInput records to JSON (used for exports and replays)."""
    return json.dumps([r.to_dict() for r in records])


def loads_records(payload):
    return [MetricInput.from_dict(d) for d in json.loads(payload)]
