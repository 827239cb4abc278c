"""
ESG Report Builder

Assembles the report payload for a company:
- Header (company, reporting year, generation time)
- Category and overall scores with compliance rate
- Latest reported metrics per category with framework references
- Emissions totals by scope
- Framework coverage (GRI / SASB / TCFD / CSRD)
- Gaps: scored metrics below GAP_THRESHOLD against their target
- Compliance document status, including overdue items
- Readiness verdict
"""

from datetime import date, datetime, timezone

from esg_portal.frameworks import all_framework_coverage, metric_references
from esg_portal.metrics_catalog import CATEGORIES, default_targets, get_metric
from esg_portal.scoring import as_number, latest_records, normalize

# Metric score (0-100) below which a metric is reported as a gap
GAP_THRESHOLD = 60

VERDICTS = {
    "on_track": "On Track",
    "minor_gaps": "Minor Gaps",
    "action_needed": "Action Needed",
    "significant_work": "Significant Work Required",
}


def find_gaps(records, targets=None):
    """Scored metrics whose target attainment is below GAP_THRESHOLD, worst first."""
    targets = targets if targets is not None else default_targets()
    gaps = []
    for r in records:
        value = as_number(r.value)
        default = targets.get(r.metric_name)
        target = as_number(r.target)
        if target is None and default:
            target = default[0]
        if value is None or target is None:
            continue
        lower_is_better = bool(default[1]) if default else False
        score = normalize(value, target, lower_is_better)
        if score < GAP_THRESHOLD:
            gaps.append({
                "category": r.category,
                "metric": r.metric_name,
                "value": value,
                "target": target,
                "score": round(score, 1),
            })
    return sorted(gaps, key=lambda g: g["score"])


def readiness_verdict(overall_score, gaps):
    if overall_score >= 70 and not gaps:
        verdict = "on_track"
    elif overall_score >= 50 and len(gaps) <= 3:
        verdict = "minor_gaps"
    elif overall_score >= 30:
        verdict = "action_needed"
    else:
        verdict = "significant_work"
    return verdict, VERDICTS[verdict]


def _document_summary(documents, today=None):
    today = today or date.today()
    by_status = {}
    overdue = []
    for d in documents:
        by_status[d.status] = by_status.get(d.status, 0) + 1
        if d.due_date and d.due_date < today and d.status != "Approved":
            overdue.append({"id": d.id, "title": d.title, "due_date": d.due_date.isoformat()})
    return {"total": len(documents), "by_status": by_status, "overdue": overdue}


def build_report(company, snapshot, records, emissions_totals, documents, reporting_year=None):
    """
    Build the report payload for one company.

    Args:
        company: Company model instance
        snapshot: ScoreSnapshot for the company / year
        records: MetricRecord rows, oldest first
        emissions_totals: dict from EmissionRecord.totals_by_scope()
        documents: ComplianceDocument rows
        reporting_year: year the report covers (None = all years)

    Returns dict with all report sections.
    """
    current = latest_records(records)

    metrics = {c: {} for c in CATEGORIES}
    for r in current:
        if r.category not in metrics:
            continue
        entry = get_metric(r.category, r.metric_name)
        metrics[r.category][r.metric_name] = {
            "value": r.value,
            "unit": r.unit or (entry["unit"] if entry else ""),
            "reporting_year": r.reporting_year,
            "description": entry["description"] if entry else r.metric_name,
            "references": metric_references(r.metric_name),
        }

    gaps = find_gaps(current)
    verdict, verdict_label = readiness_verdict(snapshot.overall_score, gaps)
    coverage = all_framework_coverage(
        {r.metric_name for r in current}, sector=company.sector or None
    )

    return {
        "company": company.to_dict(),
        "reporting_year": reporting_year,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "scores": snapshot.to_dict(),
        "metrics": metrics,
        "emissions": emissions_totals,
        "frameworks": coverage,
        "gaps": gaps,
        "documents": _document_summary(documents),
        "verdict": verdict,
        "verdict_label": verdict_label,
    }
