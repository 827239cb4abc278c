"""
KPI queries: load stored metrics and documents, run the score aggregator.

Scores are recomputed from MetricRecord rows on every call; the latest
record per (company, year, category, metric) is the one scored.
"""

from collections import Counter

from esg_portal import db
from esg_portal.metrics_catalog import CATEGORIES, default_targets, informational_metrics
from esg_portal.models import Company, ComplianceDocument, MetricRecord
from esg_portal.scoring import MetricInput, compute_scores, latest_records


def metric_query(user, company_id=None, reporting_year=None):
    """MetricRecord query scoped to what `user` may see."""
    query = MetricRecord.query
    if not user.is_admin:
        query = query.filter(MetricRecord.user_id == user.id)
    if company_id is not None:
        query = query.filter(MetricRecord.company_id == company_id)
    if reporting_year is not None:
        query = query.filter(MetricRecord.reporting_year == reporting_year)
    return query


def ordered_records(query):
    return query.order_by(MetricRecord.created_at.asc(), MetricRecord.id.asc()).all()


def documents_for(company_ids):
    if not company_ids:
        return []
    return ComplianceDocument.query.filter(ComplianceDocument.company_id.in_(company_ids)).all()


def score_records(records, documents, company_id=None):
    return compute_scores(
        latest_records(records),
        documents,
        default_targets=default_targets(),
        skip_metrics=informational_metrics(),
        company_id=company_id,
    )


def score_company(company, reporting_year=None):
    """Current ScoreSnapshot for one company (optionally one reporting year)."""
    query = MetricRecord.query.filter(MetricRecord.company_id == company.id)
    if reporting_year is not None:
        query = query.filter(MetricRecord.reporting_year == reporting_year)
    return score_records(ordered_records(query), company.documents.all(), company.id)


def user_kpis(user, company_id=None, reporting_year=None):
    """KPI payload for the dashboard: recomputed scores across the user's companies."""
    records = ordered_records(metric_query(user, company_id, reporting_year))
    company_ids = sorted({r.company_id for r in records})
    if company_id is not None:
        company_ids = [company_id]
    snapshot = score_records(records, documents_for(company_ids), company_id)

    kpis = snapshot.to_dict()
    kpis["companies"] = len(company_ids)
    if company_id is not None:
        company = db.session.get(Company, company_id)
        kpis["company_name"] = company.name if company else None
    return kpis


def user_analytics(user, company_id=None):
    """Category distribution, per-year score trend and recent entries."""
    records = ordered_records(metric_query(user, company_id))
    distribution = Counter(r.category for r in records)

    by_year = {}
    for r in records:
        by_year.setdefault(r.reporting_year, []).append(r)
    company_ids = sorted({r.company_id for r in records})
    documents = documents_for(company_ids)
    yearly = []
    for year in sorted(by_year):
        snapshot = score_records(by_year[year], documents, company_id)
        yearly.append({
            "reporting_year": year,
            "environmental": snapshot.environmental_score,
            "social": snapshot.social_score,
            "governance": snapshot.governance_score,
            "overall": snapshot.overall_score,
            "entries": snapshot.total_entries,
        })

    current = score_records(records, documents, company_id)
    return {
        "kpis": current.to_dict(),
        "category_distribution": {c: distribution.get(c, 0) for c in CATEGORIES},
        "yearly_trend": yearly,
        "recent_entries": [r.to_dict() for r in reversed(records[-10:])],
        "total_entries": len(records),
    }


def as_metric_inputs(records):
    return [
        MetricInput(
            category=r.category,
            metric_name=r.metric_name,
            value=r.value,
            unit=r.unit,
            target=r.target,
            reporting_year=r.reporting_year,
            company_id=r.company_id,
        )
        for r in records
    ]
