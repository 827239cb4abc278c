from flask import Blueprint, Response as FlaskResponse, jsonify, request
from flask_login import login_required, current_user

from esg_portal import db
from esg_portal.cache import cached_response, invalidate_user_views
from esg_portal.companies.routes import get_company_or_404, get_or_create_company
from esg_portal.errors import ValidationError
from esg_portal.kpis import (
    as_metric_inputs,
    metric_query,
    ordered_records,
    score_company,
    user_analytics,
    user_kpis,
)
from esg_portal.metrics_catalog import STANDARD_METRICS, get_metric
from esg_portal.models import AuditEntry, MetricRecord, ScoreRecord, ValidationRule
from esg_portal.schemas import (
    BenchmarkRequest,
    ESGSubmission,
    MetricValidationRequest,
    TargetTrackRequest,
    parse_body,
)
from esg_portal.scoring import MetricInput, dumps_records
from esg_portal.targets import benchmark, track_target
from esg_portal.validation import validate_metric, validate_submission

esg_bp = Blueprint("esg", __name__, url_prefix="/api/esg")


def _filters():
    company_id = request.args.get("company_id", type=int)
    year = request.args.get("year", type=int)
    if company_id is not None:
        get_company_or_404(company_id)
    return company_id, year


def store_metrics(company, reporting_year, metric_inputs, source="manual", units=None, targets=None):
    """Add MetricRecord rows for validated inputs and persist a fresh score snapshot."""
    units = units or {}
    targets = targets or {}
    for m in metric_inputs:
        entry = get_metric(m.category, m.metric_name)
        db.session.add(MetricRecord(
            company_id=company.id,
            user_id=current_user.id,
            reporting_year=reporting_year,
            category=m.category,
            metric_name=m.metric_name,
            value=m.value,
            unit=m.unit or units.get(m.metric_name) or (entry["unit"] if entry else ""),
            target=m.target if m.target is not None else targets.get(m.metric_name),
            source=source,
        ))
    db.session.flush()

    snapshot = score_company(company, reporting_year)
    db.session.add(ScoreRecord.from_snapshot(snapshot, current_user.id, reporting_year))
    return snapshot


@esg_bp.route("/metrics")
@login_required
def metric_catalog():
    """Standard metric catalog for the data-entry wizard."""
    return jsonify(STANDARD_METRICS)


@esg_bp.route("/data", methods=["POST"])
@login_required
def submit_data():
    body = parse_body(ESGSubmission)
    accepted = validate_submission(
        body.metrics_by_category(), units=body.units, rules=ValidationRule.active_rules()
    )
    if not accepted:
        raise ValidationError(["No metric values submitted."])

    company, _ = get_or_create_company(body.company_name, body.sector, body.region)

    inputs = [
        MetricInput(category=category, metric_name=name, value=result.value)
        for category, results in accepted.items()
        for name, result in results.items()
    ]
    snapshot = store_metrics(
        company, body.reporting_year, inputs, units=body.units, targets=body.targets
    )
    AuditEntry.record(
        current_user.id, "submit", "esg_data", company.id,
        f"{len(inputs)} metric(s) for {body.reporting_year}",
    )
    db.session.commit()
    invalidate_user_views(current_user.id)

    warnings = {
        f"{category}.{name}": result.warnings
        for category, results in accepted.items()
        for name, result in results.items()
        if result.warnings
    }
    return jsonify({
        "success": True,
        "message": "ESG data saved successfully",
        "company": company.to_dict(),
        "saved": len(inputs),
        "scores": snapshot.to_dict(),
        "warnings": warnings,
    }), 201


@esg_bp.route("/data")
@login_required
def list_data():
    company_id, year = _filters()
    query = metric_query(current_user, company_id, year)
    category = request.args.get("category")
    if category:
        query = query.filter(MetricRecord.category == category)
    records = query.order_by(MetricRecord.created_at.desc(), MetricRecord.id.desc()).all()
    return jsonify([r.to_dict() for r in records])


@esg_bp.route("/export")
@login_required
def export_data():
    """Metric records as a JSON list of plain metric inputs."""
    company_id, year = _filters()
    records = ordered_records(metric_query(current_user, company_id, year))
    return FlaskResponse(dumps_records(as_metric_inputs(records)), mimetype="application/json")


@esg_bp.route("/scores")
@login_required
def latest_scores():
    company_id, _ = _filters()
    query = ScoreRecord.query
    if not current_user.is_admin:
        query = query.filter(ScoreRecord.user_id == current_user.id)
    if company_id is not None:
        query = query.filter(ScoreRecord.company_id == company_id)
    latest = query.order_by(ScoreRecord.calculated_at.desc(), ScoreRecord.id.desc()).first()
    return jsonify(latest.to_dict() if latest else {})


@esg_bp.route("/kpis")
@login_required
@cached_response
def kpis():
    company_id, year = _filters()
    return jsonify(user_kpis(current_user, company_id, year))


@esg_bp.route("/analytics")
@login_required
@cached_response
def analytics():
    company_id, _ = _filters()
    return jsonify({"success": True, "data": user_analytics(current_user, company_id)})


@esg_bp.route("/validate", methods=["POST"])
@login_required
def validate():
    """Validate a single metric value without storing it."""
    body = parse_body(MetricValidationRequest)
    rule = ValidationRule.active_rules().get((body.category, body.metric))
    result = validate_metric(body.category, body.metric, body.value, body.unit, rule=rule)
    return jsonify(result.to_dict())


@esg_bp.route("/targets/track", methods=["POST"])
@login_required
def track():
    """Straight-line trajectory from the current value to a target year."""
    body = parse_body(TargetTrackRequest)
    return jsonify(track_target(body.current_value, body.target_value, body.target_year, body.metric or None))


@esg_bp.route("/benchmark", methods=["POST"])
@login_required
def compare_to_industry():
    body = parse_body(BenchmarkRequest)
    return jsonify(benchmark(body.sector, body.metrics))
