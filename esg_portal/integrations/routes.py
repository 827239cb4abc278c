import logging

from flask import Blueprint, abort, current_app, jsonify
from flask_login import login_required, current_user

from esg_portal import db
from esg_portal.cache import invalidate_user_views
from esg_portal.companies.routes import get_company_or_404
from esg_portal.errors import ValidationError
from esg_portal.integrations import SOURCE_KINDS, build_source
from esg_portal.models import AuditEntry
from esg_portal.schemas import SyncRequest, parse_body
from esg_portal.validation import validate_metric

logger = logging.getLogger(__name__)

integrations_bp = Blueprint("integrations", __name__, url_prefix="/api/integrations")


def _source_for(kind):
    if kind not in SOURCE_KINDS:
        abort(404, description=f"Unknown integration: {kind}")
    return build_source(kind, current_app.config)


@integrations_bp.route("/<string:kind>")
@login_required
def status(kind):
    source = _source_for(kind)
    return jsonify(source.describe())


@integrations_bp.route("/<string:kind>/sync", methods=["POST"])
@login_required
def sync(kind):
    """Pull metrics from an ERP / HR source and store them like a manual submission."""
    from esg_portal.esg.routes import store_metrics

    body = parse_body(SyncRequest)
    company = get_company_or_404(body.company_id)
    source = _source_for(kind)
    metrics = source.fetch(body.reporting_year)

    errors = []
    for m in metrics:
        result = validate_metric(m.category, m.metric_name, m.value)
        errors.extend(f"{m.category}.{m.metric_name}: {e}" for e in result.errors)
    if errors:
        raise ValidationError(errors, message=f"{source.system} returned invalid data")

    snapshot = store_metrics(company, body.reporting_year, metrics, source=kind)
    AuditEntry.record(
        current_user.id, "sync", "integration", company.id,
        f"{source.system} ({kind}): {len(metrics)} metric(s)",
    )
    db.session.commit()
    invalidate_user_views(current_user.id)
    logger.info(f"Synced {len(metrics)} metric(s) from {source.system} for company {company.id}")

    return jsonify({
        "success": True,
        "source": source.describe(),
        "synced": [m.to_dict() for m in metrics],
        "scores": snapshot.to_dict(),
    })
