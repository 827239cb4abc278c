from flask import Blueprint, abort, jsonify, request
from flask_login import login_required, current_user

from esg_portal import db
from esg_portal.models import (
    AuditEntry,
    Company,
    ComplianceDocument,
    EmissionRecord,
    MetricRecord,
    ScoreRecord,
    User,
)

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000


def _require_admin():
    if not current_user.is_admin:
        abort(403, description="Access denied.")


def _limit():
    return max(1, min(request.args.get("limit", DEFAULT_LIMIT, type=int), MAX_LIMIT))


@admin_bp.route("/users")
@login_required
def users():
    _require_admin()
    rows = User.query.order_by(User.created_at.desc(), User.id.desc()).all()
    result = []
    for u in rows:
        data = u.to_dict()
        data["created_at"] = u.created_at.isoformat() if u.created_at else None
        data["companies"] = u.companies.count()
        result.append(data)
    return jsonify(result)


@admin_bp.route("/companies")
@login_required
def companies():
    _require_admin()
    rows = Company.query.order_by(Company.name).all()
    return jsonify([c.to_dict() for c in rows])


@admin_bp.route("/esg-data")
@login_required
def esg_data():
    """Every stored metric record, newest first, with the submitting user's email."""
    _require_admin()
    rows = (
        db.session.query(MetricRecord, User.email)
        .join(User, MetricRecord.user_id == User.id)
        .order_by(MetricRecord.created_at.desc(), MetricRecord.id.desc())
        .limit(_limit())
        .all()
    )
    result = []
    for record, email in rows:
        data = record.to_dict()
        data["user_email"] = email
        result.append(data)
    return jsonify(result)


@admin_bp.route("/esg-scores")
@login_required
def esg_scores():
    _require_admin()
    rows = (
        db.session.query(ScoreRecord, User.email)
        .join(User, ScoreRecord.user_id == User.id)
        .order_by(ScoreRecord.calculated_at.desc(), ScoreRecord.id.desc())
        .limit(_limit())
        .all()
    )
    result = []
    for score, email in rows:
        data = score.to_dict()
        data["user_email"] = email
        result.append(data)
    return jsonify(result)


@admin_bp.route("/audit")
@login_required
def audit_trail():
    """Audit entries across all users; filter with ?user_id= and ?entity_type=."""
    _require_admin()
    query = AuditEntry.query
    user_id = request.args.get("user_id", type=int)
    if user_id is not None:
        query = query.filter(AuditEntry.user_id == user_id)
    entity_type = request.args.get("entity_type")
    if entity_type:
        query = query.filter(AuditEntry.entity_type == entity_type)
    entries = query.order_by(AuditEntry.created_at.desc(), AuditEntry.id.desc()).limit(_limit()).all()
    return jsonify([e.to_dict() for e in entries])


@admin_bp.route("/stats")
@login_required
def stats():
    _require_admin()
    return jsonify({
        "users": User.query.count(),
        "companies": Company.query.count(),
        "esg_data": MetricRecord.query.count(),
        "esg_scores": ScoreRecord.query.count(),
        "documents": ComplianceDocument.query.count(),
        "emission_records": EmissionRecord.query.count(),
        "audit_entries": AuditEntry.query.count(),
    })
