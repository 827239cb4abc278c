from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from esg_portal.cache import cached_response
from esg_portal.kpis import user_kpis
from esg_portal.models import AuditEntry, Company, ComplianceDocument, MetricRecord, User

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.route("")
@login_required
@cached_response
def index():
    if current_user.is_admin:
        companies = Company.query.order_by(Company.name).all()
        total_users = User.query.count()
    else:
        companies = current_user.companies.order_by(Company.name).all()
        total_users = None

    company_ids = [c.id for c in companies]
    documents = (
        ComplianceDocument.query.filter(ComplianceDocument.company_id.in_(company_ids)).all()
        if company_ids else []
    )

    stats = {
        "total_companies": len(companies),
        "total_entries": MetricRecord.query.filter(MetricRecord.company_id.in_(company_ids)).count()
        if company_ids else 0,
        "documents_pending": sum(1 for d in documents if d.status == "Pending Review"),
        "documents_approved": sum(1 for d in documents if d.status == "Approved"),
        "documents_rejected": sum(1 for d in documents if d.status == "Rejected"),
        "total_users": total_users,
    }

    # Latest stored snapshot per company
    company_scores = []
    for c in companies:
        latest = c.latest_score()
        company_scores.append({
            "company_id": c.id,
            "company_name": c.name,
            "overall_score": latest.overall_score if latest else 0,
            "calculated_at": latest.calculated_at.isoformat() if latest else None,
        })

    recent_activity = (
        AuditEntry.query.filter_by(user_id=current_user.id)
        .order_by(AuditEntry.created_at.desc(), AuditEntry.id.desc())
        .limit(10)
        .all()
    )

    return jsonify({
        "kpis": user_kpis(current_user),
        "stats": stats,
        "company_scores": company_scores,
        "recent_activity": [a.to_dict() for a in recent_activity],
    })
