from flask import Blueprint, abort, jsonify, request
from flask_login import login_required, current_user

from esg_portal import db
from esg_portal.cache import invalidate_user_views
from esg_portal.companies.routes import get_company_or_404
from esg_portal.errors import ValidationError
from esg_portal.frameworks import framework_coverage, framework_summary, metric_references
from esg_portal.metrics_catalog import FRAMEWORKS, find_metric
from esg_portal.models import AuditEntry, Company, ComplianceDocument, MetricRecord, ValidationRule
from esg_portal.schemas import (
    ComplianceValidateRequest,
    DocumentCreate,
    DocumentStatusUpdate,
    parse_body,
)
from esg_portal.scoring import compliance_rate
from esg_portal.validation import validate_metric

compliance_bp = Blueprint("compliance", __name__, url_prefix="/api/compliance")


def _get_document_or_404(document_id):
    document = db.session.get(ComplianceDocument, document_id)
    if not document or not document.company.user_can(current_user):
        abort(404, description="Document not found.")
    return document


@compliance_bp.route("/documents")
@login_required
def list_documents():
    company_id = request.args.get("company_id", type=int)
    if company_id is not None:
        query = get_company_or_404(company_id).documents
    elif current_user.is_admin:
        query = ComplianceDocument.query
    else:
        query = ComplianceDocument.query.join(Company).filter(Company.created_by == current_user.id)
    status = request.args.get("status")
    if status and status not in ComplianceDocument.STATUSES:
        raise ValidationError([f"Unknown status: {status}"])
    if status:
        query = query.filter(ComplianceDocument.status == status)
    documents = query.order_by(ComplianceDocument.due_date.asc(), ComplianceDocument.id.asc()).all()
    return jsonify({
        "documents": [d.to_dict() for d in documents],
        "compliance_rate": compliance_rate(documents),
    })


@compliance_bp.route("/documents", methods=["POST"])
@login_required
def create_document():
    body = parse_body(DocumentCreate)
    company = get_company_or_404(body.company_id)
    document = ComplianceDocument(
        company_id=company.id,
        title=body.title,
        category=body.category,
        framework=body.framework.upper(),
        due_date=body.due_date,
        uploaded_by=current_user.id,
    )
    db.session.add(document)
    db.session.flush()
    AuditEntry.record(current_user.id, "create", "compliance_document", document.id, document.title)
    db.session.commit()
    invalidate_user_views(current_user.id)
    return jsonify(document.to_dict()), 201


@compliance_bp.route("/documents/<int:document_id>", methods=["PATCH"])
@login_required
def update_document_status(document_id):
    document = _get_document_or_404(document_id)
    body = parse_body(DocumentStatusUpdate)
    previous = document.status
    document.status = body.status
    AuditEntry.record(
        current_user.id, "status_change", "compliance_document", document.id,
        f"{previous} -> {body.status}",
    )
    db.session.commit()
    invalidate_user_views(document.company.created_by)
    return jsonify(document.to_dict())


@compliance_bp.route("/frameworks")
@login_required
def list_frameworks():
    return jsonify(framework_summary())


@compliance_bp.route("/frameworks/<string:framework>/coverage/<int:company_id>")
@login_required
def coverage(framework, company_id):
    company = get_company_or_404(company_id)
    if framework.upper() not in FRAMEWORKS:
        abort(404, description=f"Unknown framework: {framework}")
    reported = {
        name for (name,) in
        db.session.query(MetricRecord.metric_name).filter(MetricRecord.company_id == company.id).distinct()
    }
    return jsonify(framework_coverage(framework, reported, sector=company.sector or None))


@compliance_bp.route("/metrics/<string:metric_name>/references")
@login_required
def references(metric_name):
    category, entry = find_metric(metric_name)
    if not entry:
        abort(404, description=f"Unknown metric: {metric_name}")
    return jsonify({
        "metric": metric_name,
        "category": category,
        "unit": entry["unit"],
        "references": metric_references(metric_name),
    })


@compliance_bp.route("/validate", methods=["POST"])
@login_required
def validate_data():
    """Validate a flat {metric_name: value} dict against the catalog and active rules."""
    body = parse_body(ComplianceValidateRequest)
    rules = ValidationRule.active_rules()
    results = []
    for metric, value in body.data.items():
        category, _ = find_metric(metric)
        if category is None:
            continue
        result = validate_metric(category, metric, value, rule=rules.get((category, metric)))
        results.append({
            "metric": metric,
            "is_valid": result.is_valid,
            "message": "Valid" if result.is_valid else "; ".join(result.errors),
        })
    return jsonify({
        "framework": body.framework,
        "overall_valid": all(r["is_valid"] for r in results),
        "results": results,
    })
