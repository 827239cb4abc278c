from flask import Blueprint, abort, jsonify
from flask_login import login_required, current_user

from esg_portal import db
from esg_portal.cache import invalidate_user_views
from esg_portal.errors import ValidationError
from esg_portal.models import Company, AuditEntry
from esg_portal.schemas import CompanyCreate, parse_body

companies_bp = Blueprint("companies", __name__, url_prefix="/api/companies")


def get_company_or_404(company_id):
    """Company visible to the current user (owner or admin), else 404."""
    company = db.session.get(Company, company_id)
    if not company or not company.user_can(current_user):
        abort(404, description="Company not found.")
    return company


def get_or_create_company(name, sector="", region="Global"):
    company = Company.query.filter_by(name=name, created_by=current_user.id).first()
    if company:
        return company, False
    company = Company(name=name, sector=sector, region=region or "Global", created_by=current_user.id)
    db.session.add(company)
    db.session.flush()
    return company, True


@companies_bp.route("")
@login_required
def list_companies():
    query = Company.query if current_user.is_admin else current_user.companies
    companies = query.order_by(Company.name).all()
    return jsonify([c.to_dict() for c in companies])


@companies_bp.route("", methods=["POST"])
@login_required
def create_company():
    body = parse_body(CompanyCreate)
    company, created = get_or_create_company(body.name, body.sector, body.region)
    if not created:
        raise ValidationError([f"Company '{body.name}' already exists."])
    AuditEntry.record(current_user.id, "create", "company", company.id, company.name)
    db.session.commit()
    invalidate_user_views(current_user.id)
    return jsonify(company.to_dict()), 201


@companies_bp.route("/<int:company_id>")
@login_required
def get_company(company_id):
    company = get_company_or_404(company_id)
    data = company.to_dict()
    latest = company.latest_score()
    data["latest_score"] = latest.to_dict() if latest else None
    return jsonify(data)
