from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required, current_user

from esg_portal import db
from esg_portal.companies.routes import get_company_or_404
from esg_portal.emissions import (
    GRID_FACTORS,
    SCOPE1_FACTORS,
    SCOPE3_DEFAULT_FACTOR,
    SCOPE3_FACTORS,
    compute_emissions,
    validate_ghg_totals,
)
from esg_portal.models import AuditEntry, EmissionRecord
from esg_portal.schemas import EmissionRecordCreate, EmissionsRequest, parse_body

emissions_bp = Blueprint("emissions", __name__, url_prefix="/api/emissions")


@emissions_bp.route("/calculate", methods=["POST"])
@login_required
def calculate():
    body = parse_body(EmissionsRequest)
    region = body.region or current_app.config.get("DEFAULT_REGION")
    result = compute_emissions(body.activity, region)
    data = result.to_dict()
    data["warnings"] = validate_ghg_totals(result.scope1_total, result.scope2_total, result.scope3_total)
    return jsonify(data)


@emissions_bp.route("/factors")
@login_required
def factors():
    return jsonify({
        "scope1": SCOPE1_FACTORS,
        "grid": GRID_FACTORS,
        "scope3": SCOPE3_FACTORS,
        "scope3_default": SCOPE3_DEFAULT_FACTOR,
    })


@emissions_bp.route("", methods=["POST"])
@login_required
def create_record():
    body = parse_body(EmissionRecordCreate)
    company = get_company_or_404(body.company_id)
    record = EmissionRecord(
        company_id=company.id,
        reporting_year=body.reporting_year,
        scope=body.scope,
        emission_source=body.emission_source,
        co2_equivalent=body.co2_equivalent,
        calculation_method=body.calculation_method,
        created_by=current_user.id,
    )
    db.session.add(record)
    db.session.flush()
    AuditEntry.record(
        current_user.id, "create", "emission_record", record.id,
        f"scope {body.scope}: {body.co2_equivalent} tCO2e",
    )
    db.session.commit()
    return jsonify(record.to_dict()), 201


@emissions_bp.route("/<int:company_id>")
@login_required
def list_records(company_id):
    company = get_company_or_404(company_id)
    query = company.emissions
    year = request.args.get("year", type=int)
    if year is not None:
        query = query.filter(EmissionRecord.reporting_year == year)
    records = query.order_by(EmissionRecord.reporting_year.desc(), EmissionRecord.scope).all()
    return jsonify([r.to_dict() for r in records])


@emissions_bp.route("/<int:company_id>/totals")
@login_required
def totals(company_id):
    company = get_company_or_404(company_id)
    year = request.args.get("year", type=int)
    return jsonify(EmissionRecord.latest_totals(company.id, year))
