from flask import Blueprint, jsonify, request
from flask_login import login_required

from esg_portal.companies.routes import get_company_or_404
from esg_portal.kpis import ordered_records, score_company
from esg_portal.models import EmissionRecord, MetricRecord
from esg_portal.reporting import build_report

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.route("/<int:company_id>")
@login_required
def report(company_id):
    """Full ESG report for one company; ?year= limits metrics and emissions to one year."""
    company = get_company_or_404(company_id)
    year = request.args.get("year", type=int)

    query = MetricRecord.query.filter(MetricRecord.company_id == company.id)
    if year is not None:
        query = query.filter(MetricRecord.reporting_year == year)

    return jsonify(build_report(
        company,
        score_company(company, year),
        ordered_records(query),
        EmissionRecord.latest_totals(company.id, year),
        company.documents.all(),
        reporting_year=year,
    ))
