from datetime import date

import click

from esg_portal import create_app, db
from esg_portal.kpis import score_company
from esg_portal.models import Company, ComplianceDocument, EmissionRecord, MetricRecord, ScoreRecord, User

app = create_app()

SAMPLE_METRICS = {
    "environmental": {
        "scope1Emissions": (1200.0, "tCO2e"),
        "scope2Emissions": (850.0, "tCO2e"),
        "renewableEnergyPercentage": (42.0, "%"),
        "wasteRecycledPercentage": (61.0, "%"),
    },
    "social": {
        "femaleEmployeesPercentage": (44.0, "%"),
        "turnoverRate": (12.5, "%"),
        "trainingHoursPerEmployee": (28.0, "hours"),
    },
    "governance": {
        "independentDirectorsPercentage": (67.0, "%"),
        "ethicsTrainingCompletion": (93.0, "%"),
    },
}

SAMPLE_DOCUMENTS = [
    ("GRI Content Index", "environmental", "GRI", "Approved"),
    ("TCFD Climate Risk Disclosure", "environmental", "TCFD", "Pending Review"),
    ("Board Diversity Policy", "governance", "CSRD", "Approved"),
]


def _get_admin():
    admin = User.query.filter_by(username="admin").first()
    if not admin:
        admin = User(
            username="admin",
            email="admin@example.com",
            role="admin",
            full_name="Administrator",
        )
        admin.set_password("admin123")
        db.session.add(admin)
        db.session.flush()
    return admin


@app.cli.command("init-db")
def init_db():
    """Initialize the database and create admin user."""
    db.create_all()
    if User.query.filter_by(username="admin").first():
        print("Database already initialized.")
        return
    _get_admin()
    db.session.commit()
    print("Database initialized. Admin user created (admin / admin123)")


@app.cli.command("seed-sample-data")
@click.option("--year", default=date.today().year - 1, show_default=True, help="Reporting year.")
def seed_sample_data(year):
    """Create a demo company with metrics, emissions and compliance documents."""
    db.create_all()
    admin = _get_admin()
    if Company.query.filter_by(name="Demo Manufacturing Co.", created_by=admin.id).first():
        print("Sample data already present.")
        return

    company = Company(name="Demo Manufacturing Co.", sector="Industrials", region="EU", created_by=admin.id)
    db.session.add(company)
    db.session.flush()

    for category, metrics in SAMPLE_METRICS.items():
        for name, (value, unit) in metrics.items():
            db.session.add(MetricRecord(
                company_id=company.id,
                user_id=admin.id,
                reporting_year=year,
                category=category,
                metric_name=name,
                value=value,
                unit=unit,
                source="sample",
            ))

    for scope, co2e in ((1, 1200.0), (2, 850.0), (3, 4300.0)):
        db.session.add(EmissionRecord(
            company_id=company.id,
            reporting_year=year,
            scope=scope,
            emission_source="sample",
            co2_equivalent=co2e,
            calculation_method="GHG Protocol",
            created_by=admin.id,
        ))

    for title, category, framework, status in SAMPLE_DOCUMENTS:
        db.session.add(ComplianceDocument(
            company_id=company.id,
            title=title,
            category=category,
            framework=framework,
            status=status,
            due_date=date(year + 1, 6, 30),
            uploaded_by=admin.id,
        ))
    db.session.flush()

    snapshot = score_company(company, year)
    db.session.add(ScoreRecord.from_snapshot(snapshot, admin.id, year))
    db.session.commit()
    print(f"Seeded '{company.name}' for {year}: overall score {snapshot.overall_score}")


if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5000)
