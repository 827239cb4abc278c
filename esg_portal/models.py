from datetime import datetime, timezone

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from esg_portal import db, login_manager


def _utcnow():
    return datetime.now(timezone.utc)


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    full_name = db.Column(db.String(128), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="analyst")
    # Roles: admin, analyst
    created_at = db.Column(db.DateTime, default=_utcnow)

    companies = db.relationship("Company", backref="owner", lazy="dynamic")

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == "admin"

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role,
        }


class Company(db.Model):
    __tablename__ = "companies"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(256), nullable=False)
    sector = db.Column(db.String(100), default="")
    region = db.Column(db.String(50), default="Global")
    created_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow)

    metrics = db.relationship(
        "MetricRecord", backref="company", lazy="dynamic", cascade="all, delete-orphan"
    )
    scores = db.relationship(
        "ScoreRecord", backref="company", lazy="dynamic", cascade="all, delete-orphan"
    )
    documents = db.relationship(
        "ComplianceDocument", backref="company", lazy="dynamic", cascade="all, delete-orphan"
    )
    emissions = db.relationship(
        "EmissionRecord", backref="company", lazy="dynamic", cascade="all, delete-orphan"
    )

    __table_args__ = (db.UniqueConstraint("name", "created_by", name="uq_company_owner"),)

    def user_can(self, user):
        return user.is_admin or self.created_by == user.id

    def latest_score(self):
        return self.scores.order_by(ScoreRecord.calculated_at.desc(), ScoreRecord.id.desc()).first()

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "sector": self.sector,
            "region": self.region,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class MetricRecord(db.Model):
    """One submitted metric value. Rows are never updated; resubmissions add a row."""
    __tablename__ = "metric_records"

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    reporting_year = db.Column(db.Integer, nullable=False)
    category = db.Column(db.String(20), nullable=False)
    # Category: environmental, social, governance
    metric_name = db.Column(db.String(100), nullable=False)
    value = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(20), default="")
    target = db.Column(db.Float, nullable=True)
    source = db.Column(db.String(50), default="manual")
    # Source: manual, erp, hr
    created_at = db.Column(db.DateTime, default=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "company_id": self.company_id,
            "company_name": self.company.name if self.company else None,
            "reporting_year": self.reporting_year,
            "category": self.category,
            "metric_name": self.metric_name,
            "value": self.value,
            "unit": self.unit,
            "target": self.target,
            "source": self.source,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class ScoreRecord(db.Model):
    """Persisted ScoreSnapshot; the latest by calculated_at is current."""
    __tablename__ = "score_snapshots"

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    reporting_year = db.Column(db.Integer, nullable=True)
    environmental_score = db.Column(db.Float, default=0)
    social_score = db.Column(db.Float, default=0)
    governance_score = db.Column(db.Float, default=0)
    overall_score = db.Column(db.Float, default=0)
    compliance_rate = db.Column(db.Integer, default=0)
    total_entries = db.Column(db.Integer, default=0)
    calculated_at = db.Column(db.DateTime, default=_utcnow)

    @classmethod
    def from_snapshot(cls, snapshot, user_id, reporting_year=None):
        return cls(
            company_id=snapshot.company_id,
            user_id=user_id,
            reporting_year=reporting_year,
            environmental_score=snapshot.environmental_score,
            social_score=snapshot.social_score,
            governance_score=snapshot.governance_score,
            overall_score=snapshot.overall_score,
            compliance_rate=snapshot.compliance_rate,
            total_entries=snapshot.total_entries,
            calculated_at=snapshot.calculated_at,
        )

    def to_dict(self):
        return {
            "company_id": self.company_id,
            "company_name": self.company.name if self.company else None,
            "reporting_year": self.reporting_year,
            "environmental_score": self.environmental_score,
            "social_score": self.social_score,
            "governance_score": self.governance_score,
            "overall_score": self.overall_score,
            "compliance_rate": self.compliance_rate,
            "total_entries": self.total_entries,
            "calculated_at": self.calculated_at.isoformat() if self.calculated_at else None,
        }


class ComplianceDocument(db.Model):
    __tablename__ = "compliance_documents"

    STATUSES = ("Pending Review", "Approved", "Rejected")

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id"), nullable=False, index=True)
    title = db.Column(db.String(256), nullable=False)
    category = db.Column(db.String(20), default="")
    framework = db.Column(db.String(20), default="")
    status = db.Column(db.String(20), nullable=False, default="Pending Review")
    due_date = db.Column(db.Date, nullable=True)
    uploaded_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "company_id": self.company_id,
            "title": self.title,
            "category": self.category,
            "framework": self.framework,
            "status": self.status,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class EmissionRecord(db.Model):
    __tablename__ = "emission_records"

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id"), nullable=False, index=True)
    reporting_year = db.Column(db.Integer, nullable=False)
    scope = db.Column(db.Integer, nullable=False)
    emission_source = db.Column(db.String(100), default="")
    co2_equivalent = db.Column(db.Float, nullable=False)
    calculation_method = db.Column(db.String(100), default="")
    created_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow)

    @classmethod
    def totals_by_scope(cls, company_id, year):
        rows = (
            db.session.query(cls.scope, db.func.sum(cls.co2_equivalent))
            .filter(cls.company_id == company_id, cls.reporting_year == year)
            .group_by(cls.scope)
            .all()
        )
        totals = {"scope1": 0.0, "scope2": 0.0, "scope3": 0.0}
        for scope, total in rows:
            totals[f"scope{scope}"] = round(total or 0.0, 2)
        totals["total"] = round(totals["scope1"] + totals["scope2"] + totals["scope3"], 2)
        return totals

    @classmethod
    def latest_totals(cls, company_id, year=None):
        """Totals for `year`, or for the most recent reporting year on record."""
        if year is None:
            latest = (
                cls.query.filter_by(company_id=company_id)
                .order_by(cls.reporting_year.desc())
                .first()
            )
            if not latest:
                return {"reporting_year": None, "scope1": 0.0, "scope2": 0.0, "scope3": 0.0, "total": 0.0}
            year = latest.reporting_year
        totals = cls.totals_by_scope(company_id, year)
        totals["reporting_year"] = year
        return totals

    def to_dict(self):
        return {
            "id": self.id,
            "company_id": self.company_id,
            "reporting_year": self.reporting_year,
            "scope": self.scope,
            "emission_source": self.emission_source,
            "co2_equivalent": self.co2_equivalent,
            "calculation_method": self.calculation_method,
        }


class ValidationRule(db.Model):
    """Database-held range / unit rules checked in addition to the metric catalog."""
    __tablename__ = "validation_rules"

    id = db.Column(db.Integer, primary_key=True)
    category = db.Column(db.String(20), nullable=False)
    metric_name = db.Column(db.String(100), nullable=False)
    min_value = db.Column(db.Float, nullable=True)
    max_value = db.Column(db.Float, nullable=True)
    required_unit = db.Column(db.String(20), nullable=True)
    error_message = db.Column(db.String(256), default="")
    active = db.Column(db.Boolean, default=True)

    @classmethod
    def active_rules(cls):
        return {(r.category, r.metric_name): r for r in cls.query.filter_by(active=True).all()}


class AuditEntry(db.Model):
    __tablename__ = "audit_trail"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    action = db.Column(db.String(50), nullable=False)
    entity_type = db.Column(db.String(50), nullable=False)
    entity_id = db.Column(db.Integer, nullable=True)
    details = db.Column(db.Text, default="")
    created_at = db.Column(db.DateTime, default=_utcnow)

    @classmethod
    def record(cls, user_id, action, entity_type, entity_id=None, details=""):
        entry = cls(
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details,
        )
        db.session.add(entry)
        return entry

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "details": self.details,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
