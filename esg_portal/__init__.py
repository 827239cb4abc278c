import os
import logging
import time
import traceback

from flask import Flask, jsonify, request, g
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from config import Config

db = SQLAlchemy()
login_manager = LoginManager()

_startup_errors = []


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(level=app.config.get("LOG_LEVEL", "INFO"))
    logger = logging.getLogger(__name__)

    os.makedirs(app.instance_path, exist_ok=True)

    # HTTPS support behind a hosting proxy
    if os.environ.get("BEHIND_HTTPS_PROXY"):
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    db.init_app(app)
    login_manager.init_app(app)

    from flask_compress import Compress
    Compress(app)

    from esg_portal.cache import ResponseCache
    app.extensions["response_cache"] = ResponseCache(
        ttl=app.config["CACHE_TTL"], max_entries=app.config["CACHE_MAX_ENTRIES"]
    )

    from esg_portal.auth.routes import auth_bp
    from esg_portal.companies.routes import companies_bp
    from esg_portal.esg.routes import esg_bp
    from esg_portal.emissions_api.routes import emissions_bp
    from esg_portal.compliance.routes import compliance_bp
    from esg_portal.integrations.routes import integrations_bp
    from esg_portal.reports.routes import reports_bp
    from esg_portal.dashboard.routes import dashboard_bp
    from esg_portal.admin.routes import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(companies_bp)
    app.register_blueprint(esg_bp)
    app.register_blueprint(emissions_bp)
    app.register_blueprint(compliance_bp)
    app.register_blueprint(integrations_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(admin_bp)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"success": False, "message": "Authentication required"}), 401

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.pop("request_started", None)
        duration_ms = (time.perf_counter() - started) * 1000 if started else 0
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(level, f"[{response.status_code}] {request.method} {request.path} - {duration_ms:.0f}ms")
        return response

    @app.route("/health")
    def health():
        """Health check: app status and database connectivity."""
        db_url = app.config["SQLALCHEMY_DATABASE_URI"]
        db_type = db_url.split("://")[0] if "://" in db_url else "sqlite"

        db_ok = False
        db_error = None
        tables = []
        try:
            from sqlalchemy import inspect, text
            db.session.execute(text("SELECT 1"))
            db_ok = True
            tables = inspect(db.engine).get_table_names()
        except Exception as e:
            db_error = str(e)

        return jsonify({
            "status": "ok" if db_ok else "db_error",
            "database_type": db_type,
            "database_connected": db_ok,
            "database_error": db_error,
            "tables": tables,
            "integration_mode": app.config.get("INTEGRATION_MODE"),
            "startup_errors": _startup_errors,
        })

    from esg_portal.errors import ESGError

    @app.errorhandler(ESGError)
    def handle_esg_error(error):
        db.session.rollback()
        logger.warning(f"{type(error).__name__}: {error.message} {error.errors}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(PydanticValidationError)
    def handle_bad_request_body(error):
        errors = []
        for e in error.errors():
            location = ".".join(str(part) for part in e.get("loc", ()))
            errors.append(f"{location}: {e.get('msg')}" if location else e.get("msg"))
        return jsonify({"success": False, "message": "Invalid request body", "errors": errors}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"success": False, "message": error.description}), error.code

    @app.errorhandler(500)
    def internal_error(error):
        try:
            db.session.rollback()
        except Exception:
            logger.exception("Session rollback failed")
        original = getattr(error, "original_exception", None) or error
        logger.error(f"500 error: {type(original).__name__}: {original}\n{traceback.format_exc()}")
        return jsonify({"success": False, "message": "Internal server error"}), 500

    with app.app_context():
        from esg_portal import models  # noqa: F401  register tables

        try:
            db.create_all()
            logger.info("Database tables created/verified.")
        except Exception as e:
            msg = f"db.create_all() failed: {e}"
            logger.error(msg)
            _startup_errors.append(msg)

        if app.config.get("SEED_ADMIN"):
            try:
                _seed_admin()
            except Exception as e:
                msg = f"_seed_admin() failed: {e}"
                logger.error(msg)
                _startup_errors.append(msg)

    return app


def _seed_admin():
    """Create default admin user if none exists."""
    from esg_portal.models import User

    if not User.query.filter_by(username="admin").first():
        admin = User(
            username="admin",
            email="admin@example.com",
            role="admin",
            full_name="Administrator",
        )
        admin.set_password(os.environ.get("ADMIN_PASSWORD", "admin123"))
        db.session.add(admin)
        db.session.commit()
