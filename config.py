import os

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-production")

    # Database: use DATABASE_URL from environment (PostgreSQL in production), fallback to SQLite for local dev
    _db_url = os.environ.get("DATABASE_URL", f"sqlite:///{os.path.join(basedir, 'instance', 'esg_portal.db')}")
    # Heroku-style URLs use postgres:// but SQLAlchemy requires postgresql://
    if _db_url.startswith("postgres://"):
        _db_url = _db_url.replace("postgres://", "postgresql://", 1)
    SQLALCHEMY_DATABASE_URI = _db_url
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": 5,
        "max_overflow": 10,
    } if "DATABASE_URL" in os.environ else {}

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # GET response cache (KPIs, analytics)
    CACHE_TTL = int(os.environ.get("CACHE_TTL", "60"))  # seconds
    CACHE_MAX_ENTRIES = int(os.environ.get("CACHE_MAX_ENTRIES", "512"))

    # Region used by the emissions calculator when a request names none
    DEFAULT_REGION = os.environ.get("DEFAULT_REGION", "Global")

    # External data sources: "live" calls the ERP/HR APIs, "static" serves fixed sample data
    INTEGRATION_MODE = os.environ.get("INTEGRATION_MODE", "static")
    INTEGRATION_TIMEOUT = float(os.environ.get("INTEGRATION_TIMEOUT", "15"))
    ERP_BASE_URL = os.environ.get("ERP_BASE_URL", "")
    ERP_API_KEY = os.environ.get("ERP_API_KEY", "")
    ERP_SYSTEM = os.environ.get("ERP_SYSTEM", "SAP")
    HR_BASE_URL = os.environ.get("HR_BASE_URL", "")
    HR_API_KEY = os.environ.get("HR_API_KEY", "")
    HR_SYSTEM = os.environ.get("HR_SYSTEM", "Workday")

    # Session security
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    PERMANENT_SESSION_LIFETIME = 3600  # 1 hour session timeout

    SESSION_COOKIE_SECURE = os.environ.get("BEHIND_HTTPS_PROXY", "") != ""
    PREFERRED_URL_SCHEME = "https" if os.environ.get("BEHIND_HTTPS_PROXY", "") else "http"

    SEED_ADMIN = True


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    INTEGRATION_MODE = "static"
    CACHE_TTL = 60
    CACHE_MAX_ENTRIES = 64
    SESSION_COOKIE_SECURE = False
    SEED_ADMIN = False
