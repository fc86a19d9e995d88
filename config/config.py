import os
import urllib.parse

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


TRUTHY = {"1", "true", "yes", "on"}


def _flag(name, default="0"):
    return os.getenv(name, default).strip().lower() in TRUTHY


def _database_uri():
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    driver = os.getenv("DB_DRIVER", "mysql+pymysql")
    user = os.getenv("DB_USER", "root")
    password = urllib.parse.quote_plus(os.getenv("DB_PASSWORD", "root"))
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "3306")
    name = os.getenv("DB_NAME", "student_attendance")
    return f"{driver}://{user}:{password}@{host}:{port}/{name}"


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Startup stages: create missing tables, then seed empty tables
    AUTO_INIT_DB = _flag("AUTO_INIT_DB", "1")
    AUTO_SEED_DB = _flag("AUTO_SEED_DB", "1")
    SEED_USER_PASSWORD = os.getenv("SEED_USER_PASSWORD")

    # Optional route modules, e.g. "admin"
    ENABLED_MODULES = frozenset(
        m.strip() for m in os.getenv("ENABLED_MODULES", "admin").split(",") if m.strip()
    )

    # External identity provider (Supabase-compatible auth API)
    AUTH_PROVIDER_URL = os.getenv("AUTH_PROVIDER_URL", "")
    AUTH_PROVIDER_KEY = os.getenv("AUTH_PROVIDER_KEY", "")
    AUTH_PROVIDER_TIMEOUT = float(os.getenv("AUTH_PROVIDER_TIMEOUT", "5"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    AUTO_INIT_DB = True
    AUTO_SEED_DB = False
    SEED_USER_PASSWORD = "test-password"
    ENABLED_MODULES = frozenset({"admin"})
    AUTH_PROVIDER_URL = "http://auth.test"
    AUTH_PROVIDER_KEY = "anon-key"


def get_config():
    env = os.getenv("APP_ENV", "development").lower()
    if env in {"test", "testing"}:
        return TestingConfig
    return Config
