"""Process startup: connect, verify, sync schema, seed, then serve.

Connectivity problems are fatal. Schema sync and seeding are best-effort,
a failure there is logged and the server still starts.
"""
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from utils.seed_data import run_seed

logger = logging.getLogger(__name__)

OK = "ok"
FAILED = "failed"
SKIPPED = "skipped"


def connect_and_verify():
    try:
        with db.engine.connect() as conn:
            logger.info("Database connection established")
            conn.execute(text("SELECT 1"))
            logger.info("Database connection verified")
    except SQLAlchemyError as exc:
        logger.critical("Unable to connect to the database: %s", exc)
        raise SystemExit(1) from exc


def sync_schema():
    # create_all only adds missing tables, never drops existing ones
    db.create_all()
    logger.info("Database schema synchronized")


def seed(app):
    result = run_seed(password=app.config.get("SEED_USER_PASSWORD"))
    for email, password in result.generated_credentials.items():
        logger.warning("Generated demo password for %s: %s", email, password)
    return result


def bootstrap_database(app):
    """Run the startup stages in order and return the outcome of each."""
    report = {}
    with app.app_context():
        connect_and_verify()
        report["connect"] = OK
        report["verify"] = OK

        if app.config.get("AUTO_INIT_DB"):
            try:
                sync_schema()
                report["sync_schema"] = OK
            except Exception:
                logger.exception("Schema synchronization failed, continuing startup")
                report["sync_schema"] = FAILED
        else:
            report["sync_schema"] = SKIPPED

        if app.config.get("AUTO_SEED_DB"):
            try:
                seed(app)
                report["seed"] = OK
            except Exception:
                db.session.rollback()
                logger.exception("Seeding failed, continuing startup")
                report["seed"] = FAILED
        else:
            report["seed"] = SKIPPED

    return report
