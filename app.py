import logging
import os

import click
from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError

from config.config import get_config, TRUTHY
from extensions import db, login_manager, migrate

from models.user import User
from services.auth_service import init_auth_gateway
from services.errors import AppError
from services.startup_service import bootstrap_database, sync_schema, seed

# Route Imports
from routes.auth_routes import auth_bp
from routes.page_routes import pages_bp
from routes.student_routes import students_bp
from routes.attendance_routes import attendance_bp
from routes.report_routes import reports_bp
from routes.admin_routes import admin_bp

# Blueprints that can be switched off through ENABLED_MODULES
OPTIONAL_BLUEPRINTS = {
    "admin": admin_bp,
}


def configure_logging(app):
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(error):
        db.session.rollback()
        app.logger.exception("Database error")
        return jsonify({"error": "Database error"}), 500


def register_commands(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Create missing tables."""
        sync_schema()
        click.echo("Database schema synchronized")

    @app.cli.command("seed-db")
    def seed_db_command():
        """Populate empty student and user tables with demo rows."""
        result = seed(app)
        click.echo(f"Students created: {result.students_created}")
        click.echo(f"Users created: {result.users_created}")
        for email, password in result.generated_credentials.items():
            click.echo(f"  {email}: {password}")


def create_app(config_class=None, auth_gateway=None):
    app = Flask(__name__)
    app.config.from_object(config_class or get_config())

    configure_logging(app)

    # Initialize Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    init_auth_gateway(app, auth_gateway)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # Register Blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(pages_bp)
    app.register_blueprint(students_bp)
    app.register_blueprint(attendance_bp)
    app.register_blueprint(reports_bp)

    enabled = app.config.get("ENABLED_MODULES", frozenset())
    for name, blueprint in OPTIONAL_BLUEPRINTS.items():
        if name in enabled:
            app.register_blueprint(blueprint)
        else:
            app.logger.info("Module '%s' disabled", name)

    register_error_handlers(app)
    register_commands(app)

    return app


def main():
    app = create_app()
    # connect -> verify -> sync-schema -> seed, then listen
    bootstrap_database(app)
    app.run(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        debug=os.getenv("DEBUG", "0").strip().lower() in TRUTHY
    )


if __name__ == "__main__":
    main()
