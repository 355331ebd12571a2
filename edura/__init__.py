from __future__ import annotations

from flask import Flask, jsonify

from .config import Config
from .extensions import csrf, db, login_manager, migrate
from .db_utils import ensure_database_schema
from .services.completion import CompletionClient


def create_app(config_class: type[Config] = Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)

    register_extensions(app)
    register_completion_client(app)
    register_blueprints(app)

    with app.app_context():
        ensure_database_schema()

    return app


def register_extensions(app: Flask) -> None:
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Authentication required."}), 401


def register_completion_client(app: Flask) -> None:
    """Build the process-wide completion client once.

    Tests (or alternative deployments) can pass a ready-made client through
    the ``COMPLETION_CLIENT`` config key.
    """

    client = app.config.get("COMPLETION_CLIENT") or CompletionClient.from_config(app.config)
    app.extensions["completion_client"] = client
    if not client.is_configured:
        app.logger.warning("OPENAI_API_KEY is not set; generation endpoints will report a configuration error.")


def register_blueprints(app: Flask) -> None:
    from .auth import bp as auth_bp
    from .courses import bp as courses_bp
    from .generation import bp as generation_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(generation_bp)
    app.register_blueprint(courses_bp)
