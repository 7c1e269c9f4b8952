# backend/storefront/__init__.py
from flask import Flask, request
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from werkzeug.exceptions import HTTPException, InternalServerError

from .config import Config, build_database_uri
from .extensions import db, migrate


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)

    # Datasource properties file: instance/storefront.cfg, or $STOREFRONT_SETTINGS
    app.config.from_pyfile("storefront.cfg", silent=True)
    app.config.from_envvar("STOREFRONT_SETTINGS", silent=True)

    if test_config:
        app.config.update(test_config)

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        app.config["SQLALCHEMY_DATABASE_URI"] = build_database_uri(
            app.config["DATASOURCE_URL"],
            app.config.get("DATASOURCE_USERNAME"),
            app.config.get("DATASOURCE_PASSWORD"),
        )

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.categories import categories_bp
    from .routes.products import products_bp
    from .routes.profile import profile_bp
    from .routes.cart import cart_bp
    from .routes.orders import orders_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(orders_bp)

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        return {"error": exc.description}, exc.code

    @app.errorhandler(InternalServerError)
    def handle_internal_error(exc: InternalServerError):
        return {"error": "Internal server error"}, 500

    @app.errorhandler(OperationalError)
    def handle_operational_error(exc: OperationalError):
        # Lock waits and statement timeouts: the caller may retry.
        db.session.rollback()
        app.logger.exception("Database operation failed; transaction rolled back")
        return {"error": "Database temporarily unavailable, please retry"}, 503, {"Retry-After": "1"}

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc: SQLAlchemyError):
        db.session.rollback()
        app.logger.exception("Database error; transaction rolled back")
        return {"error": "Internal server error"}, 500

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in app.config["CORS_ALLOWED_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
