import logging

from flask import Flask

from .api import api_bp
from .catalog import catalog_bp
from .cli import register_cli
from .config import Config
from .errors import register_errors
from .extensions import db, migrate
from .labels import labels_bp


def _bootstrap_app(app: Flask) -> None:
    db.create_all()
    app.logger.debug("Database ready at %s", app.config.get("SQLALCHEMY_DATABASE_URI"))


def create_app(config_object: type[Config] | None = None) -> Flask:
    app = Flask(__name__)
    cfg = config_object or Config
    app.config.from_object(cfg)
    app.logger.setLevel(getattr(logging, app.config.get("LOG_LEVEL", "INFO"), logging.INFO))

    @app.context_processor
    def inject_globals() -> dict[str, object | None]:
        return {
            "product_name": app.config.get("PRODUCT_NAME"),
            "app_version": app.config.get("APP_VERSION"),
            "label_sheet_name": app.config.get("LABEL_SHEET_NAME"),
        }

    db.init_app(app)
    migrate.init_app(app, db)
    register_cli(app)
    register_errors(app)

    app.register_blueprint(catalog_bp)
    app.register_blueprint(labels_bp)
    app.register_blueprint(api_bp)

    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    with app.app_context():
        _bootstrap_app(app)

    return app
