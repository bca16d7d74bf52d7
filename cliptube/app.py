import logging
import os
import secrets
from logging.config import dictConfig

from flask import Flask
from flask.cli import load_dotenv
from werkzeug.exceptions import HTTPException

import cliptube
from cliptube.errors import CatalogError, DatabaseError
from cliptube.models import db
from cliptube.routes import authors_bp, follows_bp, playlists_bp, tags_bp, videos_bp

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("true", "1", "yes")


def configure_logging(level: str) -> None:
    dictConfig({
        'version': 1,
        'formatters': {'default': {
            'format': '[%(asctime)s] %(levelname)s in %(module)s: %(message)s',
        }},
        'handlers': {'wsgi': {
            'class': 'logging.StreamHandler',
            'stream': 'ext://flask.logging.wsgi_errors_stream',
            'formatter': 'default'
        }},
        'root': {
            'level': level,
            'handlers': ['wsgi']
        }
    })


def error_payload(error_code: str, message: str) -> dict:
    return {"success": False, "error": error_code, "message": message}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(CatalogError)
    def handle_catalog_error(e: CatalogError):
        if e.status_code >= 500:
            # The cause stays in the logs, clients get a generic message
            logger.error(f"{e.error_code}: {e.message}")
            return error_payload(e.error_code, GENERIC_ERROR_MESSAGE), e.status_code
        return error_payload(e.error_code, e.message), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        code = (e.name or "HTTP error").upper().replace(" ", "_")
        return error_payload(code, e.description), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        logger.exception(f"Unhandled error: {e}")
        db.session.rollback()
        return error_payload(DatabaseError.error_code, GENERIC_ERROR_MESSAGE), 500


def create_app(test_config=None):
    load_dotenv()
    configure_logging(os.environ.get("CLIPTUBE_LOG_LEVEL", "INFO").upper())

    app = Flask(__name__)

    # Check if running in test mode (from environment or test_config)
    is_testing = _env_flag("TESTING") or (test_config and test_config.get("TESTING"))

    app.config["SECRET_KEY"] = os.environ.get("CLIPTUBE_SECRET_KEY") or secrets.token_hex(32)
    app.config["SQLALCHEMY_ECHO"] = _env_flag("CLIPTUBE_SQL_ECHO")

    if is_testing:
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        app.config["TESTING"] = True
    else:
        app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("CLIPTUBE_DATABASE_URL") or "sqlite:///cliptube.db"

    # Apply additional test configuration if provided
    if test_config:
        app.config.update(test_config)

    db.init_app(app)

    with app.app_context():
        db.create_all()

    app.register_blueprint(authors_bp)
    app.register_blueprint(follows_bp)
    app.register_blueprint(videos_bp)
    app.register_blueprint(playlists_bp)
    app.register_blueprint(tags_bp)

    register_error_handlers(app)

    @app.route("/api/health")
    def health():
        return {"success": True, "version": cliptube.__version__}

    logger.info(f"ClipTube {cliptube.__version__} ready")
    return app
