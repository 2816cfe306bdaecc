# ==============================================================================
# APPLICATION FACTORY
# ==============================================================================
# create_app() wires everything once at startup:
#   Config → logging → Flask-SQLAlchemy → AppContainer → blueprints → hooks
#
# A missing ECOMMERCE_SECRET_KEY stops the process here (ConfigError),
# never later on a request.
# ==============================================================================

import logging

from flask import Flask, request
from werkzeug.exceptions import HTTPException

from api_ecommerce.app_container import AppContainer
from api_ecommerce.config import Config, setup_logging
from api_ecommerce.errors import ApiError
from api_ecommerce.extensions import db
from api_ecommerce.performance_logger import init_profiling
from api_ecommerce.routes import register_blueprints

logger = logging.getLogger(__name__)


def create_app(config: Config = None) -> Flask:
    """
    Builds the Flask application.

    Args:
        config: Startup configuration; read from the environment when omitted

    Returns:
        Configured app with its tables created

    Raises:
        ConfigError: Missing signing key or malformed setting
    """
    if config is None:
        config = Config.from_env()

    setup_logging(config)

    app = Flask(__name__)
    app.config.update(
        SQLALCHEMY_DATABASE_URI=config.database_url,
        SQLALCHEMY_ENGINE_OPTIONS=dict(config.engine_options),
    )
    app.json.sort_keys = False

    db.init_app(app)
    AppContainer(config).init_app(app)
    register_blueprints(app)
    _register_error_handlers(app)

    if config.enable_profiling:
        init_profiling(app, config.logs_dir)

    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'no-referrer'
        if request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response

    with app.app_context():
        db.create_all()
        logger.info("API started (database: %s)", db.engine.url.render_as_string(hide_password=True))

    return app


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR HANDLING
# ═══════════════════════════════════════════════════════════════════════════════
# Every error leaves the API as {"ok": false, "error": ..., "kind": ...}

def _register_error_handlers(app: Flask) -> None:

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError):
        if error.status_code >= 500:
            logger.error("%s on %s %s: %s", error.kind, request.method, request.path, error.message)
        return error.to_dict(), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return {'ok': False, 'error': error.description, 'kind': error.name}, error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return {'ok': False, 'error': 'Internal server error', 'kind': 'InternalError'}, 500
