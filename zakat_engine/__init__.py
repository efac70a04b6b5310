"""Flask application factory for the Zakat Calculation Engine."""
import logging
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from zakat_engine.services.config import (
    configure_logging,
    get_base_currency,
    get_data_dir,
    get_default_calendar_type,
    get_default_gold_price,
)


logger = logging.getLogger('zakat_engine')


def create_app(config: dict | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Optional configuration dictionary to override defaults.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Trust X-Forwarded-For from reverse proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    # Default configuration
    app.config.update(
        SECRET_KEY='dev-secret-key-change-in-production',
        JSON_SORT_KEYS=False,
        DATA_DIR=get_data_dir(),
        # Calculator defaults used when a request omits them
        ZAKAT_DEFAULT_GOLD_PRICE=get_default_gold_price(),
        ZAKAT_DEFAULT_CALENDAR=get_default_calendar_type(),
        ZAKAT_BASE_CURRENCY=get_base_currency(),
    )

    # Override with provided config
    if config:
        app.config.update(config)

    configure_logging()

    # Initialize database
    from zakat_engine import db
    db.init_app(app)

    # Register CLI commands
    from zakat_engine import cli
    cli.register_cli(app)

    # Register blueprints
    from zakat_engine.routes.health import health_bp
    from zakat_engine.routes.api import api_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(api_bp, url_prefix='/api/v1')

    logger.debug(f"App created with DATA_DIR={app.config['DATA_DIR']}")
    return app
