"""Flask application package."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from dotenv import load_dotenv
from flask import Flask


def create_app(config: type | Mapping[str, Any] | None = None) -> Flask:
    """Application factory.

    Args:
        config: Config class or mapping; defaults to the class selected by APP_ENV.

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from lottery_app.config import get_config
    from lottery_app.db import init_db
    from lottery_app.error_handlers import register_error_handlers
    from lottery_app.logging_config import configure_logging
    from lottery_app.routes.admin import admin_bp
    from lottery_app.routes.auth import auth_bp
    from lottery_app.routes.cart import cart_bp
    from lottery_app.routes.health import health_bp
    from lottery_app.routes.lotteries import lotteries_bp
    from lottery_app.routes.notifications import notifications_bp
    from lottery_app.routes.payments import payments_bp
    from lottery_app.routes.results import results_bp
    from lottery_app.routes.withdrawals import withdrawals_bp

    app = Flask(__name__)
    if isinstance(config, Mapping):
        app.config.from_object(get_config())
        app.config.update(config)
    else:
        app.config.from_object(config or get_config())

    configure_logging(app)
    init_db(app)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(lotteries_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(results_bp)
    app.register_blueprint(withdrawals_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(admin_bp, url_prefix="/admin")

    return app
