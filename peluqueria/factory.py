"""Application factory for the peluqueria dashboard."""

from flask import Flask

from . import app_logging
from .auth import Auth
from .routes import ui
from .services import api, auth_provider


def create_web_app() -> Flask:
    """Initialize and configure the dashboard application."""
    app = Flask('peluqueria')
    app.config.from_pyfile('config.py')
    app_logging.setup_logger(app.config['LOGLEVEL'], app.config['LOG_JSON'])

    api.init_app(app)
    auth_provider.init_app(app)
    Auth(app)   # Builds the session store for each request.

    app.register_blueprint(ui.blueprint)
    return app
