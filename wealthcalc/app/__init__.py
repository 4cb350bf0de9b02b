"""Application factory and app-wide configuration."""

from flask import Flask
from flask_cors import CORS

from wealthcalc.app.api.routes import api_bp
from wealthcalc.config import CORS_ORIGINS, configure_logging

# setup: flask --app "wealthcalc.app:create_app" run


def create_app() -> Flask:
    """Build the Flask app instance."""
    configure_logging()
    app = Flask(__name__)

    CORS(
        app,
        resources={r"/api/*": {"origins": CORS_ORIGINS}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
