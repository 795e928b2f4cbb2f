"""
Flask Application Factory

This module creates and configures the Flask application with the image
proxy engine, the rewrite cache and all API blueprints.
"""

from flask import Flask
from flask_cors import CORS
from image_proxy.config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app.

    Args:
        config_class: Configuration class to use

    Returns:
        Flask: Configured Flask application
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize CORS
    CORS(app)

    from image_proxy.services.pipeline import build_image_proxy
    from image_proxy.services.cache import RewriteCache

    # Engine is None when the proxy is disabled or has no proxy URL
    image_proxy = build_image_proxy(config_class.image_proxy_options())
    app.extensions['image_proxy'] = image_proxy
    app.extensions['rewrite_cache'] = (
        RewriteCache(image_proxy.config, config_class) if image_proxy else None
    )

    # Register blueprints
    from image_proxy.api.rewrite import rewrite_bp
    from image_proxy.api.health import health_bp

    app.register_blueprint(rewrite_bp)
    app.register_blueprint(health_bp)

    return app
