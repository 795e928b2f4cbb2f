"""
Health API Endpoints

This module contains health check and monitoring endpoints.
"""

from flask import Blueprint, current_app, jsonify

# Create blueprint
health_bp = Blueprint('health', __name__, url_prefix='/health')


@health_bp.route('', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        "status": "ok",
        "message": "Service is running",
        "proxy_enabled": current_app.extensions.get('image_proxy') is not None
    })


@health_bp.route('/cache', methods=['GET'])
def cache_stats():
    """Rewrite cache statistics endpoint."""
    rewrite_cache = current_app.extensions.get('rewrite_cache')
    if rewrite_cache is None or not rewrite_cache.is_available():
        return jsonify({
            "status": "unavailable",
            "message": "Redis cache is not available or not configured"
        }), 503

    return jsonify({
        "status": "ok",
        "cache_stats": rewrite_cache.get_stats()
    })
