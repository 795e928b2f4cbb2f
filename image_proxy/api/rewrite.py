"""
Rewrite API Endpoints

This module contains API endpoints for rewriting HTML documents and
classifying individual image URLs.
"""

from flask import Blueprint, current_app, jsonify, request

# Create blueprint
rewrite_bp = Blueprint('rewrite', __name__)


def _json_body():
    """Request JSON when it is an object, otherwise an empty dict."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _disabled_response():
    return jsonify({
        "error": "Image proxy disabled",
        "message": "Set IMAGE_PROXY_URL (and IMAGE_PROXY_ENABLE) to enable rewriting"
    }), 503


@rewrite_bp.route('/rewrite', methods=['POST'])
def rewrite_html():
    """
    Rewrite the image URLs of an HTML document.

    Request Body:
        html (str): HTML document or fragment

    Returns:
        JSON response with the rewritten html, the number of proxied URLs and
        whether the result came from the cache

    Error Codes:
        400: Missing or invalid html
        503: Image proxy disabled by configuration
    """
    image_proxy = current_app.extensions.get('image_proxy')
    if image_proxy is None:
        return _disabled_response()

    data = _json_body()
    html = data.get('html')

    if not isinstance(html, str):
        return jsonify({"error": "html is required and must be a string"}), 400

    rewrite_cache = current_app.extensions.get('rewrite_cache')
    result = rewrite_cache.get(html) if rewrite_cache else None
    cached = result is not None

    if not cached:
        result = image_proxy.rewrite(html)
        if rewrite_cache:
            rewrite_cache.set(html, result)

    return jsonify({
        "html": result.text,
        "proxied_count": result.proxied_count,
        "cached": cached
    })


@rewrite_bp.route('/proxy-url', methods=['POST'])
def proxy_url():
    """
    Classify a single image URL and return its proxied form.

    Request Body:
        url (str): Image URL, e.g. a post cover image

    Error Codes:
        400: Missing url
        503: Image proxy disabled by configuration
    """
    image_proxy = current_app.extensions.get('image_proxy')
    if image_proxy is None:
        return _disabled_response()

    data = _json_body()
    url = data.get('url')

    if not url or not isinstance(url, str):
        return jsonify({"error": "URL is required"}), 400

    return jsonify({
        "url": url,
        "proxied_url": image_proxy.proxy_image_url(url),
        "needs_proxy": image_proxy.needs_proxy(url)
    })


@rewrite_bp.route('/stats', methods=['GET'])
def stats():
    """Return the active proxy configuration snapshot."""
    image_proxy = current_app.extensions.get('image_proxy')
    if image_proxy is None:
        return _disabled_response()

    return jsonify(image_proxy.get_stats())
