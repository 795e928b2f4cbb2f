"""
Tests for the Flask API endpoints.

Uses the Flask test client against apps built from test configuration
classes; Redis is mocked or disabled throughout.
"""

import json
import pytest
from unittest.mock import Mock, patch

from image_proxy import create_app
from image_proxy.config import Config

PROXY = "https://proxy.example/"


class ProxyTestConfig(Config):
    TESTING = True
    IMAGE_PROXY_ENABLE = True
    IMAGE_PROXY_URL = "https://proxy.example"
    IMAGE_PROXY_SITE_DOMAIN = "mysite.com"
    IMAGE_PROXY_FORCE_DOMAINS = ["img.mysite.com"]
    IMAGE_PROXY_SKIP_DOMAINS = ["cdn.trusted.com"]
    IMAGE_PROXY_LOG_ENABLED = False
    IMAGE_PROXY_DOMAIN_MATCH = "substring"
    REDIS_ENABLED = False


class DisabledProxyConfig(ProxyTestConfig):
    IMAGE_PROXY_URL = ""


class CachedProxyConfig(ProxyTestConfig):
    REDIS_ENABLED = True


@pytest.fixture
def client():
    app = create_app(ProxyTestConfig)
    return app.test_client()


@pytest.fixture
def disabled_client():
    app = create_app(DisabledProxyConfig)
    return app.test_client()


@pytest.fixture
def mock_redis():
    mock_client = Mock()
    mock_client.ping.return_value = True
    mock_client.get.return_value = None
    mock_client.setex.return_value = True
    return mock_client


@pytest.fixture
def cached_client(mock_redis):
    with patch('image_proxy.services.cache.RewriteCache._init_redis', return_value=mock_redis):
        app = create_app(CachedProxyConfig)
    return app.test_client()


class TestRewriteEndpoint:
    """Test cases for POST /rewrite."""

    def test_rewrite(self, client):
        html = '<img alt="x" src="https://ext.com/x.jpg"><img src="https://cdn.trusted.com/y.jpg">'

        response = client.post('/rewrite', json={"html": html})

        assert response.status_code == 200
        data = response.get_json()
        assert data["html"] == f'<img alt="x" src="{PROXY}https://ext.com/x.jpg"><img src="https://cdn.trusted.com/y.jpg">'
        assert data["proxied_count"] == 1
        assert data["cached"] is False

    def test_rewrite_empty_document(self, client):
        response = client.post('/rewrite', json={"html": ""})

        assert response.status_code == 200
        assert response.get_json()["html"] == ""

    @pytest.mark.parametrize("body", [{}, {"html": None}, {"html": 12}, {"html": ["<img>"]}])
    def test_rewrite_invalid_body(self, client, body):
        response = client.post('/rewrite', json=body)

        assert response.status_code == 400
        assert "error" in response.get_json()

    def test_rewrite_non_json_body(self, client):
        response = client.post('/rewrite', data="<img>", content_type="text/html")
        assert response.status_code == 400

    def test_rewrite_disabled(self, disabled_client):
        response = disabled_client.post('/rewrite', json={"html": "<p></p>"})

        assert response.status_code == 503
        assert response.get_json()["error"] == "Image proxy disabled"

    @pytest.mark.parametrize("body", [["<img>"], "<img>", 3, None])
    def test_rewrite_body_not_an_object(self, client, body):
        """Test JSON arrays and scalars are rejected rather than raising."""
        response = client.post('/rewrite', data=json.dumps(body), content_type="application/json")

        assert response.status_code == 400
        assert "error" in response.get_json()

    def test_rewrite_stores_in_cache(self, cached_client, mock_redis):
        response = cached_client.post('/rewrite', json={"html": '<img src="https://ext.com/x.jpg">'})

        assert response.get_json()["cached"] is False
        mock_redis.setex.assert_called_once()

    def test_rewrite_served_from_cache(self, cached_client, mock_redis):
        """Test a cache hit is returned without rewriting again."""
        mock_redis.get.return_value = json.dumps({"text": "<p>cached</p>", "proxied_count": 4})

        response = cached_client.post('/rewrite', json={"html": '<img src="https://ext.com/x.jpg">'})

        data = response.get_json()
        assert data == {"html": "<p>cached</p>", "proxied_count": 4, "cached": True}
        mock_redis.setex.assert_not_called()

    def test_rewrite_ignores_corrupt_cache_entry(self, cached_client, mock_redis):
        mock_redis.get.return_value = "not json"

        response = cached_client.post('/rewrite', json={"html": '<img src="https://ext.com/x.jpg">'})

        assert response.status_code == 200
        data = response.get_json()
        assert data["cached"] is False
        assert data["html"] == f'<img src="{PROXY}https://ext.com/x.jpg">'


class TestProxyUrlEndpoint:
    """Test cases for POST /proxy-url."""

    def test_external_url(self, client):
        response = client.post('/proxy-url', json={"url": "https://other.com/b.png"})

        assert response.get_json() == {
            "url": "https://other.com/b.png",
            "proxied_url": "https://proxy.example/https://other.com/b.png",
            "needs_proxy": True
        }

    def test_site_url(self, client):
        data = client.post('/proxy-url', json={"url": "https://mysite.com/a.png"}).get_json()

        assert data["proxied_url"] == "https://mysite.com/a.png"
        assert data["needs_proxy"] is False

    def test_forced_url(self, client):
        data = client.post('/proxy-url', json={"url": "https://img.mysite.com/a.png"}).get_json()
        assert data["needs_proxy"] is True

    def test_missing_url(self, client):
        response = client.post('/proxy-url', json={})
        assert response.status_code == 400

    @pytest.mark.parametrize("body", [
        ["https://other.com/b.png"],
        "https://other.com/b.png",
        {"url": 5},
        {"url": ["https://other.com/b.png"]},
    ])
    def test_invalid_body(self, client, body):
        response = client.post('/proxy-url', data=json.dumps(body), content_type="application/json")
        assert response.status_code == 400

    def test_disabled(self, disabled_client):
        response = disabled_client.post('/proxy-url', json={"url": "https://other.com/b.png"})
        assert response.status_code == 503


class TestStatsEndpoint:
    """Test cases for GET /stats."""

    def test_stats(self, client):
        response = client.get('/stats')

        assert response.status_code == 200
        assert response.get_json() == {
            "proxy_url": PROXY,
            "site_domain": "mysite.com",
            "force_proxy_domains": ["img.mysite.com"],
            "skip_proxy_domains": ["cdn.trusted.com"]
        }

    def test_stats_disabled(self, disabled_client):
        assert disabled_client.get('/stats').status_code == 503


class TestHealthEndpoints:
    """Test cases for the health blueprint."""

    def test_health(self, client):
        data = client.get('/health').get_json()

        assert data["status"] == "ok"
        assert data["proxy_enabled"] is True

    def test_health_disabled_proxy(self, disabled_client):
        assert disabled_client.get('/health').get_json()["proxy_enabled"] is False

    def test_cache_unavailable(self, client):
        response = client.get('/health/cache')

        assert response.status_code == 503
        assert response.get_json()["status"] == "unavailable"

    def test_cache_stats(self, cached_client):
        response = cached_client.get('/health/cache')

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "ok"
        assert data["cache_stats"]["available"] is True
