"""
Shared pytest fixtures for the image proxy tests.
"""

import os
import sys
from unittest.mock import Mock

import pytest

# Add the project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from image_proxy.models.proxy_config import ProxyConfig
from image_proxy.services.rewriter import ImageProxy

PROXY = "https://proxy.example/"


@pytest.fixture
def proxy_config():
    """Configuration used throughout the examples: proxy plus a site domain."""
    return ProxyConfig(proxy_base_url=PROXY, site_domain="mysite.com")


@pytest.fixture
def image_proxy(proxy_config):
    """Engine without a logger."""
    return ImageProxy(proxy_config)


@pytest.fixture
def mock_logger():
    """Logger double exposing debug()/info()."""
    return Mock(spec=['debug', 'info'])
