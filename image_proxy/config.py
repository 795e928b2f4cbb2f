"""
Configuration Management

This module handles all configuration settings and environment variables
for the image proxy service.
"""

import os
from dotenv import load_dotenv

from image_proxy.utils.helpers import env_flag, split_list

# Load environment variables
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = env_flag(os.environ.get("FLASK_DEBUG"), False)

    # Server settings
    HOST = "0.0.0.0"
    PORT = int(os.environ.get("PORT", 5001))

    # Image proxy settings
    IMAGE_PROXY_ENABLE = env_flag(os.environ.get("IMAGE_PROXY_ENABLE"), True)
    IMAGE_PROXY_URL = os.getenv("IMAGE_PROXY_URL", "")
    IMAGE_PROXY_SITE_DOMAIN = os.getenv("IMAGE_PROXY_SITE_DOMAIN", "")
    IMAGE_PROXY_FORCE_DOMAINS = split_list(os.getenv("IMAGE_PROXY_FORCE_DOMAINS"))
    IMAGE_PROXY_SKIP_DOMAINS = split_list(os.getenv("IMAGE_PROXY_SKIP_DOMAINS"))
    IMAGE_PROXY_LOG_ENABLED = env_flag(os.environ.get("IMAGE_PROXY_LOG_ENABLED"), False)
    IMAGE_PROXY_DOMAIN_MATCH = os.getenv("IMAGE_PROXY_DOMAIN_MATCH", "substring")

    # Redis Cache Configuration
    REDIS_ENABLED = env_flag(os.environ.get("REDIS_ENABLED"), False)
    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
    REDIS_PASSWORD = os.getenv("REDIS_PASSWORD")
    REDIS_DB = int(os.getenv("REDIS_DB", "0"))
    REDIS_MAX_CONNECTIONS = int(os.getenv("REDIS_MAX_CONNECTIONS", "20"))

    # Rewritten documents (in seconds / kilobytes)
    REWRITE_CACHE_TTL = int(os.getenv("REWRITE_CACHE_TTL", "86400"))  # 24 hours
    MAX_CACHEABLE_DOCUMENT_KB = int(os.getenv("MAX_CACHEABLE_DOCUMENT_KB", "512"))

    @classmethod
    def image_proxy_options(cls):
        """
        Collect the image proxy options in the form the pipeline expects.

        Returns:
            dict: Options keyed by host option name
        """
        return {
            'enable': cls.IMAGE_PROXY_ENABLE,
            'proxy_url': cls.IMAGE_PROXY_URL,
            'site_domain': cls.IMAGE_PROXY_SITE_DOMAIN,
            'force_proxy_domains': list(cls.IMAGE_PROXY_FORCE_DOMAINS),
            'skip_proxy_domains': list(cls.IMAGE_PROXY_SKIP_DOMAINS),
            'log_enabled': cls.IMAGE_PROXY_LOG_ENABLED,
            'domain_match': cls.IMAGE_PROXY_DOMAIN_MATCH,
        }
