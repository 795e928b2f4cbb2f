"""
URL Classification Service

This module decides which image URLs are routed through the proxy and
builds the proxied form of those URLs.
"""

from urllib.parse import urlsplit
from typing import Any, Iterable

from image_proxy.models.proxy_config import HOSTNAME_MATCH, ProxyConfig


RELATIVE_PREFIXES = ('/', './', '../')
ABSOLUTE_PREFIXES = ('http://', 'https://')


class NullLogger:
    """Logger stand-in that drops every record."""

    def debug(self, message):
        pass

    def info(self, message):
        pass


class UrlClassifier:
    """
    Applies the proxy policy to individual URLs.

    Rules are evaluated in a fixed order: relative and already proxied URLs
    are never proxied, only http(s) URLs are eligible, then force rules,
    skip rules and the site domain are checked, first match wins. Anything
    left over is an external URL and gets proxied.
    """

    def __init__(self, config: ProxyConfig, logger=None):
        """
        Initialize the classifier.

        Args:
            config: Configuration snapshot
            logger: Optional object exposing debug()/info(); only used when
                config.logging_enabled is set
        """
        self.config = config
        self.logger = logger if (logger is not None and config.logging_enabled) else NullLogger()

    def _matches(self, url: str, domain: str) -> bool:
        if self.config.domain_match == HOSTNAME_MATCH:
            try:
                host = (urlsplit(url).hostname or "").lower()
            except ValueError:
                return False
            domain = domain.lower()
            return host == domain or host.endswith('.' + domain)
        return domain in url

    def _matches_any(self, url: str, domains: Iterable[str]) -> bool:
        return any(self._matches(url, domain) for domain in domains)

    def needs_proxy(self, url: Any) -> bool:
        """
        Check whether a URL should be routed through the proxy.

        Args:
            url: Candidate URL, any value is accepted

        Returns:
            bool: True if the URL is an external image URL that should be proxied
        """
        if not url or not isinstance(url, str):
            return False

        if url.startswith(RELATIVE_PREFIXES):
            return False

        # Already proxied
        if url.startswith(self.config.proxy_base_url):
            return False

        if not url.startswith(ABSOLUTE_PREFIXES):
            return False

        if self._matches_any(url, self.config.force_domains):
            return True

        if self._matches_any(url, self.config.skip_domains):
            return False

        if self.config.site_domain and self._matches(url, self.config.site_domain):
            return False

        return True

    def proxy_image_url(self, url: Any) -> Any:
        """
        Convert an image URL to its proxied form.

        Args:
            url: Image URL

        Returns:
            The proxied URL, or the input unchanged when it does not need proxying
        """
        if not self.needs_proxy(url):
            return url

        proxied_url = self.config.proxy_base_url + url
        self.logger.debug(f"[image-proxy] {url} -> {proxied_url}")
        return proxied_url
