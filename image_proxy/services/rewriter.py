"""
Content Rewriting Service

This module applies the image URL transformations to HTML documents and
fragments, delegating every per-URL decision to the URL classifier.
"""

from typing import Any, Callable, Dict, Tuple

from image_proxy.models.proxy_config import ProxyConfig, RewriteResult
from image_proxy.services.classifier import UrlClassifier
from image_proxy.utils.html_utils import (
    rewrite_img_src, rewrite_lazy_src, rewrite_srcset,
    rewrite_background_image, rewrite_background_shorthand
)


class ContentRewriter:
    """
    Rewrites image URLs embedded in HTML/CSS text.

    The passes run in a fixed order over the whole text, each one feeding
    the next. Every pass targets a single construct and leaves anything it
    does not match untouched.
    """

    PASSES: Tuple[Tuple[str, Callable], ...] = (
        ('img_src', rewrite_img_src),
        ('lazy_src', rewrite_lazy_src),
        ('srcset', rewrite_srcset),
        ('background_image', rewrite_background_image),
        ('background', rewrite_background_shorthand),
    )

    def __init__(self, classifier: UrlClassifier):
        self.classifier = classifier

    @property
    def logger(self):
        return self.classifier.logger

    def rewrite(self, html: Any) -> RewriteResult:
        """
        Rewrite every image URL in a document.

        Args:
            html: HTML document or fragment; other values are returned as-is

        Returns:
            RewriteResult: Rewritten text and the number of proxied URLs
        """
        if not html or not isinstance(html, str):
            return RewriteResult(text=html, proxied_count=0)

        proxied_count = 0

        def replace(url: str) -> str:
            nonlocal proxied_count
            proxied_url = self.classifier.proxy_image_url(url)
            if proxied_url != url:
                proxied_count += 1
            return proxied_url

        for _name, rewrite_pass in self.PASSES:
            html = rewrite_pass(html, replace)

        if proxied_count > 0:
            self.logger.info(f"[image-proxy] proxied {proxied_count} cross-origin images")

        return RewriteResult(text=html, proxied_count=proxied_count)

    def process_images(self, html: Any) -> Any:
        """Rewrite a document and return only the text."""
        return self.rewrite(html).text


class ImageProxy:
    """
    Image proxy engine.

    Bundles the classifier and the rewriter built from one configuration
    snapshot. Instances hold no mutable state and can be shared between
    threads.
    """

    def __init__(self, config: ProxyConfig, logger=None):
        """
        Initialize the engine.

        Args:
            config: Configuration snapshot
            logger: Optional logger exposing debug()/info()
        """
        self.config = config
        self.classifier = UrlClassifier(config, logger)
        self.rewriter = ContentRewriter(self.classifier)

    def needs_proxy(self, url: Any) -> bool:
        return self.classifier.needs_proxy(url)

    def proxy_image_url(self, url: Any) -> Any:
        return self.classifier.proxy_image_url(url)

    def rewrite(self, html: Any) -> RewriteResult:
        return self.rewriter.rewrite(html)

    def process_images(self, html: Any) -> Any:
        return self.rewriter.process_images(html)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get the active configuration snapshot.

        Returns:
            Dict with proxy_url, site_domain, force_proxy_domains and skip_proxy_domains
        """
        return self.config.to_stats()
