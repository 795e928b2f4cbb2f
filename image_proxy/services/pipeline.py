"""
Publishing Pipeline Integration

This module wires the image proxy engine into a static-site publishing
pipeline. The pipeline calls into it at two points: after a post has been
rendered, and after a full page has been assembled.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from image_proxy.models.proxy_config import ProxyConfig
from image_proxy.services.rewriter import ImageProxy
from image_proxy.utils.helpers import get_logger

# Per-URL records are debug level; they are only produced when log_enabled is set
proxy_logger = get_logger('image_proxy', logging.DEBUG)

DEFAULT_OPTIONS = {
    'enable': True,
    'proxy_url': '',
    'site_domain': '',
    'force_proxy_domains': [],
    'skip_proxy_domains': [],
    'log_enabled': False,
}

# Post fields holding a bare image URL rather than HTML
IMAGE_FIELDS = ('cover', 'top_img')


def build_image_proxy(options: Optional[Mapping[str, Any]], logger=proxy_logger) -> Optional[ImageProxy]:
    """
    Create the engine from host options merged over the defaults.

    Args:
        options: Host options (see DEFAULT_OPTIONS for the keys)
        logger: Logger handed to the engine

    Returns:
        ImageProxy, or None when the proxy is disabled or no proxy_url is set
    """
    merged = dict(DEFAULT_OPTIONS)
    merged.update(options or {})

    if not merged.get('enable') or not merged.get('proxy_url'):
        return None

    config = ProxyConfig.from_options(merged)
    image_proxy = ImageProxy(config, logger)

    if config.logging_enabled and logger is not None:
        logger.info("[image-proxy] image proxy enabled")
        logger.info(f"[image-proxy] proxy server: {config.proxy_base_url}")

    return image_proxy


class ImageProxyPipeline:
    """Pipeline hooks backed by one engine instance."""

    def __init__(self, image_proxy: ImageProxy):
        self.image_proxy = image_proxy

    def after_post_render(self, post: Dict[str, Any]) -> Dict[str, Any]:
        """
        Rewrite a rendered post in place.

        Args:
            post: Post data with 'content' and optional 'cover'/'top_img' fields

        Returns:
            The same post dict
        """
        post['content'] = self.image_proxy.process_images(post.get('content'))

        for field_name in IMAGE_FIELDS:
            value = post.get(field_name)
            if value and self.image_proxy.needs_proxy(value):
                post[field_name] = self.image_proxy.proxy_image_url(value)

        return post

    def after_render_html(self, html: Any) -> Any:
        """Rewrite a fully assembled page."""
        return self.image_proxy.process_images(html)
