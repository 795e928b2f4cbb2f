"""
Services Package

Contains the URL classifier, the content rewriter and the integration
services built around them.
"""

from .classifier import UrlClassifier
from .rewriter import ContentRewriter, ImageProxy
from .pipeline import ImageProxyPipeline, build_image_proxy

__all__ = [
    'UrlClassifier',
    'ContentRewriter',
    'ImageProxy',
    'ImageProxyPipeline',
    'build_image_proxy',
]
