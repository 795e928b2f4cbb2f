"""
Models Package

Contains the configuration snapshot and result types used by the
image proxy engine.
"""

from .proxy_config import ProxyConfig, RewriteResult

__all__ = ['ProxyConfig', 'RewriteResult']
