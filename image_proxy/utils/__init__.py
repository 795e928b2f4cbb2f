"""
Utilities Package

Contains the pattern-based HTML rewriting functions and small helpers
for logging and environment parsing.
"""

from .html_utils import *
from .helpers import get_logger, env_flag, split_list

# Rewrite passes, in the order the content rewriter applies them
__all__ = [
    'rewrite_img_src',              # <img src="...">
    'rewrite_lazy_src',             # data-lazy-src="..."
    'rewrite_srcset',               # srcset="url 1x, url 2x"
    'rewrite_background_image',     # background-image: url(...)
    'rewrite_background_shorthand', # background: ... url(...) ...
    'rewrite_srcset_value',
    'rewrite_css_urls',
    'get_logger',
    'env_flag',
    'split_list',
]
