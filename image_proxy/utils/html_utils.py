"""
HTML Processing Utilities

This module contains the pattern-based text transformations that locate
image URLs inside HTML attributes and inline CSS. Every function takes the
raw text and a ``replace(url) -> url`` callable, and only ever touches the
captured URL: markup around it is copied through unchanged, and a match
whose URL comes back unchanged is left exactly as it was.

None of these functions parse HTML. Malformed or partial markup simply
fails to match and passes through untouched.
"""

import re
from typing import Callable

__all__ = [
    'rewrite_img_src',
    'rewrite_lazy_src',
    'rewrite_srcset',
    'rewrite_srcset_value',
    'rewrite_background_image',
    'rewrite_background_shorthand',
    'rewrite_css_urls',
]

UrlReplacer = Callable[[str], str]

# A complete <img ...> tag. Stops at the next '<' so an unclosed tag costs
# one scan up to the following tag, not to the end of the document.
IMG_TAG_PATTERN = re.compile(r'<img\b[^<>]*>', re.IGNORECASE)

# src="URL" inside a single matched tag; -src suffixed attributes excluded
IMG_SRC_ATTR_PATTERN = re.compile(
    r'(?<![\w-])(?P<prefix>src\s*=\s*)(?P<quote>["\'])(?P<url>[^"\']+)(?P=quote)',
    re.IGNORECASE
)

LAZY_SRC_PATTERN = re.compile(
    r'(?P<prefix>\bdata-lazy-src\s*=\s*)(?P<quote>["\'])(?P<url>[^"\']+)(?P=quote)',
    re.IGNORECASE
)

SRCSET_PATTERN = re.compile(
    r'(?P<prefix>\bsrcset\s*=\s*)(?P<quote>["\'])(?P<url>[^"\']+)(?P=quote)',
    re.IGNORECASE
)

# Candidate URLs inside a srcset value; descriptors and separators never match
SRCSET_URL_PATTERN = re.compile(r'https?://[^\s,]+')

# A declaration value runs until ';', a brace, a tag bracket or a bare quote.
# url(...) is consumed as a unit so quotes inside it do not end the value.
_DECLARATION_VALUE = r'(?P<value>(?:url\([^()]*\)|[^;{}<>"\'])*)'

BACKGROUND_IMAGE_PATTERN = re.compile(
    r'(?P<prefix>\bbackground-image\s*:)' + _DECLARATION_VALUE,
    re.IGNORECASE
)

BACKGROUND_SHORTHAND_PATTERN = re.compile(
    r'(?P<prefix>\bbackground\s*:)' + _DECLARATION_VALUE,
    re.IGNORECASE
)

CSS_URL_PATTERN = re.compile(
    r'url\(\s*(?:(?P<quote>["\'])(?P<quoted>[^"\']*)(?P=quote)|(?P<bare>[^"\'\s()]+))\s*\)',
    re.IGNORECASE
)

DEFAULT_CSS_QUOTE = "'"


def _replace_quoted_attribute(pattern: re.Pattern, html: str, replace: UrlReplacer) -> str:
    """Substitute the URL of every ``name="URL"`` match of pattern, keeping its quote."""

    def substitute(match):
        url = match.group('url')
        new_url = replace(url)
        if new_url == url:
            return match.group(0)
        quote = match.group('quote')
        return f"{match.group('prefix')}{quote}{new_url}{quote}"

    return pattern.sub(substitute, html)


def rewrite_img_src(html: str, replace: UrlReplacer) -> str:
    """
    Rewrite the src attribute of <img> tags.

    Each tag is matched once and only its first quoted src attribute is
    rewritten. Tags left unclosed before the next '<' are not touched.
    """

    def substitute_tag(match):
        tag = match.group(0)
        src = IMG_SRC_ATTR_PATTERN.search(tag)
        if src is None:
            return tag
        url = src.group('url')
        new_url = replace(url)
        if new_url == url:
            return tag
        quote = src.group('quote')
        return f"{tag[:src.start()]}{src.group('prefix')}{quote}{new_url}{quote}{tag[src.end():]}"

    return IMG_TAG_PATTERN.sub(substitute_tag, html)


def rewrite_lazy_src(html: str, replace: UrlReplacer) -> str:
    """Rewrite data-lazy-src attributes used by lazy-loading scripts."""
    return _replace_quoted_attribute(LAZY_SRC_PATTERN, html, replace)


def rewrite_srcset_value(srcset: str, replace: UrlReplacer) -> str:
    """
    Rewrite every absolute URL candidate inside a srcset value.

    Args:
        srcset: Attribute value such as "https://a/x.jpg 1x, https://a/y.jpg 2x"
        replace: Callable mapping a URL to its rewritten form

    Returns:
        The value with each URL rewritten and descriptors, commas and
        whitespace preserved exactly
    """
    return SRCSET_URL_PATTERN.sub(lambda match: replace(match.group(0)), srcset)


def rewrite_srcset(html: str, replace: UrlReplacer) -> str:
    """Rewrite srcset (and data-srcset) attributes."""

    def substitute(match):
        srcset = match.group('url')
        new_srcset = rewrite_srcset_value(srcset, replace)
        if new_srcset == srcset:
            return match.group(0)
        quote = match.group('quote')
        return f"{match.group('prefix')}{quote}{new_srcset}{quote}"

    return SRCSET_PATTERN.sub(substitute, html)


def rewrite_css_urls(value: str, replace: UrlReplacer) -> str:
    """
    Rewrite the url(...) references inside a CSS declaration value.

    A quoted URL keeps its quote character and inner spacing. An unquoted URL
    that gets rewritten is wrapped in single quotes, so the proxied form can
    be embedded in a double-quoted style attribute. References that are not
    rewritten keep their original form.

    Known limitation: inside a single-quoted style='...' attribute the added
    single quotes end the attribute early. Quote such URLs in the source.
    """

    def substitute(match):
        group = 'quoted' if match.group('quote') else 'bare'
        url = match.group(group)
        new_url = replace(url)
        if new_url == url:
            return match.group(0)

        full = match.group(0)
        start = match.start(group) - match.start()
        end = match.end(group) - match.start()
        if group == 'quoted':
            return full[:start] + new_url + full[end:]
        return f"{full[:start]}{DEFAULT_CSS_QUOTE}{new_url}{DEFAULT_CSS_QUOTE}{full[end:]}"

    return CSS_URL_PATTERN.sub(substitute, value)


def _rewrite_declarations(pattern: re.Pattern, html: str, replace: UrlReplacer) -> str:
    def substitute(match):
        value = match.group('value')
        new_value = rewrite_css_urls(value, replace)
        if new_value == value:
            return match.group(0)
        return match.group('prefix') + new_value

    return pattern.sub(substitute, html)


def rewrite_background_image(html: str, replace: UrlReplacer) -> str:
    """Rewrite url(...) references of background-image declarations."""
    return _rewrite_declarations(BACKGROUND_IMAGE_PATTERN, html, replace)


def rewrite_background_shorthand(html: str, replace: UrlReplacer) -> str:
    """Rewrite url(...) references of background shorthand declarations."""
    return _rewrite_declarations(BACKGROUND_SHORTHAND_PATTERN, html, replace)
