"""
Proxy Configuration Model

This module contains the immutable configuration snapshot the image proxy
engine is built from, and the result type returned by a rewrite pass.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union


SUBSTRING_MATCH = "substring"
HOSTNAME_MATCH = "hostname"
DOMAIN_MATCH_MODES = (SUBSTRING_MATCH, HOSTNAME_MATCH)


def _normalize_domains(value: Union[str, Iterable[str], None]) -> Tuple[str, ...]:
    """
    Turn a domain list option into a tuple of non-empty entries.

    Accepts either an iterable of strings or a single comma-separated string
    (the form used by environment variables). Order is preserved.
    """
    if not value:
        return ()
    if isinstance(value, str):
        value = value.split(',')
    return tuple(str(item).strip() for item in value if item and str(item).strip())


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


@dataclass(frozen=True)
class ProxyConfig:
    """
    Read-only configuration snapshot for the image proxy engine.

    Attributes:
        proxy_base_url (str): Prefix prepended to proxied URLs, always ending with '/'
        site_domain (str): Domain of the site itself; matching URLs are never proxied
        force_domains (tuple): Ordered rules that always proxy a matching URL
        skip_domains (tuple): Ordered rules that never proxy a matching URL
        logging_enabled (bool): Whether diagnostics are sent to the logger
        domain_match (str): 'substring' (default) or 'hostname' rule matching
    """

    proxy_base_url: str
    site_domain: str = ""
    force_domains: Tuple[str, ...] = field(default_factory=tuple)
    skip_domains: Tuple[str, ...] = field(default_factory=tuple)
    logging_enabled: bool = False
    domain_match: str = SUBSTRING_MATCH

    def __post_init__(self):
        # Frozen dataclass: normalize through object.__setattr__
        base = self.proxy_base_url or ""
        if base and not base.endswith('/'):
            base += '/'
        object.__setattr__(self, 'proxy_base_url', base)
        object.__setattr__(self, 'site_domain', (self.site_domain or "").strip())
        object.__setattr__(self, 'force_domains', _normalize_domains(self.force_domains))
        object.__setattr__(self, 'skip_domains', _normalize_domains(self.skip_domains))
        object.__setattr__(self, 'logging_enabled', _as_bool(self.logging_enabled))

        mode = (self.domain_match or SUBSTRING_MATCH).strip().lower()
        if mode not in DOMAIN_MATCH_MODES:
            raise ValueError(
                f"Unknown domain_match '{self.domain_match}', "
                f"expected one of: {', '.join(DOMAIN_MATCH_MODES)}"
            )
        object.__setattr__(self, 'domain_match', mode)

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]]) -> "ProxyConfig":
        """
        Build a snapshot from host option names.

        Args:
            options: Mapping using the host option keys (proxy_url, site_domain,
                force_proxy_domains, skip_proxy_domains, log_enabled, domain_match)

        Returns:
            ProxyConfig: The normalized configuration
        """
        options = options or {}
        return cls(
            proxy_base_url=options.get('proxy_url') or "",
            site_domain=options.get('site_domain') or "",
            force_domains=options.get('force_proxy_domains'),
            skip_domains=options.get('skip_proxy_domains'),
            logging_enabled=options.get('log_enabled', False),
            domain_match=options.get('domain_match') or SUBSTRING_MATCH,
        )

    def to_stats(self) -> Dict[str, Any]:
        """Diagnostics view of the snapshot."""
        return {
            'proxy_url': self.proxy_base_url,
            'site_domain': self.site_domain,
            'force_proxy_domains': list(self.force_domains),
            'skip_proxy_domains': list(self.skip_domains),
        }


@dataclass(frozen=True)
class RewriteResult:
    """Rewritten text plus the number of image URLs that were proxied."""

    text: Any
    proxied_count: int = 0
