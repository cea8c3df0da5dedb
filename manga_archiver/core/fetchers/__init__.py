from .base_fetcher import BaseFetcher
from .mangadex_fetcher import MangadexFetcher
from .markup_fetcher import MarkupFetcher
from .fetcher_factory import FetcherFactory
from .site_rules import SiteRules, SITE_RULES

__all__ = [
    "BaseFetcher",
    "MangadexFetcher",
    "MarkupFetcher",
    "FetcherFactory",
    "SiteRules",
    "SITE_RULES",
]
