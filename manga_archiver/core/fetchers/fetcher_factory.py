from functools import partial
from typing import Callable, Dict, List, Optional
from urllib.parse import urlparse

from manga_archiver.core.exceptions import UnsupportedSourceError
from manga_archiver.core.http_client import HttpClient
from manga_archiver.core.models import RetrievalOptions
from .base_fetcher import BaseFetcher
from .mangadex_fetcher import MangadexFetcher
from .markup_fetcher import MarkupFetcher
from .site_rules import SITE_RULES

FetcherBuilder = Callable[[RetrievalOptions, Optional[HttpClient]], BaseFetcher]


def _build_registry() -> Dict[str, FetcherBuilder]:
    registry: Dict[str, FetcherBuilder] = {"mangadex.org": MangadexFetcher}
    for rules in SITE_RULES:
        for host in rules.hosts:
            registry[host] = partial(MarkupFetcher, rules)
    return registry


# Single registration point: host name -> fetcher.
FETCHERS: Dict[str, FetcherBuilder] = _build_registry()


def host_matches(domain: str, host: str) -> bool:
    return domain == host or domain.endswith("." + host)


class FetcherFactory:
    """
    Factory class to select and return the appropriate fetcher based on the series URL.
    """

    @staticmethod
    def supported_hosts() -> List[str]:
        return sorted(FETCHERS)

    @staticmethod
    def get_fetcher(source_url: str, options: RetrievalOptions,
                    client: Optional[HttpClient] = None) -> BaseFetcher:
        """
        Analyzes the series URL and returns an instance of the appropriate fetcher.

        Args:
            source_url: The URL of the series.
            options: Retrieval options shared by the fetcher's HTTP client and downloader.
            client: An HTTP client to use instead of building one from `options`.

        Returns:
            An instance of a BaseFetcher subclass.

        Raises:
            UnsupportedSourceError: If the domain of the source_url is not supported.
            ValueError: If the URL is malformed or missing a domain.
        """
        if not source_url:
            raise ValueError("Series URL cannot be empty.")

        try:
            domain = (urlparse(source_url).hostname or "").lower()
        except ValueError as e:
            raise ValueError(f"Invalid URL format: {source_url}. Error: {e}")

        if not domain:
            raise ValueError(f"Could not determine domain from URL: {source_url}")

        for host, builder in FETCHERS.items():
            if host_matches(domain, host):
                return builder(options, client)

        raise UnsupportedSourceError(f"Source not supported for URL: {source_url} (domain: {domain})")
