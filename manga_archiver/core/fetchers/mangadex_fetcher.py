import math
import re
from typing import Any, Callable, List, TypeVar
from urllib.parse import urljoin, urlparse

from manga_archiver.core.chapter_selection import ChapterListing, dedup_listings, select_chapters
from manga_archiver.core.exceptions import PayloadError, ScrapingError
from manga_archiver.core.models import Chapter, ChapterFilter, Page, Pagination, Series
from manga_archiver.utils.logger import get_logger
from .base_fetcher import BaseFetcher
from .mangadex_models import ApiChapter, ApiChapterDetail, ApiSeries, ApiSeriesWithChapters, unwrap

logger = get_logger(__name__)

API_BASE_URL = "https://api.mangadex.org/v2"

SERIES_ID_RE = re.compile(r'^/title/(?P<id>\d+)')

T = TypeVar('T')


def endpoint_from_url(source_url: str) -> str:
    """
    Converts a series URL into the corresponding API endpoint.
    Example: "https://mangadex.org/title/642/kingdom/" -> "https://api.mangadex.org/v2/manga/642"
    """
    match = SERIES_ID_RE.match(urlparse(source_url).path)
    if not match:
        raise ScrapingError(f"series ID not found in {source_url}")
    return f"{API_BASE_URL}/manga/{match.group('id')}"


def parse_chapter_id(number: str) -> float:
    try:
        chapter_id = float(number)
    except ValueError as e:
        raise ScrapingError(f"invalid chapter ID {number!r}: {e}") from e
    if not math.isfinite(chapter_id):
        raise ScrapingError(f"invalid chapter ID {number!r}: not a finite number")
    return chapter_id


class MangadexFetcher(BaseFetcher):
    """Fetcher for https://mangadex.org, backed by its JSON API."""

    def _get_model(self, url: str, build: Callable[[Any], T]) -> T:
        payload = self.client.fetch_json(url)
        try:
            return build(unwrap(payload))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Unexpected payload structure from {url}: {e!r}")
            raise PayloadError(url, f"unexpected structure: {e!r}") from e

    def get_series(self, source_url: str) -> Series:
        endpoint = endpoint_from_url(source_url)
        logger.info(f"Scraping series info from {endpoint}")

        api_series = self._get_model(endpoint, ApiSeries.from_dict)
        return Series(
            title=api_series.title,
            source_url=f"{API_BASE_URL}/manga/{api_series.id}",
            pagination=Pagination(0, 0),
        )

    def get_chapters(self, series: Series, chapter_filter: ChapterFilter) -> List[Chapter]:
        logger.info(f"Scraping chapter links for series {series.title}")

        url = f"{series.source_url}?include=chapters"
        response = self._get_model(url, ApiSeriesWithChapters.from_dict)
        try:
            chapters = self._extract_chapters(response, series, chapter_filter)
        except ScrapingError as e:
            raise ScrapingError(f"failed to scrape chapters from {url}: {e}") from e
        logger.debug(f"Found {len(chapters)} chapters")

        chapters = select_chapters(chapters, chapter_filter.chapter_range)
        logger.debug(f"Selected {len(chapters)} chapters")
        return chapters

    def _extract_chapters(self, response: ApiSeriesWithChapters, series: Series,
                          chapter_filter: ChapterFilter) -> List[Chapter]:
        group_index = response.group_names()

        listings = [
            ChapterListing(
                number=api_chapter.chapter,
                group_names=tuple(group_index[group_id] for group_id in api_chapter.groups if group_id in group_index),
                timestamp=api_chapter.timestamp,
                payload=api_chapter,
            )
            for api_chapter in response.chapters
            if not chapter_filter.language or api_chapter.language == chapter_filter.language
        ]

        chapters = []
        for listing in dedup_listings(listings, chapter_filter.preferred_groups):
            api_chapter: ApiChapter = listing.payload
            chapters.append(Chapter(
                id=parse_chapter_id(api_chapter.chapter),
                series=series,
                volume=api_chapter.volume or None,
                source_url=f"{API_BASE_URL}/chapter/{api_chapter.id}",
            ))
        return chapters

    def get_pages(self, chapter: Chapter) -> List[Page]:
        logger.info(f"Scraping page links for chapter {chapter.id}")

        detail = self._get_model(chapter.source_url, ApiChapterDetail.from_dict)
        pages = []
        for filename in detail.pages:
            path = f"{detail.hash}/{filename}"
            pages.append(Page(
                chapter=chapter,
                main_url=urljoin(detail.server, path),
                fallback_url=urljoin(detail.server_fallback, path) if detail.server_fallback else None,
            ))

        logger.debug(f"Found {len(pages)} pages in chapter {chapter.id}")
        return pages
