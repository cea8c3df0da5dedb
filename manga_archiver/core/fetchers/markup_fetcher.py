import re
from typing import List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup, Tag

from manga_archiver.core.chapter_selection import select_chapters
from manga_archiver.core.exceptions import ScrapingError
from manga_archiver.core.http_client import HttpClient
from manga_archiver.core.models import Chapter, ChapterFilter, Page, Pagination, RetrievalOptions, Series
from manga_archiver.utils.logger import get_logger
from .base_fetcher import BaseFetcher
from .site_rules import ID_FROM_ENTRY_ATTRIBUTE, ID_FROM_LINK_TITLE, ID_FROM_URL_PATH, SiteRules

logger = get_logger(__name__)

CHAPTER_NUMBER_RE = re.compile(r'^\d+(?:\.\d+)?$')


def parse_chapter_number(text: str) -> float:
    text = text.strip()
    if not CHAPTER_NUMBER_RE.match(text):
        raise ScrapingError(f"invalid chapter ID: {text!r}")
    return float(text)


def with_query_parameter(url: str, name: str, value: str) -> str:
    """Returns `url` with the query parameter `name` set to `value`."""
    parsed = urlparse(url)
    query = [(key, val) for key, val in parse_qsl(parsed.query, keep_blank_values=True) if key != name]
    query.append((name, value))
    return urlunparse(parsed._replace(query=urlencode(query)))


def absolute_url(base_url: str, href: str, what: str) -> str:
    url = urljoin(base_url, href.strip())
    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ScrapingError(f"invalid {what} `{href}`")
    return url


def get_attribute(element: Tag, attribute: str, what: str) -> str:
    value = element.get(attribute)
    if isinstance(value, list):  # Multi-valued attributes such as `class`.
        value = " ".join(value)
    if value is None:
        raise ScrapingError(f"{what} is missing (attribute `{attribute}`)")
    return value


def select_first(node: Tag, selector: str, what: str) -> Tag:
    element = node.select_one(selector)
    if element is None:
        raise ScrapingError(f"{what} not found (selector `{selector}`)")
    return element


class MarkupFetcher(BaseFetcher):
    """
    Generic fetcher for sites scraped from their HTML.

    The structure of the site is described by a SiteRules table. Any element
    or attribute that doesn't match the rules raises a ScrapingError with the
    offending URL and selector.
    """

    def __init__(self, rules: SiteRules, options: RetrievalOptions, client: Optional[HttpClient] = None):
        super().__init__(options, client)
        self.rules = rules

    def get_series(self, source_url: str) -> Series:
        logger.info(f"Scraping series info from {source_url}")

        soup = self.client.fetch_html(source_url)
        try:
            series = self.parse_series(soup, source_url)
        except ScrapingError as e:
            raise ScrapingError(f"failed to scrape series from {source_url}: {e}") from e

        logger.debug(
            f"Scraped info for series `{series.title}`: {series.pagination.chapter_count} chapters, "
            f"{series.pagination.page_size} per page"
        )
        return series

    def get_chapters(self, series: Series, chapter_filter: ChapterFilter) -> List[Chapter]:
        logger.info(f"Scraping chapter links for series {series.title}")

        if series.pagination.is_paginated:
            listing_urls = [
                with_query_parameter(series.source_url, self.rules.listing_page_parameter, str(page))
                for page in series.pagination.page_span(chapter_filter.lower, chapter_filter.upper)
            ]
        else:
            listing_urls = [series.source_url]

        chapters: List[Chapter] = []
        for url in listing_urls:
            logger.info(f"Extracting chapters from {url}")
            soup = self.client.fetch_html(url)
            try:
                chapters.extend(self.parse_chapters(soup, series, url))
            except ScrapingError as e:
                raise ScrapingError(f"failed to scrape chapters from {url}: {e}") from e
        logger.debug(f"Found {len(chapters)} chapters")

        chapters = select_chapters(chapters, chapter_filter.chapter_range)
        logger.debug(f"Selected {len(chapters)} chapters")
        return chapters

    def get_pages(self, chapter: Chapter) -> List[Page]:
        logger.info(f"Scraping page links for chapter {chapter.id}")

        soup = self.client.fetch_html(chapter.source_url)
        try:
            pages = self.parse_pages(soup, chapter)
        except ScrapingError as e:
            raise ScrapingError(f"failed to scrape pages from {chapter.source_url}: {e}") from e

        logger.debug(f"Found {len(pages)} pages in chapter {chapter.id}")
        return pages

    # Parsing

    def parse_series(self, soup: BeautifulSoup, source_url: str) -> Series:
        rules = self.rules

        title_tag = select_first(soup, rules.series_title_selector, "series title")
        if rules.series_title_attribute:
            title = get_attribute(title_tag, rules.series_title_attribute, "series title")
        else:
            title = title_tag.get_text()
        title = title.strip()
        if not title:
            raise ScrapingError("series title is missing")

        url_tag = select_first(soup, rules.series_url_selector, "series URL")
        series_url = absolute_url(
            source_url, get_attribute(url_tag, rules.series_url_attribute, "series URL"), "series URL"
        )

        pagination = self.parse_pagination(soup, source_url) if rules.paginated else Pagination(0, 0)
        return Series(title=title, source_url=series_url, pagination=pagination)

    def parse_pagination(self, soup: BeautifulSoup, page_url: str) -> Pagination:
        """Infers the pagination scheme from the first (newest) page of the chapter list."""
        try:
            ids = [self._parse_entry(entry, page_url)[0] for entry in soup.select(self.rules.chapter_selector)]
        except ScrapingError as e:
            raise ScrapingError(f"failed to scrape chapter list to infer pagination: {e}") from e
        if not ids:
            raise ScrapingError(f"chapter list is empty (selector `{self.rules.chapter_selector}`)")
        return Pagination(chapter_count=int(ids[0]), page_size=len(ids))

    def parse_chapters(self, soup: BeautifulSoup, series: Series, page_url: str) -> List[Chapter]:
        chapters = []
        for entry in soup.select(self.rules.chapter_selector):
            chapter_id, volume, url = self._parse_entry(entry, page_url)
            chapters.append(Chapter(id=chapter_id, series=series, volume=volume, source_url=url))
        return chapters

    def parse_pages(self, soup: BeautifulSoup, chapter: Chapter) -> List[Page]:
        pages = []
        for image in soup.select(self.rules.page_selector):
            src = get_attribute(image, self.rules.page_url_attribute, "page URL")
            pages.append(Page(chapter=chapter, main_url=absolute_url(chapter.source_url, src, "page URL")))
        return pages

    def _parse_entry(self, entry: Tag, page_url: str) -> Tuple[float, Optional[str], str]:
        """
        Extracts (chapter number, volume, chapter URL) from a listing entry.
        """
        rules = self.rules
        link = entry if rules.chapter_link_selector is None else select_first(
            entry, rules.chapter_link_selector, "chapter link"
        )

        href = get_attribute(link, rules.chapter_url_attribute, "chapter URL")
        url = absolute_url(page_url, href, "chapter URL")

        volume = None
        if rules.chapter_id_from == ID_FROM_ENTRY_ATTRIBUTE:
            chapter_id = parse_chapter_number(get_attribute(entry, rules.chapter_id_attribute, "chapter ID"))
        elif rules.chapter_id_from == ID_FROM_LINK_TITLE:
            title = get_attribute(link, rules.chapter_title_attribute, "chapter title")
            match = rules.chapter_title_pattern.search(title)
            if not match:
                raise ScrapingError(f"cannot match on chapter title: {title}")
            chapter_id = parse_chapter_number(match.group('id'))
            volume = match.group('volume')
        elif rules.chapter_id_from == ID_FROM_URL_PATH:
            last_segment = urlparse(url).path.rstrip('/').rsplit('/', 1)[-1]
            if not last_segment:
                raise ScrapingError(f"chapter ID not found in {url}")
            chapter_id = parse_chapter_number(last_segment)
        else:
            raise ValueError(f"Unknown chapter ID source: {rules.chapter_id_from}")

        return chapter_id, volume, url
