"""
Extraction rules for the sites scraped from their HTML.

Each table is consumed by MarkupFetcher; supporting a new site of the same
kind only takes a new table and its registration in the fetcher factory.
"""
import re
from dataclasses import dataclass
from typing import Optional, Tuple

# Where the chapter number of a listing entry comes from.
ID_FROM_ENTRY_ATTRIBUTE = "entry_attribute"
ID_FROM_LINK_TITLE = "link_title"
ID_FROM_URL_PATH = "url_path"


@dataclass(frozen=True)
class SiteRules:
    name: str
    hosts: Tuple[str, ...]

    # Series page. A `None` attribute means the element's text is used.
    series_title_selector: str
    series_title_attribute: Optional[str]
    series_url_selector: str
    series_url_attribute: str

    # Chapter listing. Without a link selector, the entry is the link itself.
    chapter_selector: str
    chapter_link_selector: Optional[str]
    chapter_url_attribute: str
    chapter_id_from: str
    chapter_id_attribute: Optional[str] = None
    chapter_title_attribute: Optional[str] = None
    chapter_title_pattern: Optional[re.Pattern] = None

    # Chapter page.
    page_selector: str = "img"
    page_url_attribute: str = "src"

    # Paginated listings are newest first, one `?page=N` per listing page.
    paginated: bool = False
    listing_page_parameter: str = "page"


WEBTOONS = SiteRules(
    name="webtoons",
    hosts=("webtoons.com",),
    series_title_selector='meta[property="og:title"]',
    series_title_attribute="content",
    series_url_selector='meta[property="og:url"]',
    series_url_attribute="content",
    chapter_selector="#_listUl li",
    chapter_link_selector="a",
    chapter_url_attribute="href",
    chapter_id_from=ID_FROM_ENTRY_ATTRIBUTE,
    chapter_id_attribute="data-episode-no",
    page_selector="#_imageList img",
    page_url_attribute="data-url",
    paginated=True,
)

MANGAKAKALOT = SiteRules(
    name="mangakakalot",
    hosts=("mangakakalot.com",),
    series_title_selector=".manga-info-text h1",
    series_title_attribute=None,
    series_url_selector='meta[property="og:url"]',
    series_url_attribute="content",
    chapter_selector=".chapter-list .row a",
    chapter_link_selector=None,
    chapter_url_attribute="href",
    chapter_id_from=ID_FROM_LINK_TITLE,
    chapter_title_attribute="title",
    chapter_title_pattern=re.compile(r'(?i)(?:Vol.(?P<volume>\d+) )?Chapter (?P<id>\d+(?:\.\d+)?)'),
    page_selector=".container-chapter-reader img",
    page_url_attribute="src",
)

WEBTOONSCAN = SiteRules(
    name="webtoonscan",
    hosts=("webtoonscan.com",),
    series_title_selector=".post-title h1",
    series_title_attribute=None,
    series_url_selector='meta[property="og:url"]',
    series_url_attribute="content",
    chapter_selector=".version-chap li",
    chapter_link_selector="a",
    chapter_url_attribute="href",
    chapter_id_from=ID_FROM_URL_PATH,
    page_selector=".wp-manga-chapter-img",
    page_url_attribute="src",
)

SITE_RULES = (WEBTOONS, MANGAKAKALOT, WEBTOONSCAN)
