import functools
import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

MIN_DELAY_MS = 10
DEFAULT_DELAY_MS = 1000
DEFAULT_MAX_RETRIES = 3
DEFAULT_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True)
class Pagination:
    """
    Pagination scheme of a series' chapter listing.

    Both counts are 0 when every chapter is listed on a single page.
    Listings are newest first: chapter numbers decrease as the listing
    page number increases.
    """
    chapter_count: int = 0
    page_size: int = 0

    @property
    def is_paginated(self) -> bool:
        return self.page_size > 0

    def get_page(self, chapter: float) -> int:
        """
        Returns the 1-based listing page on which `chapter` appears.

        Args:
            chapter: The chapter number. Values outside [1, chapter_count]
                     (including infinities) are clamped first.

        Raises:
            ValueError: If the pagination has no page size.
        """
        if self.page_size <= 0:
            raise ValueError(f"Cannot resolve listing page with page size {self.page_size}.")

        clamped = int(max(min(chapter, self.chapter_count), 1))
        return -(-(self.chapter_count - (clamped - 1)) // self.page_size)

    def page_span(self, lower: float, upper: float) -> range:
        """
        Returns the inclusive span of listing pages holding chapters lower..upper.

        The upper bound gives the first page to fetch and the lower bound the last.
        """
        return range(self.get_page(upper), self.get_page(lower) + 1)


@dataclass(frozen=True)
class Series:
    title: str
    source_url: str
    pagination: Pagination = field(default_factory=Pagination)


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Chapter:
    """
    A chapter of a series.

    Two chapters with the same `id` are the same logical chapter, whatever
    the source that listed them.
    """
    id: float
    series: Series
    volume: Optional[str]
    source_url: str

    def __eq__(self, other):
        if not isinstance(other, Chapter):
            return NotImplemented
        return self.id == other.id

    def __lt__(self, other):
        if not isinstance(other, Chapter):
            return NotImplemented
        return self.id < other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class Page:
    chapter: Chapter
    main_url: str
    fallback_url: Optional[str] = None


@dataclass(frozen=True)
class ChapterFilter:
    """
    Chapter selection supplied by the caller.

    chapter_range: Inclusive (lower, upper) chapter numbers.
    language: Language code of the chapters to keep, empty for any.
    preferred_groups: Scanlation group names, most preferred first.
    """
    chapter_range: Tuple[float, float] = (0, math.inf)
    language: str = ""
    preferred_groups: Tuple[str, ...] = ()

    @property
    def lower(self) -> float:
        return self.chapter_range[0]

    @property
    def upper(self) -> float:
        return self.chapter_range[1]


@dataclass(frozen=True)
class RetrievalOptions:
    delay: float = DEFAULT_DELAY_MS / 1000
    max_retries: int = DEFAULT_MAX_RETRIES
    output_dir: str = "."
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_milliseconds(cls, delay_ms: int, max_retries: int, output_dir: str,
                          timeout: float = DEFAULT_TIMEOUT_SECONDS) -> "RetrievalOptions":
        """Builds options from a delay in milliseconds, clamped to a 10 ms floor."""
        if max_retries < 0:
            raise ValueError(f"max_retries must be non-negative, got {max_retries}.")
        delay = max(delay_ms, MIN_DELAY_MS) / 1000
        return cls(delay=delay, max_retries=max_retries, output_dir=output_dir, timeout=timeout)
