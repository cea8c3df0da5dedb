import math
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from .models import Chapter

# Rank of a listing published by none of the preferred groups.
WORST_RANK = sys.maxsize


@dataclass(frozen=True)
class ChapterListing:
    """
    One raw listing of a chapter, as published by one or several groups.

    `number` is the chapter number exactly as the source wrote it; it is the
    deduplication key. `payload` carries whatever the fetcher needs to build
    the final Chapter.
    """
    number: str
    group_names: Tuple[str, ...] = ()
    timestamp: int = 0
    payload: Any = field(default=None, compare=False)


def rank_listing(listing: ChapterListing, preferred_groups: Sequence[str]) -> int:
    """
    Scores a listing from its groups: the best position of any of them in
    `preferred_groups`. Lower is better.
    """
    ranks = [
        preferred_groups.index(name)
        for name in listing.group_names
        if name in preferred_groups
    ]
    return min(ranks, default=WORST_RANK)


def dedup_listings(listings: Iterable[ChapterListing],
                   preferred_groups: Sequence[str]) -> List[ChapterListing]:
    """
    Keeps a single listing per chapter number.

    The listing with the best rank wins; on equal ranks the most recent one
    (largest timestamp) wins. The result is ordered by chapter number string.
    """
    preferred_groups = list(preferred_groups)
    kept: Dict[str, ChapterListing] = {}

    for listing in listings:
        current = kept.get(listing.number)
        if current is None:
            kept[listing.number] = listing
            continue

        new_rank = rank_listing(listing, preferred_groups)
        current_rank = rank_listing(current, preferred_groups)
        if new_rank < current_rank or (new_rank == current_rank and listing.timestamp > current.timestamp):
            kept[listing.number] = listing

    return [kept[number] for number in sorted(kept)]


def select_chapters(chapters: Iterable[Chapter], chapter_range: Tuple[float, float]) -> List[Chapter]:
    """
    Drops chapters outside the inclusive range and sorts the rest by number.

    Raises:
        AssertionError: If a chapter number is NaN; fetchers never build such chapters.
    """
    lower, upper = chapter_range
    selected = []
    for chapter in chapters:
        if math.isnan(chapter.id):
            raise AssertionError(f"abnormal float as chapter ID in {chapter.source_url}")
        if lower <= chapter.id <= upper:
            selected.append(chapter)

    selected.sort(key=lambda chapter: chapter.id)
    return selected
