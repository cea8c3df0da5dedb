from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from manga_archiver.core.downloader import DownloadReport, PageDownloader
from manga_archiver.core.http_client import HttpClient
from manga_archiver.core.models import Chapter, ChapterFilter, Page, RetrievalOptions, Series
from manga_archiver.core.path_manager import PathManager


class BaseFetcher(ABC):
    """
    Site-specific extraction strategy.

    Every supported site implements the same contract so that one pipeline
    serves structurally different backends.
    """

    def __init__(self, options: RetrievalOptions, client: Optional[HttpClient] = None):
        self.options = options
        self.client = client or HttpClient(options)
        self.path_manager = PathManager(options.output_dir)
        self.downloader = PageDownloader(self.client, self.path_manager)

    @abstractmethod
    def get_series(self, source_url: str) -> Series:
        """
        Fetches and returns the series found at the given URL.
        """
        pass

    @abstractmethod
    def get_chapters(self, series: Series, chapter_filter: ChapterFilter) -> List[Chapter]:
        """
        Fetches the chapters of a series, deduplicated, restricted to the
        filter's range and sorted by chapter number.
        """
        pass

    @abstractmethod
    def get_pages(self, chapter: Chapter) -> List[Page]:
        """
        Fetches the list of pages of a single chapter, in reading order.
        """
        pass

    def prepare_directories(self, chapters: Sequence[Chapter]) -> None:
        """Creates the directory of every chapter up-front."""
        self.downloader.prepare_directories(chapters)

    def download_pages(self, pages: Sequence[Page]) -> DownloadReport:
        """Persists every page, skipping the ones already on disk."""
        return self.downloader.download(pages)
