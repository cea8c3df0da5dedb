import os
from dataclasses import dataclass
from typing import Iterable, Sequence

from manga_archiver.utils.logger import get_logger
from .exceptions import FetcherError, FilesystemError
from .http_client import HttpClient
from .models import Chapter, Page
from .path_manager import PathManager

logger = get_logger(__name__)

TEMP_SUFFIX = ".tmp"


@dataclass
class DownloadReport:
    downloaded: int = 0
    skipped: int = 0

    def merge(self, other: "DownloadReport") -> None:
        self.downloaded += other.downloaded
        self.skipped += other.skipped


def mkdir_p(path: str) -> None:
    """Recursively creates a directory and its parents if necessary."""
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise FilesystemError("mkdir", path) from e


def atomic_save(path: str, data: bytes) -> None:
    """Writes `data` next to `path` then renames it into place."""
    tmp_path = path + TEMP_SUFFIX
    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
    except OSError as e:
        raise FilesystemError("write", tmp_path) from e

    try:
        os.replace(tmp_path, path)
    except OSError as e:
        raise FilesystemError("rename", path) from e


class PageDownloader:
    """Downloads page images to their final location, skipping existing files."""

    def __init__(self, client: HttpClient, path_manager: PathManager):
        self.client = client
        self.path_manager = path_manager

    def prepare_directories(self, chapters: Iterable[Chapter]) -> None:
        for chapter in chapters:
            mkdir_p(self.path_manager.get_chapter_dir(chapter))

    def download(self, pages: Sequence[Page]) -> DownloadReport:
        report = DownloadReport()
        if not pages:
            return report

        logger.info(f"Downloading {len(pages)} pages for chapter {pages[0].chapter.id}")
        for index, page in enumerate(pages, start=1):
            path = self.path_manager.get_page_filepath(page, index)

            if os.path.exists(path):
                logger.debug(f"{path} already exists, skip")
                report.skipped += 1
                continue

            logger.info(f"Downloading {path}")
            data = self._fetch_page(page)
            mkdir_p(os.path.dirname(path))
            atomic_save(path, data)
            report.downloaded += 1

        return report

    def _fetch_page(self, page: Page) -> bytes:
        referer = page.chapter.source_url
        try:
            return self.client.fetch_bytes(page.main_url, referer)
        except FetcherError as e:
            if not page.fallback_url:
                raise
            logger.warning(f"Failed to download {page.main_url} ({e}), trying fallback {page.fallback_url}")
            return self.client.fetch_bytes(page.fallback_url, referer)
