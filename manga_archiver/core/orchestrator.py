from typing import Any, Callable, Dict, Optional, Union

from manga_archiver.utils.logger import get_logger
from .downloader import DownloadReport
from .exceptions import FetcherError
from .fetchers.base_fetcher import BaseFetcher
from .fetchers.fetcher_factory import FetcherFactory
from .models import ChapterFilter, RetrievalOptions

ProgressCallback = Callable[[Union[str, Dict[str, Any]]], None]
logger = get_logger(__name__)


def download_series(
    source_url: str,
    options: RetrievalOptions,
    chapter_filter: ChapterFilter,
    progress_callback: Optional[ProgressCallback] = None,
    fetcher: Optional[BaseFetcher] = None,
) -> Dict[str, Any]:
    """
    Downloads every selected chapter of the series at `source_url`.

    The run stops on the first error: it is reported through the callback,
    logged, then re-raised.

    Returns:
        A summary with the series title, the number of chapters and the
        number of pages downloaded or skipped.
    """
    def _call_progress_callback(message: Union[str, Dict[str, Any]]) -> None:
        if progress_callback:
            progress_callback(message)

    fetcher = fetcher or FetcherFactory.get_fetcher(source_url, options)
    logger.info(f"Using {type(fetcher).__name__} for {source_url}")

    try:
        series = fetcher.get_series(source_url)
        _call_progress_callback({"status": "info", "message": f"Successfully fetched series: {series.title}"})

        chapters = fetcher.get_chapters(series, chapter_filter)
        _call_progress_callback({"status": "info", "message": f"Found {len(chapters)} chapters to download."})

        fetcher.prepare_directories(chapters)

        report = DownloadReport()
        for i, chapter in enumerate(chapters):
            _call_progress_callback({
                "status": "info",
                "message": f"Processing chapter {chapter.id} ({i + 1}/{len(chapters)})",
                "current_chapter_num": i + 1,
                "total_chapters": len(chapters),
            })
            pages = fetcher.get_pages(chapter)
            report.merge(fetcher.download_pages(pages))
    except FetcherError as e:
        logger.error(f"Download of {source_url} aborted: {e}", exc_info=True)
        _call_progress_callback({"status": "error", "message": str(e)})
        raise

    summary = {
        "title": series.title,
        "chapters": len(chapters),
        "pages_downloaded": report.downloaded,
        "pages_skipped": report.skipped,
        "output_dir": fetcher.path_manager.output_dir,
    }
    logger.info(
        f"Finished '{series.title}': {len(chapters)} chapters, "
        f"{report.downloaded} pages downloaded, {report.skipped} already present."
    )
    return summary
