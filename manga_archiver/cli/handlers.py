import sys
from typing import Any, Dict, Optional, Tuple, Union

import click

from manga_archiver.core.exceptions import FetcherError, UnsupportedSourceError
from manga_archiver.core.fetchers.fetcher_factory import FetcherFactory
from manga_archiver.core.orchestrator import download_series as call_orchestrator_download_series
from manga_archiver.utils.logger import get_logger
from .contexts import DownloadSeriesContext

logger = get_logger(__name__)


def display_progress(message: Union[str, Dict[str, Any]]) -> None:
    if isinstance(message, dict):
        status = message.get("status", "info")
        msg = message.get("message", "No message content.")
        color = "red" if status == "error" else None
        click.echo(click.style(f"[{status.upper()}] {msg}", fg=color))
    else:
        click.echo(str(message))


def download_series_handler(
    source_url: str,
    delay_ms: Optional[int],
    max_retries: Optional[int],
    output_dir: Optional[str],
    begin: Optional[float],
    end: Optional[float],
    language: Optional[str],
    preferred_groups: Tuple[str, ...],
):
    context = DownloadSeriesContext(
        source_url=source_url,
        delay_ms=delay_ms,
        max_retries=max_retries,
        output_dir=output_dir,
        begin=begin,
        end=end,
        language=language,
        preferred_groups=preferred_groups,
    )

    if not context.is_valid():
        for msg in context.error_messages:
            click.echo(click.style(msg, fg="red"), err=True)
        logger.error(f"DownloadSeriesContext validation failed. Errors: {context.error_messages}")
        sys.exit(1)

    click.echo(f"Received series URL: {context.source_url}")
    click.echo(f"Output directory: {context.output_dir}")
    logger.info(f"CLI handler initiated download of {context.source_url} to {context.output_dir}")

    try:
        summary = call_orchestrator_download_series(
            source_url=context.source_url,
            options=context.get_retrieval_options(),
            chapter_filter=context.get_chapter_filter(),
            progress_callback=display_progress,
        )
    except (UnsupportedSourceError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)
    except FetcherError as e:
        click.echo(click.style(f"Download failed: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(click.style("✓ Download completed successfully!", fg="green"))
    click.echo(f"  Title: {summary['title']}")
    click.echo(f"  Chapters: {summary['chapters']}")
    click.echo(f"  Pages downloaded: {summary['pages_downloaded']}")
    click.echo(f"  Pages already present: {summary['pages_skipped']}")


def sites_handler():
    for host in FetcherFactory.supported_hosts():
        click.echo(host)
