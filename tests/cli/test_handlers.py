import pytest
from unittest import mock

from manga_archiver.cli.contexts import DownloadSeriesContext
from manga_archiver.cli.handlers import display_progress, download_series_handler
from manga_archiver.core.exceptions import NetworkError, UnsupportedSourceError
from manga_archiver.core.models import ChapterFilter, RetrievalOptions

# Mock path for the orchestrator function called by the handler
ORCHESTRATOR_PATH = "manga_archiver.cli.handlers.call_orchestrator_download_series"
# Mock paths for click functions
CLICK_ECHO_PATH = "manga_archiver.cli.handlers.click.echo"
CLICK_STYLE_PATH = "manga_archiver.cli.handlers.click.style"

HANDLER_KWARGS = dict(
    source_url="https://mangadex.org/title/642/kingdom",
    delay_ms=100,
    max_retries=2,
    output_dir="/mock/output",
    begin=1.0,
    end=10.0,
    language="gb",
    preferred_groups=("Alpha Scans",),
)

SUMMARY = {
    "title": "Kingdom",
    "chapters": 10,
    "pages_downloaded": 180,
    "pages_skipped": 20,
    "output_dir": "/mock/output",
}


def echoed(mock_echo):
    return [c.args[0] for c in mock_echo.call_args_list]


class TestDownloadSeriesHandler:

    @mock.patch(CLICK_STYLE_PATH, side_effect=lambda text, **kwargs: text)
    @mock.patch(CLICK_ECHO_PATH)
    @mock.patch(ORCHESTRATOR_PATH)
    def test_download_series_handler_success(self, mock_orchestrator, mock_echo, mock_style):
        mock_orchestrator.return_value = SUMMARY

        download_series_handler(**HANDLER_KWARGS)

        mock_orchestrator.assert_called_once()
        called_kwargs = mock_orchestrator.call_args[1]
        assert called_kwargs['source_url'] == "https://mangadex.org/title/642/kingdom"
        assert called_kwargs['options'] == RetrievalOptions(delay=0.1, max_retries=2, output_dir="/mock/output", timeout=15.0)
        assert called_kwargs['chapter_filter'] == ChapterFilter(
            chapter_range=(1.0, 10.0), language="gb", preferred_groups=("Alpha Scans",)
        )
        assert called_kwargs['progress_callback'] is display_progress

        output = echoed(mock_echo)
        assert "✓ Download completed successfully!" in output
        assert "  Title: Kingdom" in output
        assert "  Chapters: 10" in output
        assert "  Pages downloaded: 180" in output
        assert "  Pages already present: 20" in output

    @mock.patch(CLICK_STYLE_PATH, side_effect=lambda text, **kwargs: text)
    @mock.patch(CLICK_ECHO_PATH)
    @mock.patch(ORCHESTRATOR_PATH)
    def test_invalid_range_exits(self, mock_orchestrator, mock_echo, mock_style):
        kwargs = dict(HANDLER_KWARGS, begin=10.0, end=1.0)

        with pytest.raises(SystemExit) as excinfo:
            download_series_handler(**kwargs)

        assert excinfo.value.code == 1
        mock_orchestrator.assert_not_called()
        mock_echo.assert_any_call("Error: `begin` (10) must be lower than `end` (1).", err=True)

    @mock.patch(CLICK_STYLE_PATH, side_effect=lambda text, **kwargs: text)
    @mock.patch(CLICK_ECHO_PATH)
    @mock.patch(ORCHESTRATOR_PATH)
    def test_unsupported_source_exits(self, mock_orchestrator, mock_echo, mock_style):
        mock_orchestrator.side_effect = UnsupportedSourceError("Source not supported for URL: https://example.com")

        with pytest.raises(SystemExit) as excinfo:
            download_series_handler(**dict(HANDLER_KWARGS, source_url="https://example.com"))

        assert excinfo.value.code == 1
        mock_echo.assert_any_call("Error: Source not supported for URL: https://example.com", err=True)

    @mock.patch(CLICK_STYLE_PATH, side_effect=lambda text, **kwargs: text)
    @mock.patch(CLICK_ECHO_PATH)
    @mock.patch(ORCHESTRATOR_PATH)
    def test_fetcher_error_exits(self, mock_orchestrator, mock_echo, mock_style):
        error = NetworkError("https://api.mangadex.org/v2/manga/642", status=503, reason="Service Unavailable")
        mock_orchestrator.side_effect = error

        with pytest.raises(SystemExit) as excinfo:
            download_series_handler(**HANDLER_KWARGS)

        assert excinfo.value.code == 1
        mock_echo.assert_any_call(f"Download failed: {error}", err=True)
        assert "✓ Download completed successfully!" not in echoed(mock_echo)


class TestDisplayProgress:

    @mock.patch(CLICK_STYLE_PATH, side_effect=lambda text, **kwargs: text)
    @mock.patch(CLICK_ECHO_PATH)
    def test_dict_message(self, mock_echo, mock_style):
        display_progress({"status": "info", "message": "Found 3 chapters to download."})
        mock_echo.assert_called_once_with("[INFO] Found 3 chapters to download.")

    @mock.patch(CLICK_STYLE_PATH, side_effect=lambda text, **kwargs: text)
    @mock.patch(CLICK_ECHO_PATH)
    def test_error_is_red(self, mock_echo, mock_style):
        display_progress({"status": "error", "message": "boom"})
        mock_style.assert_called_once_with("[ERROR] boom", fg="red")

    @mock.patch(CLICK_ECHO_PATH)
    def test_plain_message(self, mock_echo):
        display_progress("plain text")
        mock_echo.assert_called_once_with("plain text")


class TestDownloadSeriesContext:

    def test_cli_values_win_over_config(self):
        config_manager = mock.Mock()
        config_manager.get_delay_ms.return_value = 2000
        config_manager.get_max_retries.return_value = 7
        config_manager.get_output_dir.return_value = "/from/config"
        config_manager.get_timeout.return_value = 20.0
        config_manager.get_language.return_value = "fr"
        config_manager.get_preferred_groups.return_value = ("Config Scans",)

        context = DownloadSeriesContext(
            source_url="https://mangadex.org/title/642",
            delay_ms=50, max_retries=None, output_dir=None,
            begin=None, end=None, language="gb", preferred_groups=(),
            config_manager=config_manager,
        )

        assert context.delay_ms == 50
        assert context.max_retries == 7
        assert context.output_dir == "/from/config"
        assert context.language == "gb"
        assert context.preferred_groups == ("Config Scans",)
        assert context.get_retrieval_options() == RetrievalOptions(
            delay=0.05, max_retries=7, output_dir="/from/config", timeout=20.0
        )

    def test_defaults_from_config_file(self):
        context = DownloadSeriesContext(
            source_url="https://mangadex.org/title/642",
            delay_ms=None, max_retries=None, output_dir=None,
            begin=None, end=None, language=None, preferred_groups=(),
        )

        assert context.is_valid()
        assert context.delay_ms == 1000
        assert context.max_retries == 3
        assert context.output_dir == "."
        assert context.chapter_range == (0, float("inf"))
        assert context.get_chapter_filter() == ChapterFilter()

    def test_validation_errors(self):
        context = DownloadSeriesContext(
            source_url="",
            delay_ms=-1, max_retries=-1, output_dir="out",
            begin=None, end=None, language="", preferred_groups=(),
        )

        assert not context.is_valid()
        assert len(context.error_messages) == 3

    def test_equal_bounds_are_valid(self):
        context = DownloadSeriesContext(
            source_url="https://mangadex.org/title/642",
            delay_ms=None, max_retries=None, output_dir=None,
            begin=5.0, end=5.0, language=None, preferred_groups=(),
        )

        assert context.is_valid()
