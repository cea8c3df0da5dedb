import math
from typing import Optional, Tuple

from manga_archiver.core.config_manager import ConfigManager
from manga_archiver.core.models import ChapterFilter, RetrievalOptions
from manga_archiver.utils.logger import get_logger

logger = get_logger(__name__)


class DownloadSeriesContext:
    """
    Handles validation, configuration management, and argument preparation
    for the download command.

    Values given on the command line (or through environment variables)
    win over settings.ini, which wins over the built-in defaults.
    """
    def __init__(
        self,
        source_url: str,
        delay_ms: Optional[int],
        max_retries: Optional[int],
        output_dir: Optional[str],
        begin: Optional[float],
        end: Optional[float],
        language: Optional[str],
        preferred_groups: Tuple[str, ...],
        config_manager: Optional[ConfigManager] = None,
    ):
        self.source_url = source_url
        self.begin = begin
        self.end = end
        self.error_messages: list[str] = []

        self._config_manager = config_manager
        cm = self.config_manager

        self.delay_ms: int = delay_ms if delay_ms is not None else cm.get_delay_ms()
        self.max_retries: int = max_retries if max_retries is not None else cm.get_max_retries()
        self.output_dir: str = output_dir or cm.get_output_dir()
        self.timeout: float = cm.get_timeout()
        self.language: str = language if language is not None else cm.get_language()
        self.preferred_groups: Tuple[str, ...] = tuple(preferred_groups) or cm.get_preferred_groups()

    @property
    def config_manager(self) -> ConfigManager:
        if self._config_manager is None:
            self._config_manager = ConfigManager()
        return self._config_manager

    def is_valid(self) -> bool:
        if not self.source_url:
            self.error_messages.append("Error: Series URL is required.")
        if self.max_retries < 0:
            self.error_messages.append(f"Error: Retry count must be non-negative, got {self.max_retries}.")
        if self.delay_ms < 0:
            self.error_messages.append(f"Error: Delay must be non-negative, got {self.delay_ms}.")
        lower, upper = self.chapter_range
        if lower > upper:
            self.error_messages.append(f"Error: `begin` ({lower:g}) must be lower than `end` ({upper:g}).")
        return not self.error_messages

    @property
    def chapter_range(self) -> Tuple[float, float]:
        lower = self.begin if self.begin is not None else 0
        upper = self.end if self.end is not None else math.inf
        return lower, upper

    def get_retrieval_options(self) -> RetrievalOptions:
        return RetrievalOptions.from_milliseconds(
            self.delay_ms, self.max_retries, self.output_dir, timeout=self.timeout
        )

    def get_chapter_filter(self) -> ChapterFilter:
        return ChapterFilter(
            chapter_range=self.chapter_range,
            language=self.language,
            preferred_groups=self.preferred_groups,
        )
