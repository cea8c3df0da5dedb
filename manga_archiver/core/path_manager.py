import os
import re
from decimal import Decimal
from posixpath import splitext
from urllib.parse import urlparse

from .models import Chapter, Page, Series

# Windows is far more restrictive than POSIX, stick to the common subset.
ILLEGAL_CHARS_RE = re.compile(r'[/\\?<>:*|"]')
ILLEGAL_TRAILING_RE = re.compile(r'[. ]+$')
DEFAULT_EXTENSION = "jpg"


def sanitize_name(name: str) -> str:
    """
    Cleans a name so it can safely be used as a file or directory name.

    Trailing dots and spaces are stripped, then characters that are illegal
    on common filesystems are replaced with an underscore.
    """
    name = ILLEGAL_TRAILING_RE.sub("", name)
    return ILLEGAL_CHARS_RE.sub("_", name)


def format_chapter_id(chapter_id: float) -> str:
    """
    Zero-pads a chapter number to three digits, keeping any fractional part.

    Examples: 3 -> "003", 3.5 -> "003.5", 300.5 -> "300.5".
    """
    chapter_id = float(chapter_id)
    if chapter_id.is_integer():
        return f"{int(chapter_id):03d}"
    # Shortest representation that round-trips, so 123.3 stays "123.3".
    text = repr(chapter_id)
    if "e" in text:
        text = format(Decimal(text), "f")
    integer_part, fraction = text.split(".", 1)
    return f"{integer_part.zfill(3)}.{fraction}"


def extension_from_url(url: str) -> str:
    """Returns the file extension of the URL's path, `jpg` when there is none."""
    _, ext = splitext(urlparse(url).path)
    return ext[1:] if len(ext) > 1 else DEFAULT_EXTENSION


def series_dirname(series: Series) -> str:
    return sanitize_name(series.title)


def chapter_dirname(chapter: Chapter) -> str:
    # Chapters with a known volume share the volume's directory.
    if chapter.volume is not None:
        dirname = f"{chapter.series.title} {chapter.volume.zfill(2)}"
    else:
        dirname = f"{chapter.series.title} {format_chapter_id(chapter.id)}"
    return sanitize_name(dirname)


def page_filename(page: Page, index: int) -> str:
    extension = extension_from_url(page.main_url)
    # Inside a volume directory, prefix with the chapter number to avoid collisions.
    if page.chapter.volume is not None:
        return f"{format_chapter_id(page.chapter.id)}-{index:03d}.{extension}"
    return f"{index:03d}.{extension}"


class PathManager:
    """
    Manages the construction of file and directory paths under the output directory.

    Layout: <output_dir>/<series>/<chapter or volume>/<page file>
    """

    def __init__(self, output_dir: str):
        """
        Args:
            output_dir: The absolute or relative path to the output directory.
        """
        if not output_dir:
            raise ValueError("output_dir cannot be empty.")
        self._output_dir = output_dir

    @property
    def output_dir(self) -> str:
        return self._output_dir

    def get_series_dir(self, series: Series) -> str:
        """Returns the path to the directory holding every chapter of the series."""
        return os.path.join(self._output_dir, series_dirname(series))

    def get_chapter_dir(self, chapter: Chapter) -> str:
        """Returns the path to the chapter's (or its volume's) directory."""
        return os.path.join(self.get_series_dir(chapter.series), chapter_dirname(chapter))

    def get_page_filepath(self, page: Page, index: int) -> str:
        """Returns the full path of a page image, `index` being 1-based."""
        if index < 1:
            raise ValueError(f"Page index must be at least 1, got {index}.")
        return os.path.join(self.get_chapter_dir(page.chapter), page_filename(page, index))
