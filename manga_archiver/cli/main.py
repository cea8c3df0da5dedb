import logging

import click
from typing import Optional, Tuple
from manga_archiver.cli.handlers import download_series_handler, sites_handler
from manga_archiver.utils.logger import set_console_level


class GroupName(click.ParamType):
    """A scanlation group name; the environment variable lists them comma-separated."""
    name = "group"
    envvar_list_splitter = ","

    def convert(self, value, param, ctx):
        value = value.strip()
        if not value:
            self.fail("group name cannot be empty.", param, ctx)
        return value


GROUP_NAME = GroupName()


@click.group()
@click.option('-q', '--quiet', is_flag=True, help='Only print warnings and errors from the log on the console.')
def archiver(quiet: bool):
    """Man{ga,hua,hwa} downloader: entire series or a subset of chapters."""
    if quiet:
        set_console_level(logging.WARNING)


@archiver.command()
@click.argument('url', envvar='MANGA_ARCHIVER_URL')
@click.option('-d', '--delay', 'delay_ms', default=None, type=int, envvar='MANGA_ARCHIVER_DELAY', help='Delay between each request, in ms (default 1000, at least 10).')
@click.option('-r', '--retry', 'max_retries', default=None, type=int, envvar='MANGA_ARCHIVER_RETRY', help='Max number of retries for HTTP requests (default 3).')
@click.option('-o', '--output', 'output_dir', default=None, type=click.Path(file_okay=False), envvar='MANGA_ARCHIVER_OUTPUT', help='Output directory (default: current directory).')
@click.option('-b', '--begin', default=None, type=float, envvar='MANGA_ARCHIVER_BEGIN', help='Start downloading from this chapter.')
@click.option('-e', '--end', default=None, type=float, envvar='MANGA_ARCHIVER_END', help='Stop downloading after this chapter.')
@click.option('-l', '--language', default=None, envvar='MANGA_ARCHIVER_LANGUAGE', help='Language of the chapters, for sites listing several (e.g. "gb").')
@click.option('-g', '--group', 'groups', multiple=True, type=GROUP_NAME, envvar='MANGA_ARCHIVER_GROUPS', help='Preferred scanlation group, repeat to rank several (most preferred first). MANGA_ARCHIVER_GROUPS takes a comma-separated list.')
def download(
    url: str,
    delay_ms: Optional[int],
    max_retries: Optional[int],
    output_dir: Optional[str],
    begin: Optional[float],
    end: Optional[float],
    language: Optional[str],
    groups: Tuple[str, ...]
):
    """Downloads the chapters of the series at URL."""
    download_series_handler(
        source_url=url,
        delay_ms=delay_ms,
        max_retries=max_retries,
        output_dir=output_dir,
        begin=begin,
        end=end,
        language=language,
        preferred_groups=groups,
    )


@archiver.command(name='sites')
def sites():
    """Lists the supported sites."""
    sites_handler()


if __name__ == '__main__':
    archiver()
