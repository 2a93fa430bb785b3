"""Command-line interface using Click."""

import sys
from pathlib import Path

import click

from . import __version__
from .config import (
    DEFAULT_STEMS,
    POLL_INTERVAL,
    TASK_TIMEOUT,
    get_api_key,
    supported_formats_label,
)
from .core.audioshake import StemSeparationClient
from .core.converter import AudioConverter
from .core.pipeline import StemPipeline, format_stem_report
from .core.progress import ConsoleProgress
from .core.uploader import TemporaryUploader
from .exceptions import DollyError
from .utils.logging import setup_logging
from .utils.retry import RetryPolicy
from .utils.validation import validate_input_file


def build_pipeline(
    api_key: str,
    poll_interval: float = POLL_INTERVAL,
    timeout: float = TASK_TIMEOUT,
    retries: int = 0,
    show_progress: bool = True,
) -> StemPipeline:
    """Wire the pipeline components together with console progress."""
    progress = ConsoleProgress(enabled=show_progress)
    return StemPipeline(
        converter=AudioConverter(on_progress=progress.percent),
        uploader=TemporaryUploader(),
        separator=StemSeparationClient(
            api_key,
            poll_interval=poll_interval,
            timeout=timeout,
            on_status=progress.status,
        ),
        retry_policy=RetryPolicy(max_retries=retries),
        progress=progress,
    )


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=f"Supported audio formats: {supported_formats_label()}",
)
@click.version_option(version=__version__)
@click.argument('file_arg', metavar='[FILE]', required=False)
@click.option('-f', '--file', 'file_opt', metavar='PATH',
              help='Path to audio file (alternative to FILE)')
@click.option('-s', '--song', metavar='NAME',
              help='Song to search for (not implemented yet)')
@click.option('--stem', 'stems', multiple=True,
              help=f"Stem to extract, repeatable (default: {', '.join(DEFAULT_STEMS)})")
@click.option('--poll-interval', type=click.FloatRange(min=0, min_open=True),
              default=POLL_INTERVAL, show_default=True,
              help='Seconds between task status checks')
@click.option('--timeout', type=click.FloatRange(min=0, min_open=True),
              default=TASK_TIMEOUT, show_default=True,
              help='Seconds to wait for separation, measured from submission')
@click.option('--retries', type=click.IntRange(min=0), default=0, show_default=True,
              help='Extra attempts for conversion and upload')
@click.option('--no-progress', is_flag=True, help='Disable progress output')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, file_arg, file_opt, song, stems, poll_interval, timeout, retries,
        no_progress, verbose, log_file):
    """Dolly - separate a song into stems for Guitar/Clone Hero charting."""
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose,
    )

    file_path = file_opt or file_arg
    if not file_path and not song:
        click.echo(ctx.get_help())
        ctx.exit(0)

    if not file_path:
        logger.error(f"❌ Song search is not implemented yet: {song!r}. Pass an audio file instead.")
        sys.exit(1)

    try:
        input_path = validate_input_file(file_path)
        api_key = get_api_key()

        pipeline = build_pipeline(
            api_key,
            poll_interval=poll_interval,
            timeout=timeout,
            retries=retries,
            show_progress=not no_progress,
        )
        result = pipeline.run(input_path, stems=stems or DEFAULT_STEMS)
    except DollyError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"❌ Unexpected error: {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    click.echo()
    click.echo(format_stem_report(result.stems))