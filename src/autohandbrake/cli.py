"""Command-line interface for AutoHandBrake."""

import sys
from pathlib import Path

import click
from pydantic import ValidationError

from autohandbrake import __version__
from autohandbrake.config import CONTAINER_FORMATS, RESOLUTION_TIERS, load_config
from autohandbrake.core.executor import MkvExtractRunner
from autohandbrake.core.inspector import MediaInfoAdapter
from autohandbrake.core.pipeline import EncodePipeline
from autohandbrake.core.scanner import FileScanner
from autohandbrake.core.subtitles import SubtitleExtractor
from autohandbrake.errors import ChapterLookupError, ConfigurationError, PreconditionError
from autohandbrake.metadata.chapterdb import ChapterDbClient
from autohandbrake.utils.logger import get_logger, setup_logging
from autohandbrake.utils.paths import OutputResolver
from autohandbrake.utils.tools import ToolLocator

EXIT_CONFIGURATION_ERROR = 2


def _parse_indices(ctx, param, value):
    """Parse "2,3" style track lists."""
    if not value:
        return None
    try:
        indices = sorted({int(part) for part in value.split(",") if part.strip()})
    except ValueError:
        raise click.BadParameter("expected comma-separated track numbers, e.g. 2,3")
    if any(index < 1 for index in indices):
        raise click.BadParameter("audio track numbers start at 1")
    return indices


def _collect_inputs(inputs: tuple[Path, ...], recursive: bool) -> list[Path]:
    """Expand inputs; read paths from stdin when none are given and stdin is piped.

    Missing paths are kept so each one is reported as a per-file error.
    """
    paths = list(inputs)
    if not paths and not sys.stdin.isatty():
        paths = [Path(line.strip()) for line in sys.stdin if line.strip()]
    if not paths:
        raise click.UsageError("No input files given")

    return FileScanner().expand(paths, recursive=recursive, keep_missing=True)


def _apply_overrides(ctx, overrides):
    try:
        return ctx.obj["config"].merged(overrides)
    except ValidationError as e:
        raise click.UsageError(f"Invalid option value: {e}")


def _resolve_tools(config, required: list[str]):
    try:
        return ToolLocator(config.tools).resolve(required)
    except ConfigurationError as e:
        click.secho(f"✗ {e}", fg="red", err=True)
        sys.exit(EXIT_CONFIGURATION_ERROR)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (defaults to built-in defaults)",
)
@click.pass_context
def cli(ctx, config):
    """AutoHandBrake - batch HandBrake encodes with automatic audio track planning."""
    try:
        cfg = load_config(config)
        ctx.ensure_object(dict)
        ctx.obj["config"] = cfg

        setup_logging(cfg.logging)

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("inputs", nargs=-1, type=click.Path(path_type=Path))
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Output file (single input only)")
@click.option("--output-dir", "-d", type=click.Path(file_okay=False, path_type=Path), help="Output directory")
@click.option("--format", "-f", "output_format", type=click.Choice(CONTAINER_FORMATS), help="Container format")
@click.option("--max-resolution", "-r", type=click.Choice(list(RESOLUTION_TIERS)), help="Maximum resolution tier")
@click.option("--encoder", "-e", help="Video encoder override (e.g. x264, nvenc_h265)")
@click.option("--quality", "-q", type=click.IntRange(1, 51), help="Constant quality override")
@click.option("--optimize/--no-optimize", default=None, help="Optimize for HTTP streaming")
@click.option("--stereo/--no-stereo", default=None, help="Add a stereo downmix of the default track")
@click.option("--ac3/--no-ac3", "always_ac3", default=None, help="Always add AC3 for the default track")
@click.option("--hd-ac3/--no-hd-ac3", "ac3_for_hd", default=None, help="Add AC3 for DTS-HD MA tracks")
@click.option("--ignore-tracks", "-x", callback=_parse_indices, help="Audio tracks to skip, e.g. 2,3")
@click.option("--chapters/--no-chapters", default=None, help="Look up chapter names online")
@click.option("--chapter-language", help="Preferred chapter name language")
@click.option("--title", help="Title used for the chapter lookup")
@click.option("--recursive/--no-recursive", default=True, help="Scan directories recursively")
@click.option("--force", is_flag=True, default=None, help="Overwrite existing output files")
@click.option("--dry-run", "-n", is_flag=True, default=None, help="Print commands without encoding")
@click.pass_context
def encode(
    ctx,
    inputs,
    output,
    output_dir,
    output_format,
    max_resolution,
    encoder,
    quality,
    optimize,
    stereo,
    always_ac3,
    ac3_for_hd,
    ignore_tracks,
    chapters,
    chapter_language,
    title,
    recursive,
    force,
    dry_run,
):
    """Encode one or more video files with HandBrakeCLI.

    INPUTS may be files or directories; when omitted, paths are read from
    standard input, one per line.
    """
    config = _apply_overrides(
        ctx,
        {
            "audio": {"stereo_downmix": stereo, "always_ac3": always_ac3, "ac3_for_hd": ac3_for_hd, "ignore_tracks": ignore_tracks},
            "video": {"encoder": encoder, "quality": quality, "max_resolution": max_resolution},
            "output": {"format": output_format, "optimize_streaming": optimize},
            "chapters": {"enabled": chapters, "language": chapter_language},
            "execution": {"force": force, "dry_run": dry_run},
        }
    )
    logger = get_logger(__name__)

    files = _collect_inputs(inputs, recursive)
    if output and len(files) > 1:
        raise click.UsageError("--output accepts a single input; use --output-dir for batches")

    tools = _resolve_tools(config, ["mediainfo", "handbrake"])

    try:
        resolver = OutputResolver(
            output_file=output,
            output_dir=output_dir,
            format=config.output.format,
            force=config.execution.force,
        )
    except PreconditionError as e:
        raise click.UsageError(str(e))

    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)

    chapter_client = None
    if config.chapters.enabled:
        chapter_client = ChapterDbClient(
            config.chapters.base_url,
            api_key=config.chapters.api_key,
            timeout=config.chapters.timeout,
        )

    pipeline = EncodePipeline(config, tools, chapter_client=chapter_client)
    results = {"success": 0, "dry_run": 0, "skipped": 0, "failed": 0, "error": 0}

    try:
        for idx, file in enumerate(files, 1):
            click.echo(f"[{idx}/{len(files)}] {file.name}")
            result = pipeline.process(file, resolver, title=title)
            results[result.status] += 1

            if result.status == "success":
                click.secho(f"  ✓ {result}", fg="green")
            elif result.status == "dry_run":
                click.secho(f"  ⊙ {result}", fg="cyan")
            elif result.status == "skipped":
                click.secho(f"  ⊘ {result}", fg="yellow")
            else:
                click.secho(f"  ✗ {result}", fg="red")
    finally:
        if chapter_client:
            chapter_client.close()

    logger.debug("Batch finished", **results)

    click.echo("=" * 60)
    click.echo("Summary:")
    click.secho(f"  ✓ Success:  {results['success']}", fg="green")
    click.secho(f"  ⊙ Dry run:  {results['dry_run']}", fg="cyan")
    click.secho(f"  ⊘ Skipped:  {results['skipped']}", fg="yellow")
    click.secho(f"  ✗ Failed:   {results['failed']}", fg="red")
    click.secho(f"  ✗ Errors:   {results['error']}", fg="red")
    click.echo(f"  Total:      {len(files)}")

    if results["failed"] > 0 or results["error"] > 0:
        sys.exit(1)


@cli.command("extract-subtitles")
@click.argument("inputs", nargs=-1, type=click.Path(path_type=Path))
@click.option("--all", "extract_all", is_flag=True, default=None, help="Extract every subtitle track")
@click.option("--output-dir", "-d", type=click.Path(file_okay=False, path_type=Path), help="Output directory")
@click.option("--recursive/--no-recursive", default=True, help="Scan directories recursively")
@click.option("--force", is_flag=True, default=None, help="Overwrite existing subtitle files")
@click.option("--dry-run", "-n", is_flag=True, default=None, help="Report without extracting")
@click.pass_context
def extract_subtitles(ctx, inputs, extract_all, output_dir, recursive, force, dry_run):
    """Extract default and forced subtitle tracks with mkvextract."""
    config = _apply_overrides(
        ctx,
        {
            "subtitles": {"extract_all": extract_all, "output_dir": str(output_dir) if output_dir else None},
            "execution": {"force": force, "dry_run": dry_run},
        }
    )
    logger = get_logger(__name__)

    files = _collect_inputs(inputs, recursive)
    tools = _resolve_tools(config, ["mediainfo", "mkvextract"])

    inspector = MediaInfoAdapter(
        tools.mediainfo,
        output=config.tools.mediainfo_output,
        timeout=config.tools.inspect_timeout,
    )
    extractor = SubtitleExtractor(
        MkvExtractRunner(tools.mkvextract),
        extract_all=config.subtitles.extract_all,
        force=config.execution.force,
        dry_run=config.execution.dry_run,
    )
    target_dir = Path(config.subtitles.output_dir) if config.subtitles.output_dir else None
    if target_dir:
        target_dir.mkdir(parents=True, exist_ok=True)

    failures = 0
    for idx, file in enumerate(files, 1):
        click.echo(f"[{idx}/{len(files)}] {file.name}")
        if not file.is_file():
            logger.error("File not found", file=str(file))
            click.secho(f"  ✗ {file.name}: Error (File not found)", fg="red")
            failures += 1
            continue
        try:
            report = inspector.inspect(file)
            results = extractor.extract(file, report, target_dir)
        except Exception as e:
            logger.error("Subtitle extraction failed", file=str(file), error=str(e))
            click.secho(f"  ✗ {file.name}: Failed ({e})", fg="red")
            failures += 1
            continue

        if not results:
            click.secho("  ⊘ No matching subtitle tracks", fg="yellow")
        for result in results:
            colour = {"extracted": "green", "dry_run": "cyan", "skipped": "yellow"}[result.status]
            click.secho(f"  {result}", fg=colour)

    if failures:
        sys.exit(1)


@cli.command()
@click.argument("title")
@click.argument("count", type=click.IntRange(min=1))
@click.option("--all", "show_all", is_flag=True, help="Show every matching result")
@click.option("--language", help="Preferred chapter name language")
@click.pass_context
def chapters(ctx, title, count, show_all, language):
    """Look up chapter names for TITLE with exactly COUNT chapters."""
    config = ctx.obj["config"]

    with ChapterDbClient(
        config.chapters.base_url,
        api_key=config.chapters.api_key,
        timeout=config.chapters.timeout,
    ) as client:
        try:
            results = client.lookup(
                title,
                count,
                best_result=not show_all,
                language=language or config.chapters.language,
            )
        except ChapterLookupError as e:
            click.secho(f"✗ {e}", fg="red", err=True)
            sys.exit(1)

    if not results:
        click.secho("⊘ No matching chapter sets", fg="yellow")
        return

    for result in results:
        click.secho(str(result), fg="green")
        for chapter in result.chapters:
            click.echo(f"  {chapter.index:>3}  {chapter.timestamp}  {chapter.title}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def inspect(ctx, file):
    """Show the tracks mediainfo reports for FILE."""
    config = ctx.obj["config"]
    tools = _resolve_tools(config, ["mediainfo"])

    report = MediaInfoAdapter(
        tools.mediainfo,
        output=config.tools.mediainfo_output,
        timeout=config.tools.inspect_timeout,
    ).inspect(file)

    for track in report.tracks:
        click.echo(str(track))
    if report.chapter_count:
        click.echo(f"Chapters: {report.chapter_count}")


@cli.command()
@click.pass_context
def version(ctx):
    """Show version information."""
    click.echo(f"AutoHandBrake v{__version__}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
