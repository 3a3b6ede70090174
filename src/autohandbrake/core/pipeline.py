"""Encoding pipeline orchestrator."""

import subprocess
from pathlib import Path
from typing import Optional

from autohandbrake.config import Config
from autohandbrake.core.audio import AudioPlanBuilder
from autohandbrake.core.chapters import chapter_markers
from autohandbrake.core.executor import HandBrakeRunner
from autohandbrake.core.inspector import MediaInfoAdapter
from autohandbrake.core.renderer import CommandRenderer
from autohandbrake.core.video import VideoPlanBuilder
from autohandbrake.errors import MetadataError, PreconditionError, RenderError
from autohandbrake.metadata.chapterdb import ChapterDbClient
from autohandbrake.models.file import ProcessResult
from autohandbrake.models.plan import StaticOptions
from autohandbrake.utils.logger import get_logger
from autohandbrake.utils.paths import OutputResolver
from autohandbrake.utils.tools import ToolPaths

logger = get_logger(__name__)


class EncodePipeline:
    """Orchestrates inspection, planning and encoding of one file at a time."""

    def __init__(
        self,
        config: Config,
        tools: ToolPaths,
        chapter_client: Optional[ChapterDbClient] = None,
        inspector: Optional[MediaInfoAdapter] = None,
        runner: Optional[HandBrakeRunner] = None,
    ):
        """Initialize the pipeline.

        Args:
            config: Application configuration
            tools: Resolved tool paths
            chapter_client: Chapter service client (None disables lookups)
            inspector: mediainfo adapter (built from config when omitted)
            runner: HandBrakeCLI runner (built from config when omitted)
        """
        self.config = config
        self.inspector = inspector or MediaInfoAdapter(
            tools.mediainfo,
            output=config.tools.mediainfo_output,
            timeout=config.tools.inspect_timeout,
        )
        self.audio_builder = AudioPlanBuilder(config.audio)
        self.video_builder = VideoPlanBuilder(config.video)
        self.renderer = CommandRenderer(tools.handbrake)
        self.runner = runner or HandBrakeRunner(config.execution.timeout_seconds)
        self.chapter_client = chapter_client

    def static_options(self, output_format: str) -> StaticOptions:
        output = self.config.output
        return StaticOptions(
            format=output_format,
            loose_anamorphic=output.loose_anamorphic,
            peak_framerate=output.peak_framerate,
            decomb=output.decomb,
            optimize_streaming=output.optimize_streaming,
        )

    def process(
        self,
        file_path: Path,
        resolver: OutputResolver,
        title: Optional[str] = None,
    ) -> ProcessResult:
        """Process a single file through the complete pipeline.

        Pipeline steps:
        1. Validation (file exists, output path allowed)
        2. Inspection (mediainfo)
        3. Audio and video planning
        4. Chapter name lookup (optional)
        5. Rendering and execution (skipped in dry run)

        Args:
            file_path: Path to the source file
            resolver: Output path resolver
            title: Chapter lookup title (defaults to the movie name or file stem)

        Returns:
            ProcessResult with status and details
        """
        logger.info("Processing file", file=str(file_path))

        if not file_path.exists():
            logger.error("File not found", file=str(file_path))
            return ProcessResult(status="error", file_path=file_path, error="File not found")

        if not file_path.is_file():
            logger.error("Not a regular file", file=str(file_path))
            return ProcessResult(status="error", file_path=file_path, error="Not a regular file")

        try:
            output_path, output_format = resolver.resolve(file_path)
        except PreconditionError as e:
            logger.warning("Precondition failed", file=str(file_path), reason=str(e))
            return ProcessResult(status="skipped", file_path=file_path, reason=str(e))

        try:
            report = self.inspector.inspect(file_path)
            audio = self.audio_builder.build(report.audio)
            video = self.video_builder.build(report.video)

            if title is None:
                general = report.general
                title = (general.title if general else None) or file_path.stem

            chapters = self.config.chapters
            client = self.chapter_client if chapters.enabled else None
            if client is not None and self.config.execution.dry_run:
                # markers file would not outlive this call
                logger.info("DRY RUN: Skipping chapter lookup", file=str(file_path), title=title)
                client = None

            with chapter_markers(
                report.chapter_count,
                title,
                client=client,
                best_result=chapters.best_result,
                language=chapters.language,
            ) as chapter_option:
                command = self.renderer.render(
                    self.static_options(output_format),
                    audio,
                    video,
                    chapter_option,
                    file_path,
                    output_path,
                )

                if self.config.execution.dry_run:
                    logger.info("DRY RUN: Would run HandBrakeCLI", file=str(file_path), command=str(command))
                    return ProcessResult(
                        status="dry_run",
                        file_path=file_path,
                        output_path=output_path,
                        command=command,
                    )

                duration = self.runner.run(command)

            return ProcessResult(
                status="success",
                file_path=file_path,
                output_path=output_path,
                command=command,
                duration_seconds=duration,
            )

        except (MetadataError, RenderError) as e:
            logger.error("Cannot plan encode", file=str(file_path), error=str(e))
            return ProcessResult(status="error", file_path=file_path, error=str(e))

        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            return ProcessResult(
                status="failed",
                file_path=file_path,
                output_path=output_path,
                reason="tool_failed",
                error=str(e),
            )

        except Exception as e:
            logger.exception("Pipeline error", file=str(file_path), error=str(e))
            return ProcessResult(status="error", file_path=file_path, error=str(e))
