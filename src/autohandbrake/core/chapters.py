"""Chapter marker preparation for HandBrakeCLI."""

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from autohandbrake.core.renderer import markers_option
from autohandbrake.errors import ChapterLookupError
from autohandbrake.metadata.chapterdb import ChapterDbClient
from autohandbrake.models.chapter import ChapterResult
from autohandbrake.utils.logger import get_logger

logger = get_logger(__name__)


def write_markers(result: ChapterResult, path: Path) -> None:
    """Write a HandBrake chapter CSV ("<n>,<name>" per line, commas escaped)."""
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        for chapter in result.chapters:
            name = chapter.title.replace(",", "\\,")
            f.write(f"{chapter.index},{name}\n")


@contextmanager
def chapter_markers(
    chapter_count: int,
    title: Optional[str],
    client: Optional[ChapterDbClient] = None,
    best_result: bool = True,
    language: Optional[str] = None,
) -> Iterator[Optional[str]]:
    """Yield the chapter option for one encode.

    Yields None when the source has no chapters, the named markers option
    when the lookup found a match, and the generic markers option otherwise.
    The temporary markers file is removed on exit, including on errors.

    Args:
        chapter_count: Number of chapters in the source
        title: Title to look up
        client: Chapter service client, or None when lookup is disabled
        best_result: Use the most confirmed result only
        language: Preferred chapter name language
    """
    if chapter_count == 0:
        yield None
        return

    if client is None or not title:
        yield markers_option()
        return

    try:
        results = client.lookup(title, chapter_count, best_result=best_result, language=language)
    except ChapterLookupError as e:
        logger.warning("Chapter lookup failed, using generic markers", title=title, error=str(e))
        yield markers_option()
        return

    if not results:
        logger.info("No matching chapter names", title=title, chapter_count=chapter_count)
        yield markers_option()
        return

    fd, name = tempfile.mkstemp(prefix="autohandbrake-", suffix=".csv")
    os.close(fd)
    path = Path(name)
    try:
        write_markers(results[0], path)
        logger.debug("Wrote chapter markers", path=str(path), result=str(results[0]))
        yield markers_option(path)
    finally:
        path.unlink(missing_ok=True)
