"""Chapter name lookup models."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Chapter:
    """A single named chapter."""

    index: int  # 1-based
    timestamp: str
    title: str


@dataclass(frozen=True)
class ChapterResult:
    """A chapter set returned by the chapter name service."""

    ref: str
    title: str
    confirmations: int
    chapters: tuple[Chapter, ...]
    language: Optional[str] = None

    def __len__(self) -> int:
        return len(self.chapters)

    def __str__(self) -> str:
        lang_part = f" [{self.language}]" if self.language else ""
        return f"{self.title}{lang_part}: {len(self.chapters)} chapters, {self.confirmations} confirmations"
