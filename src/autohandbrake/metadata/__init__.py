"""Metadata lookup components for AutoHandBrake.

This package contains the chapter name service client.
"""

from autohandbrake.metadata.chapterdb import ChapterDbClient

__all__ = ["ChapterDbClient"]
