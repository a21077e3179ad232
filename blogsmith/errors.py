"""Exception types for blogsmith.

Metadata errors abort the whole build. Conversion, inspection and other
per-page errors abort only the page being rendered and are collected into
the build report.
"""

from __future__ import annotations

from pathlib import Path


class BlogError(Exception):
    """Base class for all blogsmith errors."""


class MetadataError(BlogError):
    """Front-matter or source file could not be turned into metadata.

    Attributes:
        source_path: Path to the markdown file.
        message: Human-readable error message.
        original_error: The original exception, if any.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


class ConversionError(BlogError):
    """An external converter exited with a non-zero status.

    Attributes:
        command: The argv that was run.
        returncode: Process exit status.
        stderr: Captured standard error, decoded.
    """

    def __init__(self, command: list[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no output"
        super().__init__(
            f"{command[0]} exited with status {returncode}: {detail}"
        )


class ImageInspectionError(BlogError):
    """Pixel dimensions of an image could not be determined."""

    def __init__(self, image_path: Path, message: str):
        self.image_path = image_path
        self.message = message
        super().__init__(f"{image_path}: {message}")


class BuildError(BlogError):
    """Error while rendering one page, with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")
