"""Protocol definitions for blogsmith.

These interfaces let the page renderer work against any converter or image
inspector, which keeps the external tools swappable and easy to fake in tests.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class MarkdownConverter(Protocol):
    """Protocol for turning Markdown into an HTML fragment."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the converter identifier used in blog.yaml (e.g. 'pandoc')."""
        ...

    @abstractmethod
    async def convert(self, markdown: str, frontmatter: bool = True) -> str:
        """Convert Markdown source to HTML.

        Args:
            markdown: Markdown source.
            frontmatter: Whether the input may carry a YAML metadata block
                that should be stripped.

        Returns:
            HTML fragment.

        Raises:
            ConversionError: If the conversion fails.
        """
        ...


@runtime_checkable
class ImageInspector(Protocol):
    """Protocol for reading pixel dimensions of an image file."""

    @abstractmethod
    async def size(self, image_path: Path) -> tuple[int, int]:
        """Return ``(width, height)`` in pixels.

        Raises:
            ImageInspectionError: If the size cannot be determined.
        """
        ...
