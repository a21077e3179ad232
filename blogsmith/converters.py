"""Markdown converters for blogsmith.

This module contains implementations of the MarkdownConverter protocol.
Each converter handles a single way of producing HTML from Markdown.

Key classes:
- PandocConverter: Runs the pandoc executable as an asyncio subprocess.
- MistuneConverter: Converts in-process with mistune.
- ConverterRegistry: Maps configuration names to converter factories.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

import mistune

from .config import SiteConfig
from .errors import BlogError, ConversionError
from .executable_utils import find_executable
from .metadata import extract_frontmatter

logger = logging.getLogger(__name__)

PANDOC_BASE_ARGS = ("--wrap=none", "--no-highlight", "-t", "html5")
PANDOC_READER = "gfm-hard_line_breaks"
PANDOC_FRONTMATTER_EXT = "+yaml_metadata_block"


async def run_process(argv: list[str], stdin: str | None = None) -> str:
    """Run a command, feed it ``stdin`` and return its decoded stdout.

    Args:
        argv: Command and arguments.
        stdin: Optional text written to the process.

    Returns:
        Standard output decoded as UTF-8.

    Raises:
        ConversionError: The command could not start or exited non-zero.
    """
    logger.debug("running %s", " ".join(argv))
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE if stdin is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise ConversionError(argv, 127, str(exc)) from exc
    out, err = await proc.communicate(
        stdin.encode("utf-8") if stdin is not None else None
    )
    stderr = err.decode("utf-8", errors="replace") if err else ""
    if proc.returncode != 0:
        raise ConversionError(argv, proc.returncode, stderr)
    return out.decode("utf-8")


class PandocConverter:
    """Converts Markdown with pandoc.

    Attributes:
        filters: Extra ``--filter`` programs passed to pandoc.
    """

    def __init__(self, filters: tuple[str, ...] = (), executable: str | None = None):
        self.filters = tuple(filters)
        self._executable = executable

    @property
    def name(self) -> str:
        return "pandoc"

    def command(self, frontmatter: bool = True) -> list[str]:
        """Build the pandoc argv for one conversion."""
        executable = self._executable or find_executable("pandoc")
        if executable is None:
            raise ConversionError(["pandoc"], 127, "pandoc not found on PATH")
        argv = [executable, *PANDOC_BASE_ARGS]
        if frontmatter:
            for program in self.filters:
                argv.extend(["--filter", program])
        reader = PANDOC_READER + (PANDOC_FRONTMATTER_EXT if frontmatter else "")
        argv.extend(["-f", reader])
        return argv

    async def convert(self, markdown: str, frontmatter: bool = True) -> str:
        return await run_process(self.command(frontmatter), markdown)


class MistuneConverter:
    """Converts Markdown in-process with mistune.

    Raw HTML in the source is passed through, as pandoc does.
    """

    PLUGINS = ["strikethrough", "footnotes", "table", "url"]

    def __init__(self):
        self._markdown = mistune.create_markdown(escape=False, plugins=self.PLUGINS)

    @property
    def name(self) -> str:
        return "mistune"

    async def convert(self, markdown: str, frontmatter: bool = True) -> str:
        if frontmatter:
            _, markdown = extract_frontmatter(markdown, Path("<stdin>"))
        return self._markdown(markdown)


class ConverterRegistry:
    """Registry of converter factories keyed by configuration name."""

    def __init__(self):
        self._factories: dict[str, Callable[[SiteConfig], object]] = {}
        self.register("pandoc", lambda config: PandocConverter(config.pandoc_filters))
        self.register("mistune", lambda config: MistuneConverter())

    def register(self, name: str, factory: Callable[[SiteConfig], object]) -> None:
        self._factories[name] = factory

    def create(self, config: SiteConfig):
        """Instantiate the converter selected by ``config.converter``."""
        factory = self._factories.get(config.converter)
        if factory is None:
            known = ", ".join(sorted(self._factories))
            raise BlogError(
                f"unknown converter {config.converter!r} (expected one of: {known})"
            )
        return factory(config)


# Default converter registry instance
default_converter_registry = ConverterRegistry()
