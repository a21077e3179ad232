"""Executable discovery utilities for blogsmith.

This module locates the external programs the build shells out to
(pandoc for conversion, ImageMagick's identify for image sizes).

Functions:
    find_executable: Locate an executable via environment override or PATH.
"""

from __future__ import annotations

import os
import shutil


def _env_var(name: str) -> str:
    return "BLOGSMITH_" + name.upper().replace("-", "_")


def find_executable(name: str) -> str | None:
    """Find an executable, honouring a ``BLOGSMITH_<NAME>`` override.

    Args:
        name: Name of the executable to find (e.g., 'pandoc', 'identify').

    Returns:
        Full path to the executable if found, None otherwise.

    Examples:
        >>> find_executable('pandoc')  # System PATH lookup
        '/usr/bin/pandoc'

        >>> os.environ['BLOGSMITH_PANDOC'] = '/opt/pandoc/bin/pandoc'
        >>> find_executable('pandoc')
        '/opt/pandoc/bin/pandoc'
    """
    override = os.environ.get(_env_var(name))
    if override:
        return override if os.path.exists(override) else shutil.which(override)
    return shutil.which(name)
