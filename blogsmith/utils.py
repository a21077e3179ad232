"""Filesystem helpers for blogsmith.

Key functions:
    write_atomic: Persist text to a file in a single rename.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def write_atomic(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` so readers never see a partial file.

    The content goes to a temporary file in the target's directory, which is
    then renamed over the target. If anything fails the temporary file is
    removed and an existing target is left untouched.

    Args:
        path: Destination file.
        text: Complete file content.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
