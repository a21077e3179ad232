"""HTML and URL helpers for blogsmith.

This module provides escaping plus the mapping from source-relative file
paths to site paths and canonical URLs.

Functions:
    escape_html: Escape special HTML characters in a string.
    join_root_url: Join a base URL with a path.
    filepath_to_abspath: Site-absolute path for a project-relative file.
    filepath_to_url: Canonical URL for a project-relative file.
    path_to_top: Relative prefix from a page back to the site root.
"""

from __future__ import annotations

import posixpath
import re

_INDEX_HTML_RE = re.compile(r"index\.html$")


def escape_html(text: str) -> str:
    """Escape special HTML characters in a string.

    Args:
        text: The string to escape.

    Returns:
        The escaped string, safe for inclusion in HTML and XML text or
        double-quoted attributes.

    Examples:
        >>> escape_html('Tom & "Jerry"')
        'Tom &amp; &quot;Jerry&quot;'
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Examples:
        >>> join_root_url('https://example.com', '/about')
        'https://example.com/about'

        >>> join_root_url('https://example.com/', 'about')
        'https://example.com/about'
    """
    if not root_url:
        return path
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"


def filepath_to_abspath(filepath: str, prepath: str = "") -> str:
    """Return the site-absolute path of a project-relative file.

    A trailing ``index.html`` is dropped so index pages resolve to their
    directory.

    Examples:
        >>> filepath_to_abspath("post/hello/index.html")
        '/post/hello/'

        >>> filepath_to_abspath("atom.xml", "~me")
        '/~me/atom.xml'
    """
    joined = posixpath.normpath(posixpath.join("/", prepath, filepath))
    if filepath.endswith("/") and not joined.endswith("/"):
        joined += "/"
    return _INDEX_HTML_RE.sub("", joined)


def filepath_to_url(site_url: str, filepath: str, prepath: str = "") -> str:
    """Return the canonical URL for a project-relative file."""
    return site_url.rstrip("/") + filepath_to_abspath(filepath, prepath)


def path_to_top(filepath: str) -> str:
    """Return the ``../`` prefix leading from a page back to the root.

    Examples:
        >>> path_to_top("post/hello/index.md")
        '../../'
    """
    return "../" * filepath.count("/")
