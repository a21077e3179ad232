"""Site configuration for blogsmith.

Configuration lives in an optional ``blog.yaml`` at the project root and is
overlaid onto DEFAULT_CONFIG. The merged mapping is frozen into a SiteConfig
that the rest of the build receives explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from .errors import BlogError

CONFIG_FILENAME = "blog.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "url": "https://example.github.io",
    "prepath": "",
    "title": "My Blog",
    "description": "A blog",
    "author": "Anonymous",
    "banner": "",
    "copyright": "Unless otherwise noted, released into the public domain under CC0.",
    "post_prefix": "post/",
    "feed_path": "atom.xml",
    "stylesheet": "assets/theme.css",
    "converter": "pandoc",
    "pandoc_filters": [],
    "highlight_style": "monokai",
    "plotly_script": "assets/plotly-basic-1.27.1.min.js",
    "exclude": ["node_modules", ".git", ".venv", "venv", "__pycache__"],
    "templates_dir": "_templates",
    "concurrency": 8,
}


@dataclass(frozen=True)
class SiteConfig:
    """Resolved configuration for one build.

    Attributes:
        root: Project root directory; every source path is relative to it.
        url: Canonical site URL without trailing slash.
        prepath: Sub-path the site lives under (``~me`` for example.edu/~me).
        build_time: Timestamp used as the default creation date.
    """

    root: Path
    url: str
    prepath: str
    title: str
    description: str
    author: str
    banner: str
    copyright: str
    post_prefix: str
    feed_path: str
    stylesheet: str
    converter: str
    pandoc_filters: tuple[str, ...]
    highlight_style: str
    plotly_script: str
    exclude: tuple[str, ...]
    templates_dir: str
    concurrency: int
    build_time: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc).replace(microsecond=0)
    )

    @classmethod
    def from_mapping(cls, root: Path, mapping: dict[str, Any]) -> SiteConfig:
        """Build a SiteConfig from a merged configuration mapping.

        Args:
            root: Project root directory.
            mapping: DEFAULT_CONFIG overlaid with user settings.

        Returns:
            Frozen SiteConfig.
        """
        merged = {**DEFAULT_CONFIG, **mapping}
        try:
            concurrency = int(merged["concurrency"])
        except (TypeError, ValueError) as exc:
            raise BlogError(
                f"concurrency must be an integer, got {merged['concurrency']!r}"
            ) from exc
        if concurrency < 1:
            raise BlogError(f"concurrency must be at least 1, got {concurrency}")
        return cls(
            root=root,
            url=str(merged["url"]).rstrip("/"),
            prepath=str(merged["prepath"] or "").strip("/"),
            title=str(merged["title"]),
            description=str(merged["description"]),
            author=str(merged["author"]),
            banner=str(merged["banner"] or ""),
            copyright=str(merged["copyright"]),
            post_prefix=str(merged["post_prefix"]),
            feed_path=str(merged["feed_path"]),
            stylesheet=str(merged["stylesheet"]),
            converter=str(merged["converter"]),
            pandoc_filters=tuple(merged["pandoc_filters"] or ()),
            highlight_style=str(merged["highlight_style"]),
            plotly_script=str(merged["plotly_script"]),
            exclude=tuple(merged["exclude"] or ()),
            templates_dir=str(merged["templates_dir"]),
            concurrency=concurrency,
        )

    def default_metadata(self) -> dict[str, Any]:
        """Return the record every source file starts from before front-matter."""
        return {
            "title": self.title,
            "description": self.description,
            "date": self.build_time,
            "date_updated": None,
            "banner": self.banner,
            "social_banner": "",
            "tags": (),
            "author": self.author,
            "plotly": False,
            "mathjax": False,
            "title_html": None,
        }


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from blog.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise BlogError(f"{config_path}: invalid YAML: {exc}") from exc
        if not isinstance(loaded, dict):
            raise BlogError(f"{config_path}: expected a mapping at the top level")
        config.update(loaded)
    return config


def load_site_config(project_root: Path) -> SiteConfig:
    """Load blog.yaml and freeze it into a SiteConfig."""
    return SiteConfig.from_mapping(project_root, load_config(project_root))
