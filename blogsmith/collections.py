from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from .config import SiteConfig
from .metadata import MetadataExtractor, PostMetadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Neighbors:
    """Older and newer posts adjacent to a post in chronological order."""

    previous: PostMetadata | None = None
    next: PostMetadata | None = None

    def __bool__(self) -> bool:
        return self.previous is not None or self.next is not None


class PostCollection(Sequence[PostMetadata]):
    """Every source record, newest first by effective date.

    The sort is stable, so records with equal dates keep discovery order.
    """

    def __init__(self, metas: Iterable[PostMetadata], post_prefix: str = "post/"):
        self._metas = sorted(metas, key=lambda m: m.effective_date, reverse=True)
        self.post_prefix = post_prefix
        self._posts = [m for m in self._metas if self.is_post(m)]
        self._index = {m.filepath: i for i, m in enumerate(self._posts)}

    def __iter__(self) -> Iterator[PostMetadata]:
        return iter(self._metas)

    def __len__(self) -> int:
        return len(self._metas)

    def __getitem__(self, item):
        return self._metas[item]

    def is_post(self, meta: PostMetadata) -> bool:
        return meta.filepath.startswith(self.post_prefix)

    @property
    def posts(self) -> list[PostMetadata]:
        return list(self._posts)

    @property
    def non_posts(self) -> list[PostMetadata]:
        return [m for m in self._metas if not self.is_post(m)]

    @property
    def tags(self) -> tuple[str, ...]:
        """Distinct tags across all posts, case-sensitive, sorted ascending."""
        return tuple(sorted({tag for meta in self._posts for tag in meta.tags}))

    def neighbors(self, meta: PostMetadata) -> Neighbors:
        """Return the older (previous) and newer (next) post around ``meta``."""
        idx = self._index.get(meta.filepath)
        if idx is None:
            return Neighbors()
        previous = self._posts[idx + 1] if idx + 1 < len(self._posts) else None
        newer = self._posts[idx - 1] if idx > 0 else None
        return Neighbors(previous=previous, next=newer)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts, {len(self._metas)} pages)"


def discover_markdown(root: Path, exclude: Iterable[str] = ()) -> list[Path]:
    """Find every ``.md`` file under ``root``, sorted by relative POSIX path.

    Args:
        root: Directory to search.
        exclude: Directory names to skip wherever they appear.

    Returns:
        List of paths in discovery order.
    """
    skipped = set(exclude)
    files: list[Path] = []
    for path in root.rglob("*.md"):
        if not path.is_file():
            continue
        rel = path.relative_to(root)
        if any(part in skipped for part in rel.parts[:-1]):
            continue
        files.append(path)
    files.sort(key=lambda p: p.relative_to(root).as_posix())
    return files


def build_collection(config: SiteConfig) -> PostCollection:
    """Extract metadata for every source file and order it.

    Extraction errors propagate; a build with partial metadata is not attempted.
    """
    extractor = MetadataExtractor(config.root, config.default_metadata())
    exclude = (*config.exclude, config.templates_dir)
    records: dict[str, PostMetadata] = {}
    for path in discover_markdown(config.root, exclude):
        meta = extractor.extract(path)
        logger.debug("extracted %s", meta.filepath)
        records[meta.filepath] = meta
    return PostCollection(records.values(), post_prefix=config.post_prefix)
