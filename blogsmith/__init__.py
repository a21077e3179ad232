"""blogsmith static blog generator.

This package turns a tree of Markdown files with YAML front-matter into a
static blog: one HTML page per source file plus an Atom feed.

The main entry point is the CLI module, which runs a full build of the
project in the current directory.

Architecture:
- metadata: front-matter parsing into immutable PostMetadata records
- collections: discovery, chronological ordering and neighbor links
- pages: per-page conversion, highlighting and chrome assembly
- feeds: Atom feed generation
- build: concurrent orchestration and the build report
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
