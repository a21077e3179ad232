"""Syntax highlighting of converted HTML with Pygments.

Converters emit code blocks as ``<pre><code>`` elements with the language in
a class attribute (``language-python`` from mistune, ``<pre class="python">``
from pandoc). Highlighter finds those blocks, unescapes the code and replaces
each block with Pygments markup.
"""

from __future__ import annotations

import html as html_lib
import re

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.lexers.special import TextLexer
from pygments.util import ClassNotFound

from .errors import BlogError

CODE_HINT_RE = re.compile(r"<pre[^<]*<code")
CODE_BLOCK_RE = re.compile(
    r"<pre(?P<pre_attrs>[^>]*)>\s*<code(?P<code_attrs>[^>]*)>(?P<code>.*?)</code>\s*</pre>",
    re.DOTALL | re.IGNORECASE,
)
CLASS_ATTR_RE = re.compile(r'class\s*=\s*["\']([^"\']*)["\']', re.IGNORECASE)
IGNORED_CLASSES = {"sourceCode", "numberSource", "highlight"}


def has_code_blocks(html: str) -> bool:
    """Return True if the HTML contains at least one ``<pre><code>`` block."""
    return CODE_HINT_RE.search(html) is not None


def _language(attrs: str) -> str | None:
    for match in CLASS_ATTR_RE.finditer(attrs):
        for cls in match.group(1).split():
            if cls in IGNORED_CLASSES:
                continue
            if cls.startswith("language-"):
                cls = cls[len("language-") :]
            if cls:
                return cls
    return None


class Highlighter:
    """Highlights code blocks in an HTML fragment.

    Attributes:
        style: Pygments style name used for the stylesheet.
    """

    css_class = "highlight"

    def __init__(self, style: str = "monokai"):
        self.style = style
        self._formatter = HtmlFormatter(cssclass=self.css_class)

    def stylesheet(self) -> str:
        """Return the CSS rules for the configured style."""
        try:
            formatter = HtmlFormatter(style=self.style, cssclass=self.css_class)
        except ClassNotFound as exc:
            raise BlogError(f"unknown highlight style {self.style!r}") from exc
        return formatter.get_style_defs(f".{self.css_class}")

    def highlight_block(self, code: str, language: str | None) -> str:
        """Highlight one block of plain (unescaped) source code."""
        lexer = None
        if language:
            try:
                lexer = get_lexer_by_name(language, stripnl=False)
            except ClassNotFound:
                lexer = None
        if lexer is None:
            try:
                lexer = guess_lexer(code)
            except ClassNotFound:
                lexer = TextLexer()
        return highlight(code, lexer, self._formatter)

    def highlight(self, html: str) -> str:
        """Replace every code block in ``html`` with highlighted markup."""

        def repl(match: re.Match) -> str:
            language = _language(match.group("code_attrs")) or _language(
                match.group("pre_attrs")
            )
            code = html_lib.unescape(match.group("code"))
            return self.highlight_block(code, language).rstrip("\n")

        return CODE_BLOCK_RE.sub(repl, html)
