import pytest

from blogsmith.errors import BlogError
from blogsmith.highlight import Highlighter, has_code_blocks


def test_has_code_blocks():
    assert has_code_blocks('<pre><code class="language-python">x</code></pre>')
    assert has_code_blocks('<pre class="python"><code>x</code></pre>')
    assert not has_code_blocks("<p>inline <code>x</code></p>")
    assert not has_code_blocks("<pre>plain</pre>")


def test_highlights_language_class_block():
    html = (
        "<p>Intro</p>\n"
        '<pre><code class="language-python">def f():\n    return 1 &lt; 2\n</code></pre>\n'
        "<p>Outro</p>"
    )
    out = Highlighter().highlight(html)
    assert out.startswith("<p>Intro</p>")
    assert out.endswith("<p>Outro</p>")
    assert '<div class="highlight">' in out
    assert '<span class="k">def</span>' in out
    assert "&lt;" in out
    assert "language-python" not in out


def test_highlights_pandoc_style_block():
    html = '<pre class="sourceCode javascript"><code>var x = 1;</code></pre>'
    out = Highlighter().highlight(html)
    assert '<div class="highlight">' in out
    assert '<span class="kd">var</span>' in out


def test_unknown_language_still_wrapped():
    html = '<pre><code class="language-notalanguage">just text</code></pre>'
    out = Highlighter().highlight(html)
    assert '<div class="highlight">' in out
    assert "just text" in out


def test_inline_code_untouched():
    html = "<p>Use <code>ls</code> here.</p>"
    assert Highlighter().highlight(html) == html


def test_stylesheet():
    css = Highlighter("monokai").stylesheet()
    assert ".highlight" in css
    with pytest.raises(BlogError):
        Highlighter("no-such-style").stylesheet()
