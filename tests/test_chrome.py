from datetime import datetime, timezone

from blogsmith.chrome import (
    ChromeRenderer,
    format_utc,
    resolve_image_url,
    short_date,
    subline_text,
)
from blogsmith.config import SiteConfig
from blogsmith.metadata import MetadataExtractor


def make_meta(config, filepath, text):
    extractor = MetadataExtractor(config.root, config.default_metadata())
    return extractor.from_text(text, config.root / filepath)


def make_config(tmp_path, **overrides):
    settings = {"url": "https://blog.example.com", "title": "Site"}
    settings.update(overrides)
    return SiteConfig.from_mapping(tmp_path, settings)


def test_date_formats_round_trip():
    moment = datetime(2021, 3, 1, 15, 4, 5, tzinfo=timezone.utc)
    assert format_utc(moment) == "Mon, 01 Mar 2021 15:04:05 GMT"
    assert datetime.strptime(format_utc(moment), "%a, %d %b %Y %H:%M:%S GMT").replace(
        tzinfo=timezone.utc
    ) == moment
    assert short_date(moment) == "2021/3/1"


def test_subline_text_variants(tmp_path):
    config = make_config(tmp_path)
    tagged = make_meta(config, "post/a.md", "---\ndate: 2021-01-01\ntags: [x, y]\n---\n")
    assert subline_text(tagged) == (
        "Updated on Fri, 01 Jan 2021 00:00:00 GMT, tagged with ‘x’—‘y’."
    )
    untagged = make_meta(config, "post/b.md", "---\ndate: 2021-06-01\n---\n")
    assert subline_text(untagged) == "Updated on Tue, 01 Jun 2021 00:00:00 GMT."


def test_head_contains_meta_and_links(tmp_path):
    config = make_config(tmp_path)
    chrome = ChromeRenderer(config)
    meta = make_meta(
        config,
        "post/a.md",
        "---\ntitle: A & B\ndescription: About things\nbanner: top.jpg\n---\n",
    )

    head = chrome.head(meta)

    assert head.startswith("<!doctype html>")
    assert "<title>A &amp; B</title>" in head
    assert '<link href="/atom.xml" type="application/atom+xml" rel="alternate" />' in head
    assert '<meta property="og:url" content="https://blog.example.com/post/a.html" />' in head
    assert (
        '<meta property="og:image" content="https://blog.example.com/post/top.jpg" />'
        in head
    )
    assert '<link href="../assets/theme.css" rel="stylesheet">' in head
    assert "<style>" not in head
    assert "MathJax" not in head
    assert "plotly" not in head
    assert head.rstrip().endswith("</head>")


def test_head_optional_preambles(tmp_path):
    config = make_config(tmp_path, prepath="~me")
    chrome = ChromeRenderer(config)
    meta = make_meta(config, "index.md", "---\nmathjax: true\nplotly: true\n---\n")

    head = chrome.head(meta, highlight_css=".highlight .k { color: #66d9ef }")

    assert "<style>.highlight .k { color: #66d9ef }</style>" in head
    assert "MathJax.Hub.Config" in head
    assert '<script src="/~me/assets/plotly-basic-1.27.1.min.js"' in head
    assert '<link href="assets/theme.css" rel="stylesheet">' in head
    assert 'href="/~me/atom.xml"' in head


def test_fragments(tmp_path):
    config = make_config(tmp_path)
    chrome = ChromeRenderer(config)
    older = make_meta(config, "post/old.md", "---\ntitle: Old <one>\n---\n")
    newer = make_meta(config, "post/new.md", "---\ntitle: New\n---\n")

    assert chrome.banner("top.jpg", 640, 480) == (
        '<figure class="full-width no-top"><img class="top-banner-image" '
        'src="top.jpg" width="640" height="480"></figure>'
    )
    nav = chrome.topnav()
    assert '<a href="/">Blog</a>' in nav
    assert '<a href="/#contact">Contact</a>' in nav
    assert '<a href="/atom.xml">Feed</a>' in nav

    footer = chrome.footer_markdown(older, newer)
    assert 'Previous: <a href="/post/old.html">Old &lt;one&gt;</a><br>' in footer
    assert 'Next: <a href="/post/new.html">New</a>' in footer
    assert chrome.footer_markdown(None, None) == ""
    only_next = chrome.footer_markdown(None, newer)
    assert "Previous" not in only_next and "Next:" in only_next


def test_headline_prefers_title_html(tmp_path):
    config = make_config(tmp_path)
    chrome = ChromeRenderer(config)
    plain = make_meta(config, "a.md", "---\ntitle: x < y\n---\n")
    rich = make_meta(config, "b.md", "---\ntitle: x\ntitleHtml: <em>x</em>\n---\n")
    assert chrome.headline(plain) == "<h1>x &lt; y</h1>"
    assert chrome.headline(rich) == "<h1><em>x</em></h1>"


def test_post_index_markdown(tmp_path):
    config = make_config(tmp_path)
    chrome = ChromeRenderer(config)
    posts = [
        make_meta(config, "post/b.md", "---\ntitle: B\ndate: 2021-06-01\ntags: [x, y]\n---\n"),
        make_meta(config, "post/a.md", "---\ntitle: A\ndate: 2021-01-01\n---\n"),
    ]
    assert chrome.post_index_markdown(posts) == (
        "## All posts\n"
        "- [B](/post/b.html) (2021/6/1: x, y)\n"
        "- [A](/post/a.html) (2021/1/1: )\n"
        "\n"
        '(<a href="/atom.xml">Feed</a>)'
    )


def test_site_templates_override_builtin(tmp_path):
    (tmp_path / "_templates").mkdir()
    (tmp_path / "_templates" / "headline.html.jinja").write_text(
        '<h1 class="custom">{{ meta.title }}</h1>', encoding="utf-8"
    )
    config = make_config(tmp_path)
    meta = make_meta(config, "a.md", "---\ntitle: Hi\n---\n")
    assert ChromeRenderer(config).headline(meta) == '<h1 class="custom">Hi</h1>'


def test_resolve_image_url(tmp_path):
    config = make_config(tmp_path)
    meta = make_meta(config, "post/a/index.md", "")
    assert resolve_image_url(config, meta, "") == ""
    assert resolve_image_url(config, meta, "https://cdn/x.png") == "https://cdn/x.png"
    assert resolve_image_url(config, meta, "/img/x.png") == "https://blog.example.com/img/x.png"
    assert (
        resolve_image_url(config, meta, "x.png")
        == "https://blog.example.com/post/a/x.png"
    )
