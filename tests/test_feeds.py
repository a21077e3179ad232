import xml.etree.ElementTree as ET
from datetime import datetime, timezone

from blogsmith.collections import PostCollection
from blogsmith.config import SiteConfig
from blogsmith.feeds import AtomFeedGenerator, FeedEntry, atom_date
from blogsmith.metadata import MetadataExtractor

NS = {"a": "http://www.w3.org/2005/Atom"}


def make_site(tmp_path):
    config = SiteConfig.from_mapping(
        tmp_path,
        {
            "url": "https://blog.example.com",
            "title": "Insight & Numbers",
            "description": "A blog",
            "author": "Ann",
            "banner": "glen.jpg",
        },
    )
    extractor = MetadataExtractor(tmp_path, config.default_metadata())
    posts = [
        extractor.from_text(
            "---\ntitle: Old\ndate: 2021-01-01\ntags: [b]\nbanner: old.jpg\n---\n",
            tmp_path / "post" / "old.md",
        ),
        extractor.from_text(
            "---\ntitle: New <b>bold</b>\ndate: 2021-02-01\ndateUpdated: 2021-07-01\n"
            "description: Fresh ]]> stuff\ntags: [a, b]\nsocialBanner: card.png\n---\n",
            tmp_path / "post" / "new.md",
        ),
        extractor.from_text("---\ntitle: About\n---\n", tmp_path / "about.md"),
    ]
    return config, PostCollection(posts)


def test_atom_feed_structure(tmp_path):
    config, collection = make_site(tmp_path)
    xml = AtomFeedGenerator(config).generate(collection.posts, collection.tags)

    root = ET.fromstring(xml)
    assert root.tag == "{http://www.w3.org/2005/Atom}feed"
    assert root.find("a:title", NS).text == "Insight & Numbers"
    assert root.find("a:id", NS).text == "https://blog.example.com/"
    assert root.find("a:updated", NS).text == "2021-07-01T00:00:00Z"
    assert root.find("a:logo", NS).text == "https://blog.example.com/glen.jpg"
    assert root.find("a:author/a:uri", NS).text == "https://blog.example.com/#contact"
    assert [c.get("term") for c in root.findall("a:category", NS)] == ["a", "b"]

    entries = root.findall("a:entry", NS)
    assert [e.find("a:title", NS).text for e in entries] == ["New <b>bold</b>", "Old"]
    newest = entries[0]
    assert newest.find("a:id", NS).text == "https://blog.example.com/post/new.html"
    assert newest.find("a:updated", NS).text == "2021-07-01T00:00:00Z"
    assert newest.find("a:published", NS).text == "2021-02-01T00:00:00Z"
    assert newest.find("a:summary", NS).text == "Fresh ]]> stuff"
    enclosure = newest.find("a:link[@rel='enclosure']", NS)
    assert enclosure.get("href") == "https://blog.example.com/post/card.png"
    assert enclosure.get("type") == "image/png"
    old_enclosure = entries[1].find("a:link[@rel='enclosure']", NS)
    assert old_enclosure.get("href") == "https://blog.example.com/post/old.jpg"


def test_feed_entry_from_post(tmp_path):
    config, collection = make_site(tmp_path)
    entry = FeedEntry.from_post(collection.posts[1], config)
    assert entry.title == "Old"
    assert entry.url == "https://blog.example.com/post/old.html"
    assert entry.author == "Ann"
    assert entry.date == datetime(2021, 1, 1, tzinfo=timezone.utc)


def test_empty_feed_uses_build_time(tmp_path):
    config = SiteConfig.from_mapping(tmp_path, {})
    xml = AtomFeedGenerator(config).generate([], ())
    root = ET.fromstring(xml)
    assert root.find("a:updated", NS).text == atom_date(config.build_time)
    assert root.findall("a:entry", NS) == []
    assert root.find("a:logo", NS) is None


def test_write_feed(tmp_path):
    config, collection = make_site(tmp_path)
    path = AtomFeedGenerator(config).write(tmp_path, collection.posts, collection.tags)
    assert path == tmp_path / "atom.xml"
    assert "<feed" in path.read_text(encoding="utf-8")
