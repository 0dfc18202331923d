import json
from pathlib import Path
from unittest import mock

import pytest

from tests.utils import post_source
from tests.utils import write_post
from website.config import Config
from website.errors import BuildError
from website.errors import LocaleError
from website.errors import MissingTranslationError
from website.errors import PostLoadError
from website.main import build_or_exit
from website.site import Site
from website.site import build


def test_build(site: Site) -> None:
    assert [post.link for post in site.posts] == [
        "blog/new-website",
        "blog/series/part-1",
        "blog/hello-world",
    ]
    assert "<h1>Christine Dodrill</h1>" in site.resume
    assert site.locale.language == "en"
    assert site.feed_metadata.title == "Christine Dodrill's Blog"


def test_build__links_are_unique(site: Site) -> None:
    links = [post.link for post in site.posts]

    assert len(links) == len(set(links))


def test_build__feeds_match_the_index(site: Site) -> None:
    items = json.loads(site.feeds.json)["items"]

    assert [item["id"] for item in items] == [
        f"https://example.com/{post.link}" for post in site.posts
    ]
    assert site.feeds.rss.count(b"<item>") == len(site.posts)
    assert site.feeds.atom.count(b"<entry>") == len(site.posts)


def test_build__is_reproducible(config: Config) -> None:
    first = build(config)
    second = build(config)

    assert first.posts.posts == second.posts.posts
    assert first.feeds == second.feeds


def test_build__missing_date_fails(config: Config, root_dir: Path) -> None:
    write_post(root_dir / "blog", "broken.md", post_source(date=None))

    with pytest.raises(PostLoadError):
        build(config)


def test_build__missing_translation_fails(config: Config, root_dir: Path) -> None:
    (root_dir / "locales" / "en.json").write_text('{"blog": {"title": "x"}}')

    with pytest.raises(MissingTranslationError):
        build(config)


def test_build__missing_locale_fails(config: Config, root_dir: Path) -> None:
    (root_dir / "locales" / "tp.json").unlink()

    with pytest.raises(LocaleError):
        build(config)


def test_build__missing_resume_fails(config: Config, root_dir: Path) -> None:
    (root_dir / "static" / "resume" / "resume.md").unlink()

    with pytest.raises(BuildError):
        build(config)


def test_build_or_exit(config: Config, root_dir: Path) -> None:
    write_post(root_dir / "blog", "broken.md", post_source(date=None))

    with mock.patch("website.main.configure_logging"), pytest.raises(
        SystemExit
    ) as exc_info:
        build_or_exit(config)

    assert exc_info.value.code == 1
