from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from website import markdown
from website.config import Config
from website.errors import BuildError
from website.feeds import FeedMetadata
from website.feeds import Feeds
from website.feeds import build_feeds
from website.locales import Locale
from website.locales import Translations
from website.locales import load_translations
from website.posts import PostIndex
from website.posts import load_posts
from website.utils.datetime import now


@dataclass(frozen=True)
class Site:
    """Everything served by the app, built once at startup."""

    config: Config
    translations: Translations
    posts: PostIndex
    resume: str
    feeds: Feeds
    feed_metadata: FeedMetadata
    built_at: datetime

    @property
    def locale(self) -> Locale:
        return self.translations.get_locale(self.config.default_language)


def _render_resume(config: Config) -> str:
    path = config.resolve(config.resume_file)
    try:
        return markdown.render(path.read_bytes())
    except (OSError, UnicodeDecodeError) as exc:
        raise BuildError(f"Failed to render the resume {path}: {exc}") from exc


def build(config: Config) -> Site:
    """Load, render and index everything, or raise a `BuildError`."""
    logger.info(f"Building site for {config.origin}")
    translations = load_translations(
        config.resolve(config.locales_dir), config.languages
    )
    feed_metadata = FeedMetadata.from_locale(
        config, translations.get_locale(config.default_language)
    )

    posts = PostIndex.from_posts(
        load_posts(config.resolve(config.content_dir), config.link_prefix)
    )
    resume = _render_resume(config)
    feeds = build_feeds(posts, feed_metadata)

    site = Site(
        config=config,
        translations=translations,
        posts=posts,
        resume=resume,
        feeds=feeds,
        feed_metadata=feed_metadata,
        built_at=now(),
    )
    logger.info(f"Site built with {len(posts)} posts")
    return site
