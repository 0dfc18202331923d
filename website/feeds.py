"""RSS, Atom and JSON Feed documents, serialized once from the post index."""
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import pydantic
from feedgen.feed import FeedGenerator  # type: ignore
from loguru import logger

from website.config import Config
from website.locales import Locale
from website.posts import PostIndex
from website.utils.datetime import ZERO_DATE

RSS_CONTENT_TYPE = "application/rss+xml"
ATOM_CONTENT_TYPE = "application/atom+xml"
JSON_FEED_CONTENT_TYPE = "application/json"

JSON_FEED_VERSION = "https://jsonfeed.org/version/1"


class FeedMetadata(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True)

    title: str
    description: str
    copyright: str
    user_comment: str
    author_name: str
    author_email: str
    icon: str
    home_page_url: str
    blog_url: str
    feed_url: str
    language: str

    @classmethod
    def from_locale(cls, config: Config, locale: Locale) -> "FeedMetadata":
        return cls(
            title=locale.value("blog", "title"),
            description=locale.value("blog", "description"),
            copyright=locale.value("meta", "rss_copyright"),
            user_comment=locale.value("meta", "json_feed"),
            author_name=locale.value("header", "name"),
            author_email=config.author_email,
            icon=config.icon_url,
            home_page_url=config.origin,
            blog_url=config.blog_url,
            feed_url=config.origin + "/blog.json",
            language=locale.language,
        )


@dataclass(frozen=True)
class Feeds:
    rss: bytes
    atom: bytes
    json: bytes


def canonical_url(origin: str, link: str) -> str:
    return origin.rstrip("/") + "/" + link


def _last_updated(index: PostIndex) -> datetime:
    # Derived from the content so that rebuilding the same posts gives
    # the same document
    if index.latest is None:
        return ZERO_DATE
    return index.latest.published_at


def _gen_feed(index: PostIndex, metadata: FeedMetadata) -> FeedGenerator:
    fg = FeedGenerator()
    fg.id(metadata.blog_url)
    fg.title(metadata.title)
    fg.description(metadata.description)
    fg.author({"name": metadata.author_name, "email": metadata.author_email})
    fg.link(href=metadata.blog_url, rel="alternate")
    fg.logo(metadata.icon)
    fg.icon(metadata.icon)
    fg.rights(metadata.copyright)
    fg.language(metadata.language)
    fg.updated(_last_updated(index))
    fg.lastBuildDate(_last_updated(index))

    for post in index:
        url = canonical_url(metadata.home_page_url, post.link)
        fe = fg.add_entry(order="append")
        fe.id(url)
        fe.guid(url, permalink=True)
        fe.link(href=url)
        fe.title(post.title)
        fe.published(post.published_at)
        fe.updated(post.published_at)
        if post.summary:
            fe.summary(post.summary)

    return fg


def build_rss(index: PostIndex, metadata: FeedMetadata) -> bytes:
    return _gen_feed(index, metadata).rss_str(pretty=True)


def build_atom(index: PostIndex, metadata: FeedMetadata) -> bytes:
    return _gen_feed(index, metadata).atom_str(pretty=True)


def json_feed(index: PostIndex, metadata: FeedMetadata) -> dict[str, Any]:
    """JSON Feed (https://jsonfeed.org/) document."""
    items = []
    for post in index:
        url = canonical_url(metadata.home_page_url, post.link)
        item = {
            "id": url,
            "url": url,
            "title": post.title,
            "content_html": post.body_html,
            "date_published": post.published_at.isoformat(),
        }
        if post.summary:
            item["summary"] = post.summary
        items.append(item)

    return {
        "version": JSON_FEED_VERSION,
        "title": metadata.title,
        "home_page_url": metadata.home_page_url,
        "feed_url": metadata.feed_url,
        "description": metadata.description,
        "user_comment": metadata.user_comment,
        "icon": metadata.icon,
        "favicon": metadata.icon,
        "author": {
            "name": metadata.author_name,
            "avatar": metadata.icon,
        },
        "items": items,
    }


def build_json_feed(index: PostIndex, metadata: FeedMetadata) -> bytes:
    return json.dumps(
        json_feed(index, metadata), ensure_ascii=False, separators=(",", ":")
    ).encode()


def build_feeds(index: PostIndex, metadata: FeedMetadata) -> Feeds:
    feeds = Feeds(
        rss=build_rss(index, metadata),
        atom=build_atom(index, metadata),
        json=build_json_feed(index, metadata),
    )
    logger.info(f"Built feeds for {len(index)} posts")
    return feeds
