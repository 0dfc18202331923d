import os
from dataclasses import dataclass
from datetime import datetime
from functools import cached_property
from functools import cmp_to_key
from pathlib import Path
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Any
from typing import Iterable
from typing import Iterator
from typing import Sequence

import pydantic
from loguru import logger

from website import frontmatter
from website import markdown
from website.errors import DuplicateLinkError
from website.errors import FrontMatterError
from website.errors import PostLoadError
from website.errors import PostNotFoundError
from website.utils.datetime import parse_date


class PostMetadata(pydantic.BaseModel):
    """The recognized header fields, anything else is ignored."""

    title: str
    date: str
    summary: str | None = None

    @pydantic.field_validator("title", "date", "summary", mode="before")
    @classmethod
    def _scalar_as_string(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


@dataclass(frozen=True)
class Post:
    title: str
    date: str
    link: str
    body: str
    body_html: str
    summary: str | None = None

    @cached_property
    def published_at(self) -> datetime:
        return parse_date(self.date)


def compare_posts(a: Post, b: Post) -> int:
    """Newest first."""
    if a.published_at > b.published_at:
        return -1
    if a.published_at < b.published_at:
        return 1
    return 0


class PostIndex(Sequence[Post]):
    """Posts ordered newest-first, with a lookup by link."""

    def __init__(self, posts: Iterable[Post]) -> None:
        self._posts = tuple(posts)
        by_link: dict[str, Post] = {}
        for post in self._posts:
            if post.link in by_link:
                raise DuplicateLinkError(f"Duplicate post link {post.link!r}")
            by_link[post.link] = post
        self._by_link = MappingProxyType(by_link)

    @classmethod
    def from_posts(cls, posts: Iterable[Post]) -> "PostIndex":
        # sorted() is stable, posts with the same date keep their load order
        return cls(sorted(posts, key=cmp_to_key(compare_posts)))

    def get(self, link: str) -> Post:
        try:
            return self._by_link[link]
        except KeyError:
            raise PostNotFoundError(link)

    @property
    def posts(self) -> tuple[Post, ...]:
        return self._posts

    @property
    def latest(self) -> Post | None:
        return self._posts[0] if self._posts else None

    def __getitem__(self, idx):  # type: ignore
        return self._posts[idx]

    def __len__(self) -> int:
        return len(self._posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._by_link
        return item in self._posts

    def __repr__(self) -> str:
        return f"PostIndex({len(self)} posts)"


def link_for(path: Path, content_dir: Path, link_prefix: str = "") -> str:
    relative = PurePosixPath(path.relative_to(content_dir).as_posix())
    link = str(relative.with_suffix(""))
    if link_prefix:
        return f"{link_prefix.strip('/')}/{link}"
    return link


def _walk(content_dir: Path) -> Iterator[Path]:
    def _raise(exc: OSError) -> None:
        raise exc

    if not content_dir.is_dir():
        raise PostLoadError(f"Content directory {content_dir} does not exist")

    for root, dirs, files in os.walk(content_dir, onerror=_raise):
        # Lexical order so the load order does not depend on the filesystem
        dirs.sort()
        for name in sorted(files):
            path = Path(root) / name
            if path.is_file():
                yield path


def load_post(path: Path, content_dir: Path, link_prefix: str = "") -> Post:
    try:
        content = path.read_bytes()
        header, body = frontmatter.parse(content)
        metadata = PostMetadata.model_validate(header)
        body_text = body.decode("utf-8")
    except (OSError, FrontMatterError, UnicodeDecodeError) as exc:
        raise PostLoadError(f"Failed to load {path}: {exc}") from exc
    except pydantic.ValidationError as exc:
        raise PostLoadError(f"Invalid header in {path}: {exc}") from exc

    return Post(
        title=metadata.title,
        date=metadata.date,
        link=link_for(path, content_dir, link_prefix),
        body=body_text,
        body_html=markdown.render(body_text),
        summary=metadata.summary,
    )


def load_posts(content_dir: Path, link_prefix: str = "") -> list[Post]:
    """Load every file under `content_dir` as a post, in walk order.

    Any unreadable or malformed file aborts the whole load.
    """
    posts = []
    seen: dict[str, Path] = {}
    try:
        for path in _walk(content_dir):
            post = load_post(path, content_dir, link_prefix)
            if post.link in seen:
                raise DuplicateLinkError(
                    f"{path} and {seen[post.link]} both map to {post.link!r}"
                )
            seen[post.link] = path
            logger.debug(f"Loaded {path} as {post.link}")
            posts.append(post)
    except OSError as exc:
        raise PostLoadError(f"Failed to walk {content_dir}: {exc}") from exc

    logger.info(f"Loaded {len(posts)} posts from {content_dir}")
    return posts
