import json
from pathlib import Path

LOCALE_EN = {
    "blog": {
        "title": "Christine Dodrill's Blog",
        "description": "My blog posts and rants about various technology things.",
    },
    "header": {"name": "Christine Dodrill"},
    "meta": {
        "rss_copyright": "This work is copyright Christine Dodrill.",
        "json_feed": "This is a JSON feed of my blogposts.",
    },
}

LOCALE_TP = {
    "blog": {
        "title": "lipu sitelen pi jan Kisin",
        "description": "lipu sitelen mi",
    },
    "header": {"name": "jan Kisin"},
    "meta": {
        "rss_copyright": "jan Kisin li jo e ni",
        "json_feed": "ni li lipu JSON",
    },
}


def post_source(
    title: str = "A post",
    date: str | None = "2020-01-01",
    body: str = "Hello *world*\n",
    **extra: str,
) -> str:
    header = [f"title: {title}"]
    if date is not None:
        header.append(f"date: {date}")
    header.extend(f"{key}: {value}" for key, value in extra.items())
    return "---\n" + "\n".join(header) + "\n---\n" + body


def write_post(content_dir: Path, name: str, source: str) -> Path:
    path = content_dir / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source)
    return path


def write_locales(locales_dir: Path, **locales: dict) -> None:
    locales_dir.mkdir(parents=True, exist_ok=True)
    for lang, data in locales.items():
        (locales_dir / f"{lang}.json").write_text(json.dumps(data))
