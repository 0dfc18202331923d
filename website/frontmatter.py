"""Split a document into its YAML header and its body.

    ---
    title: Hello
    date: 2020-09-19
    ---
    Body in *markdown*.

The header is located first, then decoded; the body is returned untouched.
"""
import re
from typing import Any

import yaml

from website.errors import FrontMatterError

_BOM = b"\xef\xbb\xbf"
_DELIMITER = b"---"
_CLOSING_REGEX = re.compile(rb"^---[ \t]*\r?$\n?", re.MULTILINE)


class _HeaderLoader(yaml.SafeLoader):
    """SafeLoader that leaves dates as plain strings."""


_HeaderLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag != "tag:yaml.org,2002:timestamp"
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def split(content: bytes) -> tuple[bytes, bytes]:
    """Return the raw header block and the body bytes."""
    if content.startswith(_BOM):
        content = content[len(_BOM) :]

    first_line, sep, rest = content.partition(b"\n")
    if first_line.rstrip() != _DELIMITER or not sep:
        raise FrontMatterError("Document does not start with a --- header")

    match = _CLOSING_REGEX.search(rest)
    if not match:
        raise FrontMatterError("Unterminated --- header")

    return rest[: match.start()], rest[match.end() :]


def decode(header: bytes) -> dict[str, Any]:
    try:
        data = yaml.load(header, Loader=_HeaderLoader)
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"Invalid YAML header: {exc}") from exc

    # An empty header is a valid, empty mapping
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Header must be a mapping, got {type(data).__name__}"
        )

    return data


def parse(content: bytes) -> tuple[dict[str, Any], bytes]:
    header, body = split(content)
    return decode(header), body
