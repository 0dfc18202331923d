import pytest

from website import frontmatter
from website.errors import FrontMatterError


def test_split() -> None:
    header, body = frontmatter.split(b"---\ntitle: Hi\n---\nBody\n---\nMore\n")

    assert header == b"title: Hi\n"
    assert body == b"Body\n---\nMore\n"


def test_split__crlf_and_bom() -> None:
    header, body = frontmatter.split(b"\xef\xbb\xbf---\r\ntitle: Hi\r\n---\r\nBody")

    assert frontmatter.decode(header) == {"title": "Hi"}
    assert body == b"Body"


def test_split__empty_header() -> None:
    assert frontmatter.parse(b"---\n---\nBody") == ({}, b"Body")


@pytest.mark.parametrize(
    "content",
    [
        b"title: Hi\n---\nBody",
        b"",
        b"---",
        b"---\ntitle: Hi\nBody",
    ],
)
def test_split__missing_delimiter(content: bytes) -> None:
    with pytest.raises(FrontMatterError):
        frontmatter.split(content)


def test_decode__invalid_yaml() -> None:
    with pytest.raises(FrontMatterError):
        frontmatter.decode(b"title: [unclosed\n")


def test_decode__not_a_mapping() -> None:
    with pytest.raises(FrontMatterError):
        frontmatter.decode(b"- a\n- b\n")


def test_parse__extra_fields_are_kept() -> None:
    header, body = frontmatter.parse(b"---\ntitle: Hi\ntags: [a]\n---\n")

    assert header == {"title": "Hi", "tags": ["a"]}
    assert body == b""


def test_decode__dates_stay_strings() -> None:
    header = frontmatter.decode(b"date: 2020-09-19\nupdated: 2020-02-30\n")

    assert header == {"date": "2020-09-19", "updated": "2020-02-30"}
