from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from tests.utils import LOCALE_EN
from tests.utils import LOCALE_TP
from tests.utils import post_source
from tests.utils import write_locales
from tests.utils import write_post
from website.config import Config
from website.main import create_app
from website.site import Site
from website.site import build


@pytest.fixture
def root_dir(tmp_path: Path) -> Path:
    write_locales(tmp_path / "locales", en=LOCALE_EN, tp=LOCALE_TP)
    content_dir = tmp_path / "blog"
    write_post(
        content_dir,
        "hello-world.md",
        post_source(title="Hello world", date="2020-01-01"),
    )
    write_post(
        content_dir,
        "new-website.markdown",
        post_source(
            title="New website",
            date="2020-09-19",
            body="# New website\n\n```python\nprint('hi')\n```\n",
            summary="The site got rewritten",
        ),
    )
    write_post(
        content_dir,
        "series/part-1.md",
        post_source(title="Series part 1", date="2020-05-01"),
    )
    resume = tmp_path / "static" / "resume" / "resume.md"
    resume.parent.mkdir(parents=True)
    resume.write_text("# Christine Dodrill\n\n- Writes software\n")
    return tmp_path


@pytest.fixture
def config(root_dir: Path) -> Config:
    return Config(origin="https://example.com", root_dir=root_dir)


@pytest.fixture
def site(config: Config) -> Site:
    return build(config)


@pytest.fixture
def client(site: Site) -> Generator:
    with TestClient(create_app(site)) as c:
        yield c
