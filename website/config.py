import os
from pathlib import Path

import pydantic
import tomli
from loguru import logger

from website.errors import ConfigError

ROOT_DIR = Path().parent.resolve()

_CONFIG_FILE = os.getenv("WEBSITE_CONFIG_FILE", "website.toml")

DEFAULT_PORT = 29384


class Config(pydantic.BaseModel):
    origin: str = "https://christine.website"
    content_dir: Path = Path("blog")
    # Prepended to the path of each post file to form its link
    link_prefix: str = "blog"
    locales_dir: Path = Path("locales")
    languages: list[str] = ["en", "tp"]
    default_language: str = "en"
    resume_file: Path = Path("static/resume/resume.md")
    static_dir: Path = Path("static")
    css_dir: Path = Path("css")
    templates_dir: Path | None = None

    author_email: str = "me@christine.website"
    icon_url: str = "https://christine.website/static/img/avatar.png"

    port: int = DEFAULT_PORT
    debug: bool = False

    root_dir: Path = ROOT_DIR

    @pydantic.field_validator("origin")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @pydantic.model_validator(mode="after")
    def _check_default_language(self) -> "Config":
        if self.default_language not in self.languages:
            raise ValueError(
                f"default_language {self.default_language!r} "
                f"is not one of {self.languages}"
            )
        return self

    def resolve(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return self.root_dir / path

    @property
    def blog_url(self) -> str:
        if self.link_prefix:
            return f"{self.origin}/{self.link_prefix}"
        return self.origin


def load_config(path: Path | None = None) -> Config:
    """Load the TOML config file, falling back to the defaults if missing.

    The `PORT` environment variable takes precedence over the file.
    """
    config_path = path or ROOT_DIR / _CONFIG_FILE
    data: dict = {}
    try:
        data = tomli.loads(config_path.read_text())
    except FileNotFoundError:
        logger.info(f"{config_path} not found, using the default config")
    except tomli.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid config file {config_path}: {exc}") from exc

    data.setdefault("root_dir", config_path.resolve().parent)
    if port := os.getenv("PORT"):
        data["port"] = port

    try:
        return Config.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ConfigError(f"Invalid config file {config_path}: {exc}") from exc
