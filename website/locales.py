"""Localized strings, loaded once from one JSON document per language.

A locale file maps namespaces to keys to strings:

    {"blog": {"title": "Christine Dodrill's Blog"}}
"""
import json
from pathlib import Path
from types import MappingProxyType
from typing import IO
from typing import Any
from typing import Iterator
from typing import Mapping

from loguru import logger

from website.errors import LocaleError
from website.errors import MissingTranslationError


class Locale:
    def __init__(self, language: str, data: Mapping[str, Mapping[str, str]]) -> None:
        self.language = language
        self._data = MappingProxyType(
            {ns: MappingProxyType(dict(keys)) for ns, keys in data.items()}
        )

    def value(self, namespace: str, key: str) -> str:
        try:
            val = self._data[namespace][key]
        except KeyError:
            raise MissingTranslationError(
                f"{self.language}: missing translation {namespace}.{key}"
            )

        if not isinstance(val, str):
            raise MissingTranslationError(
                f"{self.language}: {namespace}.{key} is not a string"
            )

        return val

    def namespaces(self) -> list[str]:
        return list(self._data)

    def __repr__(self) -> str:
        return f"Locale({self.language!r})"


class Translations(Mapping[str, Locale]):
    def __init__(self, locales: Mapping[str, Locale]) -> None:
        self._locales = MappingProxyType(dict(locales))

    def __getitem__(self, language: str) -> Locale:
        return self._locales[language]

    def __iter__(self) -> Iterator[str]:
        return iter(self._locales)

    def __len__(self) -> int:
        return len(self._locales)

    def get_locale(self, language: str) -> Locale:
        try:
            return self._locales[language]
        except KeyError:
            raise MissingTranslationError(f"No locale loaded for {language!r}")


def load_locale(language: str, fp: IO[Any]) -> Locale:
    try:
        data = json.load(fp)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise LocaleError(f"Invalid locale file for {language!r}: {exc}") from exc

    if not isinstance(data, dict) or not all(
        isinstance(keys, dict) for keys in data.values()
    ):
        raise LocaleError(
            f"Locale file for {language!r} must map namespaces to objects"
        )

    return Locale(language, data)


def load_translations(locales_dir: Path, languages: list[str]) -> Translations:
    locales = {}
    for lang in languages:
        path = locales_dir / f"{lang}.json"
        try:
            with path.open("rb") as fin:
                locales[lang] = load_locale(lang, fin)
        except OSError as exc:
            raise LocaleError(f"Failed to read {path}: {exc}") from exc

        logger.debug(f"Loaded locale {lang} from {path}")

    return Translations(locales)
