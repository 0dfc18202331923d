"""Errors raised while building or serving the site."""


class BuildError(Exception):
    """Base error for anything that aborts the startup build."""


class ConfigError(BuildError):
    """Raised when the config file cannot be parsed or validated."""


class LocaleError(BuildError):
    """Raised when a locale file is missing or is not valid JSON."""


class MissingTranslationError(LocaleError):
    """Raised when a required localized string is not defined."""


class FrontMatterError(BuildError):
    """Raised when a document header cannot be split or decoded."""


class PostLoadError(BuildError):
    """Raised when a post cannot be read or parsed."""


class DuplicateLinkError(PostLoadError):
    """Raised when two source files map to the same post link."""


class PostNotFoundError(LookupError):
    """Raised when looking up an unknown post link."""
