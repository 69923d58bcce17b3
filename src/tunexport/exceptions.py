"""Exceptions raised by tunexport."""


class TunexportError(Exception):
    """Base class for all errors raised by tunexport."""


class LibraryParsingError(TunexportError):
    """The library document cannot be turned into a library at all."""


class ConfigError(TunexportError):
    """The settings file is missing or contains invalid values."""


class ExportError(TunexportError):
    """An export task cannot run, e.g. because its output folder is in the way."""
