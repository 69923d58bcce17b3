"""Formatting of numbers and names for exported files."""

import unicodedata

_SEPARATORS = str.maketrans({"/": "_", "\\": "_", "\0": "_"})
_RESERVED_NAMES = ("", ".", "..")


def digits(number: int) -> int:
    """Number of decimal digits of ``number``."""
    return len(str(abs(number)))


def pad_number(number: int, total: int) -> str:
    """Pad ``number`` with zeros to as many digits as ``total`` has."""
    return str(number).zfill(digits(total))


def normalize_ascii(text: str) -> str:
    """Decompose accented characters and drop everything that is not ASCII.

    >>> normalize_ascii("Beyoncé – Déjà Vu")
    'Beyonce  Deja Vu'
    """
    return unicodedata.normalize("NFD", text).encode("ascii", "ignore").decode("ascii")


def file_name_component(name: str) -> str:
    """Replace path separators so that ``name`` stays a single path component.

    Names that would refer to the folder itself or its parent (``.``, ``..``)
    and empty names become ``_``.
    """
    name = name.translate(_SEPARATORS)
    if name in _RESERVED_NAMES:
        return "_"
    return name
