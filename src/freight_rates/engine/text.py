"""Text normalization shared by the vehicle and region classifiers."""
import re
import unicodedata

_COMBINING_MARKS = re.compile(r'[\u0300-\u036f]')
_WHITESPACE = re.compile(r'\s+')
_NON_ALNUM = re.compile(r'[^a-zA-Z0-9]')


def normalize_text(text: str) -> str:
    """
    Strip accents, collapse whitespace and upper-case.

    "São  José " -> "SAO JOSE"
    """
    if not text:
        return ""
    text = _COMBINING_MARKS.sub("", unicodedata.normalize("NFD", str(text)))
    return _WHITESPACE.sub(" ", text).upper().strip()


def normalize_plate(plate: str) -> str:
    """Keep only ASCII letters and digits, upper-cased ("abc-1234" -> "ABC1234")."""
    if not plate:
        return ""
    return _NON_ALNUM.sub("", str(plate)).upper()
