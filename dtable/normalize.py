"""Conversion of arbitrary cell values into comparable primitives.

Three views of a value are used by the engine:

- the search key (`normalize`): lower-case ASCII letters, digits and
  whitespace only, so that matching ignores case, accents and punctuation;
- the text form (`to_text`): what filters compare against, what filter UIs
  list as candidates and what the CSV export writes;
- the numeric form (`to_number`): what sorting uses when both sides parse.
"""

import math
import re
import unicodedata
from decimal import Decimal
from typing import Any, Optional

from unidecode import unidecode

# Everything that is not an ASCII letter, an ASCII digit or whitespace.
_NON_SEARCHABLE = re.compile(r"[^a-z0-9\s]")


def _fold_char(char: str) -> str:
    """Spell a Latin letter in ASCII; drop any other non-ASCII character."""
    if char.isascii():
        return char
    if not unicodedata.name(char, "").startswith("LATIN "):
        return ""
    return unidecode(char)


def is_nullish(value: Any) -> bool:
    """Tell if a value counts as missing."""
    return value is None


def to_text(value: Any) -> str:
    """Stringify a value for display, filtering and export.

    Args:
        value: The value to convert.

    Returns:
        An empty string for `None`, `true`/`false` for booleans, integral
        floats without the trailing `.0` and `str(value)` for the rest.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize(value: Any) -> str:
    """Compute the search key of a value.

    Latin letters are transliterated to ASCII first so that accented ones
    keep their base letter (`é` becomes `e`, `ß` becomes `ss`). Any other
    non-ASCII character, like `€`, `½` or `東`, is dropped.

    Args:
        value: The value to convert.

    Returns:
        The lower-cased value stripped of anything that is not an ASCII
        letter, digit or whitespace; an empty string for `None`.
    """
    if value is None:
        return ""
    text = "".join(_fold_char(c) for c in to_text(value)).lower()
    return _NON_SEARCHABLE.sub("", text)


def to_number(value: Any) -> Optional[float]:
    """Parse a value as a floating point number.

    Args:
        value: The value to parse.

    Returns:
        The number or `None` if the value is missing, a boolean, blank,
        not a number or NaN.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float, Decimal)):
            result = float(value)
        else:
            text = str(value).strip()
            if not text:
                return None
            result = float(text)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(result):
        return None
    return result
