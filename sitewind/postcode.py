"""UK postcode normalisation and key derivation.

Every dataset lookup is keyed on the compact form of a postcode
(uppercase, alphanumerics only), e.g. ``"sw1a 1aa"`` -> ``"SW1A1AA"``.
The wind dataset is published per postcode *sector*, which is the
compact key with the trailing ``digit + letter + letter`` unit removed.

All functions here are total: empty or garbage input yields ``""``
(or ``False``), never an exception.
"""

from __future__ import annotations

import re

_NON_ALNUM = re.compile(r"[^A-Z0-9]")
_UNIT_SUFFIX = re.compile(r"\d[A-Z]{2}$")
_OUTWARD = re.compile(r"^(.*?)(\d[A-Z]{2})$")

# Loose full-postcode shape used by the form: A[A]9[A9] 9AA
_FULL_POSTCODE = re.compile(r"^\s*[A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2}\s*$", re.IGNORECASE)


def normalise_postcode(value: object) -> str:
    """Return the compact key: uppercase with everything outside A-Z/0-9 dropped."""
    if value is None:
        return ""
    return _NON_ALNUM.sub("", str(value).upper())


def postcode_sector(value: object) -> str:
    """Return the sector key, e.g. ``"SW1A 1AA"`` -> ``"SW1A"``.

    The last three characters are removed only when the key is longer
    than three characters and they look like an inward unit
    (digit, letter, letter). Otherwise the normalised key is returned.
    """
    key = normalise_postcode(value)
    if len(key) > 3 and _UNIT_SUFFIX.search(key):
        return key[:-3]
    return key


def extract_outward(value: object) -> str:
    """Return the outward code of a postcode (``"DA11 9AU"`` -> ``"DA11"``)."""
    key = normalise_postcode(value)
    if not key:
        return ""
    match = _OUTWARD.match(key)
    if match and match.group(1):
        return match.group(1)
    if len(key) > 3:
        return key[:-3]
    return key


def format_postcode(value: object) -> str:
    """Return the display form with a single space before the inward code."""
    key = normalise_postcode(value)
    if len(key) <= 3:
        return key
    return f"{key[:-3]} {key[-3:]}"


def is_valid_postcode(value: object) -> bool:
    """Check that *value* has the shape of a full UK postcode."""
    if value is None:
        return False
    return bool(_FULL_POSTCODE.match(str(value)))


__all__ = [
    "normalise_postcode",
    "postcode_sector",
    "extract_outward",
    "format_postcode",
    "is_valid_postcode",
]
