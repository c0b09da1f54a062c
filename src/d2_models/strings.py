"""
String helpers for schema names.

Schema identifiers are camelCase (``dataElementGroup``); only the last word
is inflected when deriving a collection name.
"""

from __future__ import annotations

import re

# Irregular plurals that don't follow standard rules
_IRREGULAR_PLURALS = {
    "person": "people",
    "child": "children",
    "datum": "data",
    "medium": "media",
    "criterion": "criteria",
    "index": "indices",
    "matrix": "matrices",
    "status": "statuses",
    "address": "addresses",
    # Words whose plural is the word itself
    "series": "series",
    "metadata": "metadata",
}

_CAMEL_TAIL = re.compile(r"^(.+?)([A-Z][a-z0-9]*)$")


def pluralize(word: str) -> str:
    """
    Convert a singular camelCase identifier to its collection form.

    Examples:
        >>> pluralize("dataElementGroup")
        'dataElementGroups'
        >>> pluralize("category")
        'categories'
        >>> pluralize("categoryOptionCombo")
        'categoryOptionCombos'
        >>> pluralize("attributeValue")
        'attributeValues'
    """
    if not word:
        return word

    camel_match = _CAMEL_TAIL.match(word)
    if camel_match:
        prefix, last_word = camel_match.groups()
        return prefix + _pluralize_word(last_word)

    return _pluralize_word(word)


def _pluralize_word(word: str) -> str:
    lower_word = word.lower()

    if lower_word in _IRREGULAR_PLURALS:
        plural = _IRREGULAR_PLURALS[lower_word]
        if word[0].isupper():
            return plural.capitalize()
        return plural

    if lower_word.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    elif lower_word.endswith("y"):
        # key -> keys, but category -> categories
        if len(word) > 1 and lower_word[-2] in "aeiou":
            return word + "s"
        return word[:-1] + "ies"
    elif lower_word.endswith("fe"):
        return word[:-2] + "ves"
    else:
        return word + "s"


def to_api_endpoint(plural: str | None) -> str | None:
    """
    Convert a schema collection name to its api path.

    Examples:
        >>> to_api_endpoint("dataElements")
        '/dataElements'
        >>> to_api_endpoint(None) is None
        True
    """
    if not plural:
        return None
    return "/" + plural.strip("/")
