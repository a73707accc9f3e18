"""Name normalization utilities for sorting and file naming.

This module provides:
- name_sort_key: accent- and case-insensitive ordering key for display names
- sanitize_filename: filesystem-safe file name stem from an event name

Examples:
    >>> sorted(["Zucker", "Äpfel", "apfelmus"], key=name_sort_key)
    ['Äpfel', 'apfelmus', 'Zucker']

    >>> sanitize_filename("Sommerfest / Halle 2")
    'Sommerfest_Halle_2'
"""

import re
import unicodedata


def fold_name(name: str) -> str:
    """Strip accents and case from a name.

    Accented letters are decomposed (NFD) and the combining marks dropped, so
    "Äpfel" folds to "apfel" while non-Latin letters are kept.

    Examples:
        >>> fold_name("Crème Fraîche")
        'creme fraiche'
        >>> fold_name("  Öl ")
        'ol'
    """
    # "é" (U+00E9) becomes "e" + combining acute accent; the accent is dropped
    normalized = unicodedata.normalize("NFD", name or "")
    stripped = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    return " ".join(stripped.casefold().split())


def name_sort_key(name: str) -> str:
    """Ordering key for display names (accent- and case-insensitive)."""
    return fold_name(name)


def sanitize_filename(name: str) -> str:
    """Make a file name stem from free text.

    Whitespace runs become underscores and anything other than word
    characters, hyphens and dots is removed. Umlauts are kept.

    Examples:
        >>> sanitize_filename("Hochzeit Müller")
        'Hochzeit_Müller'
        >>> sanitize_filename("a/b: c")
        'ab_c'
    """
    stem = re.sub(r"\s+", "_", (name or "").strip())
    stem = re.sub(r"[^\w\-.]", "", stem)
    return re.sub(r"_+", "_", stem).strip("_")
