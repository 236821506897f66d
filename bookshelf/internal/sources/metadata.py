"""
Normalization helpers shared by the catalog clients.
"""

import re

from bookshelf.internal.env_settings import SourceSettings

UNKNOWN_LANGUAGE = "Unknown"

# ISO 639-1 and 639-2 (bibliographic and terminology) codes for the languages
# the library tracks
_LANGUAGE_CODES: dict[str, str] = {
    "en": "English",
    "eng": "English",
    "nl": "Dutch",
    "nld": "Dutch",
    "dut": "Dutch",
    "de": "German",
    "deu": "German",
    "ger": "German",
    "fr": "French",
    "fra": "French",
    "fre": "French",
    "es": "Spanish",
    "spa": "Spanish",
    "it": "Italian",
    "ita": "Italian",
}
LANGUAGES = frozenset(_LANGUAGE_CODES.values())

_YEAR = re.compile(r"\b(\d{4})\b")


def normalize_language(value: str | list[str] | None) -> str:
    """
    Map a provider language code (or a list of them) to a readable name.

    Open Library returns lists like ["/languages/eng"], Google Books and
    ISBNdb return "en" or "en_US".
    """
    if not value:
        return UNKNOWN_LANGUAGE
    if isinstance(value, list):
        for code in value:
            name = normalize_language(code)
            if name != UNKNOWN_LANGUAGE:
                return name
        return UNKNOWN_LANGUAGE

    code = value.strip().rsplit("/", 1)[-1].lower()
    if code.title() in LANGUAGES:
        return code.title()
    code = code.replace("-", "_").split("_", 1)[0]
    return _LANGUAGE_CODES.get(code, UNKNOWN_LANGUAGE)


def extract_year(value: str | int | None) -> str | None:
    """Leading year of a full date ("2003-02-04" -> "2003")."""
    if value is None:
        return None
    match = _YEAR.search(str(value))
    if not match:
        return None
    return match.group(1)


def join_authors(authors: list[str] | None) -> str:
    names = [a.strip() for a in authors or [] if a and a.strip()]
    if not names:
        return "Unknown Author"
    return ", ".join(names)


def build_external_url(
    isbn: str | None,
    permalink: str | None,
    settings: SourceSettings,
) -> str | None:
    """
    Pick the single best outbound link for a book.

    With an ISBN the configured marketplace and library catalog templates are
    tried in priority order, without one the provider's own page is used.
    """
    if isbn:
        for template in (
            settings.local_marketplace_url,
            settings.general_marketplace_url,
            settings.library_catalog_url,
        ):
            if template:
                return template.format(isbn=isbn)
    return permalink or None
