"""
ISBN conversion and validation utilities.
Supports ISBN-10 to ISBN-13 conversion and vice versa.
"""

import re

_NON_ISBN_CHARS = re.compile(r"[^0-9X]")


def isbn10_check_digit(first_nine: str) -> str:
    """Check character for the first nine digits of an ISBN-10."""
    total = sum(int(first_nine[i]) * (10 - i) for i in range(9))
    check = (11 - (total % 11)) % 11
    return "X" if check == 10 else str(check)


def isbn13_check_digit(first_twelve: str) -> str:
    total = sum(int(first_twelve[i]) * (1 if i % 2 == 0 else 3) for i in range(12))
    return str((10 - (total % 10)) % 10)


def validate_isbn10(isbn: str) -> bool:
    """Validate ISBN-10 format and checksum."""
    isbn = isbn.replace("-", "").replace(" ", "").upper()
    if len(isbn) != 10:
        return False
    if not isbn[:-1].isdigit() or not (isbn[-1].isdigit() or isbn[-1] == "X"):
        return False
    return isbn[9] == isbn10_check_digit(isbn[:9])


def validate_isbn13(isbn: str) -> bool:
    """Validate ISBN-13 format and checksum."""
    isbn = isbn.replace("-", "").replace(" ", "")
    if len(isbn) != 13 or not isbn.isdigit():
        return False
    return isbn[12] == isbn13_check_digit(isbn[:12])


def isbn10_to_isbn13(isbn10: str) -> str | None:
    """
    Convert ISBN-10 to ISBN-13.
    Returns None if the ISBN-10 is invalid.
    """
    isbn10 = isbn10.replace("-", "").replace(" ", "").upper()

    if not validate_isbn10(isbn10):
        return None

    isbn13_base = "978" + isbn10[:-1]
    return isbn13_base + isbn13_check_digit(isbn13_base)


def isbn13_to_isbn10(isbn13: str) -> str | None:
    """
    Convert ISBN-13 to ISBN-10.

    Only exact 13 digit strings with the 978 prefix can be converted, anything
    else (979 ISBNs, hyphenated input, wrong length) returns None. The ISBN-13
    check digit itself is not verified.
    """
    if len(isbn13) != 13 or not isbn13.isdigit():
        return None
    if not isbn13.startswith("978"):
        return None

    isbn10_base = isbn13[3:12]
    return isbn10_base + isbn10_check_digit(isbn10_base)


def normalize_isbn(isbn: str) -> str:
    """Strip hyphens, spaces and other decoration, keeping digits and X."""
    return _NON_ISBN_CHARS.sub("", isbn.upper())


def is_isbn(value: str) -> bool:
    """Check if value looks like an ISBN (10 or 13 digits)."""
    clean = value.replace("-", "").replace(" ", "").upper()
    if len(clean) == 10:
        return clean[:-1].isdigit() and (clean[-1].isdigit() or clean[-1] == "X")
    elif len(clean) == 13:
        return clean.isdigit() and clean.startswith(("978", "979"))
    return False
