"""Unit tests for ISBN conversion and validation."""

import pytest

from bookshelf.internal.sources.isbn_utils import (
    is_isbn,
    isbn10_to_isbn13,
    isbn13_to_isbn10,
    normalize_isbn,
    validate_isbn10,
    validate_isbn13,
)


class TestIsbn13ToIsbn10:
    """Tests for isbn13_to_isbn10."""

    def test_converts_penguin_odyssey(self):
        """The check digit is recomputed with the ISBN-10 weights."""
        assert isbn13_to_isbn10("9780140449266") == "0140449264"

    def test_check_digit_ten_renders_as_x(self):
        assert isbn13_to_isbn10("9780804429573") == "080442957X"

    @pytest.mark.parametrize(
        "isbn13",
        ["9780140449266", "9780804429573", "9781566199094", "9780306406157"],
    )
    def test_result_is_a_valid_isbn10(self, isbn13: str):
        isbn10 = isbn13_to_isbn10(isbn13)
        assert isbn10 is not None
        assert validate_isbn10(isbn10)
        assert isbn10[:9] == isbn13[3:12]

    @pytest.mark.parametrize(
        "value",
        [
            "9791234567896",  # 979 prefix has no ISBN-10 form
            "978014044926",  # too short
            "97801404492660",  # too long
            "978-0140449266",  # hyphens are not stripped
            "978014044926X",
            "",
        ],
    )
    def test_rejects_unconvertible_input(self, value: str):
        assert isbn13_to_isbn10(value) is None

    def test_round_trips_through_isbn10_to_isbn13(self):
        assert isbn10_to_isbn13("0140449264") == "9780140449266"
        assert isbn10_to_isbn13("080442957X") == "9780804429573"


class TestValidation:
    """Tests for the checksum validators."""

    def test_validate_isbn10(self):
        assert validate_isbn10("0140449264")
        assert validate_isbn10("0-8044-2957-X")
        assert not validate_isbn10("0140449265")
        assert not validate_isbn10("014044926")

    def test_validate_isbn13(self):
        assert validate_isbn13("9780140449266")
        assert validate_isbn13("978-0-14-044926-6")
        assert not validate_isbn13("9780140449267")

    def test_isbn10_to_isbn13_rejects_bad_checksum(self):
        assert isbn10_to_isbn13("0140449265") is None


class TestNormalization:
    """Tests for ISBN cleanup and sniffing."""

    def test_normalize_strips_decoration(self):
        assert normalize_isbn("978-0-14-044926-6") == "9780140449266"
        assert normalize_isbn(" 0-8044-2957-x ") == "080442957X"

    def test_is_isbn(self):
        assert is_isbn("9780140449266")
        assert is_isbn("0-8044-2957-X")
        assert not is_isbn("the odyssey")
        assert not is_isbn("1234567890123")
