"""
Unit tests for input normalization and pagination helpers.
"""

import pytest

from club_api.api.utils.pagination import build_pagination, calculate_pagination
from club_api.api.utils.validation import (
    check_display_name,
    normalize_email,
    normalize_external_id,
    split_display_name,
)


@pytest.mark.unit
class TestNormalizeEmail:
    """Test email normalization."""

    def test_lowercases_and_strips(self):
        assert normalize_email("  John.Doe@EXAMPLE.COM  ") == "john.doe@example.com"

    def test_gmail_periods_removed(self):
        assert normalize_email("Ada.Lovelace@Gmail.com") == "adalovelace@gmail.com"

    def test_plus_addressing_preserved(self):
        assert normalize_email("ada+events@gmail.com") == "ada+events@gmail.com"

    def test_empty(self):
        assert normalize_email("") == ""


@pytest.mark.unit
class TestNormalizeExternalId:
    """Test student number normalization."""

    def test_strips_and_uppercases(self):
        assert normalize_external_id("  ab12345 ") == "AB12345"


@pytest.mark.unit
class TestSplitDisplayName:
    """Test display name splitting."""

    @pytest.mark.parametrize("name,expected", [
        ("Ada Lovelace", ("Ada", "Lovelace")),
        ("Maria de la Cruz", ("Maria", "de la Cruz")),
        ("Plato", ("Plato", "")),
        ("  Ada   Lovelace ", ("Ada", "Lovelace")),
        ("", ("", "")),
    ])
    def test_split(self, name, expected):
        assert split_display_name(name) == expected

    def test_check_accepts_fitting_name(self):
        assert check_display_name("A" * 50 + " " + "B" * 50) == ("A" * 50, "B" * 50)

    @pytest.mark.parametrize("name", [
        "A" * 51,
        "A" * 60 + " " + "B" * 39,
        "Ada " + "B" * 51,
        "   ",
    ])
    def test_check_rejects_name_that_does_not_fit(self, name):
        with pytest.raises(ValueError):
            check_display_name(name)


@pytest.mark.unit
class TestPagination:
    """Test pagination blocks."""

    def test_calculate_pagination(self):
        assert calculate_pagination(total=100, page=2, page_size=20) == (20, 5)

    def test_middle_page(self):
        assert build_pagination(total=25, page=2, page_size=10) == {
            "current": 2,
            "total": 3,
            "has_next": True,
            "has_prev": True,
        }

    def test_last_page(self):
        block = build_pagination(total=25, page=3, page_size=10)
        assert block["has_next"] is False

    def test_empty(self):
        assert build_pagination(total=0, page=1, page_size=10) == {
            "current": 1,
            "total": 0,
            "has_next": False,
            "has_prev": False,
        }
