"""
Unit tests for listing query construction (no HTTP, no database).
"""

import pytest

from app.crud.job import escape_like
from app.services.job_query import (
    DEFAULT_LIMIT,
    MAX_OFFSET,
    JobQuery,
    build_job_query,
    parse_positive_int,
    parse_sort,
)


class TestParsePositiveInt:

    @pytest.mark.parametrize("value,expected", [
        (None, 7),
        ("", 7),
        ("abc", 7),
        ("0", 7),
        ("-3", 7),
        ("2.5", 7),
        ("4", 4),
        (" 12 ", 12),
    ])
    def test_values(self, value, expected):
        assert parse_positive_int(value, 7) == expected

    def test_above_maximum_returns_default(self):
        assert parse_positive_int("11", 7, maximum=10) == 7
        assert parse_positive_int("10", 7, maximum=10) == 10


class TestParseSort:

    def test_default_is_newest_first(self):
        assert parse_sort(None) == (("createdAt", True),)

    def test_leading_dash_means_descending(self):
        assert parse_sort("-salary") == (("salary", True),)
        assert parse_sort("salary") == (("salary", False),)

    def test_multiple_keys_comma_or_space(self):
        expected = (("salary", True), ("title", False))

        assert parse_sort("-salary,title") == expected
        assert parse_sort("-salary title") == expected

    def test_unknown_fields_dropped(self):
        assert parse_sort("-hashed_password,location") == (("location", False),)

    def test_only_unknown_fields_falls_back(self):
        assert parse_sort("bogus,-") == (("createdAt", True),)


class TestBuildJobQuery:

    def test_defaults(self):
        query = build_job_query()

        assert query == JobQuery()
        assert query.page == 1
        assert query.limit == DEFAULT_LIMIT
        assert query.skip == 0
        assert query.search is None
        assert query.location is None

    def test_skip_is_derived(self):
        query = build_job_query(page="3", limit="5")

        assert query.skip == 10

    def test_skip_never_negative(self):
        assert build_job_query(page="-10", limit="5").skip == 0

    def test_page_offset_fits_in_64_bits(self):
        largest = build_job_query(page=str(MAX_OFFSET // 100 + 1), limit="100")
        too_far = build_job_query(page=str(MAX_OFFSET // 100 + 2), limit="100")

        assert largest.skip <= MAX_OFFSET
        assert too_far.page == 1

    def test_limit_clamped_to_max(self):
        assert build_job_query(limit="500", max_limit=50).limit == 50

    def test_custom_default_limit(self):
        assert build_job_query(default_limit=10).limit == 10

    def test_blank_search_and_location_are_dropped(self):
        query = build_job_query(search="  ", location="")

        assert query.search is None
        assert query.location is None

    def test_search_is_trimmed(self):
        assert build_job_query(search="  developer ").search == "developer"


class TestEscapeLike:

    def test_wildcards_escaped(self):
        assert escape_like("50%_off") == "50\\%\\_off"

    def test_escape_character_escaped(self):
        assert escape_like("a\\b") == "a\\\\b"

    def test_plain_text_unchanged(self):
        assert escape_like("developer") == "developer"
