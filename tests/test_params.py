"""
Tests for params.py
"""
import pytest

from src.services.datatables.params import RequestParams, normalize_direction


class TestRequestParams:
    """Tests for parsing the raw DataTables request"""

    def test_parses_text_values(self, base_params):
        params = RequestParams.from_query_params(base_params)

        assert params.echo == "5"
        assert params.display_start == 0
        assert params.display_length == 10
        assert params.column_count == 2
        assert params.sorting == []
        assert params.search == ""

    def test_missing_values_fall_back_to_defaults(self):
        params = RequestParams.from_query_params({})

        assert params.echo == ""
        assert params.display_start == 0
        assert params.display_length == 10
        assert params.column_count == 0

    def test_malformed_integers_fall_back_to_defaults(self):
        params = RequestParams.from_query_params(
            {"iDisplayStart": "abc", "iDisplayLength": "", "iColumns": "two"}
        )

        assert params.display_start == 0
        assert params.display_length == 10
        assert params.column_count == 0

    def test_echo_is_kept_verbatim(self):
        params = RequestParams.from_query_params({"sEcho": " 007 "})
        assert params.echo == " 007 "

    def test_sort_instructions(self):
        params = RequestParams.from_query_params({
            "iSortingCols": "2",
            "iSortCol_0": "1",
            "sSortDir_0": "asc",
            "iSortCol_1": "0",
            "sSortDir_1": "desc",
        })

        assert [(s.column, s.direction) for s in params.sorting] == [(1, "ASC"), (0, "DESC")]

    def test_only_literal_true_is_sortable(self):
        params = RequestParams.from_query_params({
            "bSortable_0": "true",
            "bSortable_1": "false",
            "bSortable_2": "True",
            "bSortable_3": "1",
        })

        assert params.is_sortable(0)
        assert not params.is_sortable(1)
        assert not params.is_sortable(2)
        assert not params.is_sortable(3)
        assert not params.is_sortable(9)

    def test_negative_length_means_no_limit(self):
        params = RequestParams.from_query_params({"iDisplayLength": "-1"})
        assert params.limit is None

    def test_limit_matches_display_length(self):
        params = RequestParams.from_query_params({"iDisplayLength": "25"})
        assert params.limit == 25


@pytest.mark.parametrize("direction", ["ASC", "asc", "Asc", " aSc "])
def test_ascending_in_any_case(direction):
    assert normalize_direction(direction) == "ASC"


@pytest.mark.parametrize("direction", ["desc", "DESC", "ascending", "", None, "up"])
def test_anything_else_is_descending(direction):
    assert normalize_direction(direction) == "DESC"
