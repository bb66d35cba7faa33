"""Unit tests for APIFilters and query-string parsing."""

import pytest

from jobbee.database.query import ASCENDING, DESCENDING
from jobbee.services.api_filters import APIFilters, parse_query_params


def test_filter_rewrites_operators_below_field(recording_query):
    """price[gte]=50 becomes a range predicate, not a field named gte."""
    params = parse_query_params([("price[gte]", "50")])
    APIFilters(recording_query, params).filter()

    assert recording_query.filter == {"price": {"$gte": "50"}}


def test_filter_combines_operators_and_equality(recording_query):
    params = parse_query_params([
        ("salary[gte]", "50000"),
        ("salary[lt]", "100000"),
        ("jobType", "Permanent"),
    ])
    APIFilters(recording_query, params).filter()

    assert recording_query.filter == {
        "salary": {"$gte": "50000", "$lt": "100000"},
        "jobType": "Permanent",
    }


def test_filter_does_not_rewrite_operator_words_in_values(recording_query):
    APIFilters(recording_query, {"status": "gt", "title": "in"}).filter()

    assert recording_query.filter == {"status": "gt", "title": "in"}


def test_filter_top_level_operator_word_stays_a_field(recording_query):
    APIFilters(recording_query, {"gte": "5"}).filter()

    assert recording_query.filter == {"gte": "5"}


def test_filter_in_splits_comma_separated_values(recording_query):
    params = parse_query_params([("industry[in]", "Banking,Business")])
    APIFilters(recording_query, params).filter()

    assert recording_query.filter == {"industry": {"$in": ["Banking", "Business"]}}


def test_filter_repeated_parameter_becomes_membership(recording_query):
    params = parse_query_params([("jobType", "Permanent"), ("jobType", "Internship")])
    APIFilters(recording_query, params).filter()

    assert recording_query.filter == {"jobType": {"$in": ["Permanent", "Internship"]}}


def test_filter_nested_non_operator_keys_become_dotted_paths(recording_query):
    params = parse_query_params([("location[city]", "Boston"), ("location[zipcode][in]", "02108,02109")])
    APIFilters(recording_query, params).filter()

    assert recording_query.filter == {
        "location.city": "Boston",
        "location.zipcode": {"$in": ["02108", "02109"]},
    }


def test_filter_only_control_keys_applies_nothing(recording_query):
    APIFilters(recording_query, {"sort": "x", "page": "2"}).filter()

    assert recording_query.filter is None
    assert "filter" not in recording_query.calls


def test_filter_strips_every_reserved_key(recording_query):
    params = {"sort": "a", "fields": "b", "q": "c", "limit": "1", "page": "1", "salary": "10"}
    APIFilters(recording_query, params).filter()

    assert recording_query.filter == {"salary": "10"}


def test_builder_does_not_mutate_raw_parameters(recording_query):
    params = {"sort": "salary", "price": {"gte": "5"}}
    snapshot = {"sort": "salary", "price": {"gte": "5"}}
    APIFilters(recording_query, params).filter().sort().limit_fields().search_by_query().pagination()

    assert params == snapshot


def test_sort_default_is_posting_date_descending(recording_query):
    APIFilters(recording_query, {}).filter().sort()

    assert recording_query.sort == [("postingDate", DESCENDING)]


def test_sort_parses_comma_list_with_directions(recording_query):
    APIFilters(recording_query, {"sort": "salary,-postingDate"}).sort()

    assert recording_query.sort == [("salary", ASCENDING), ("postingDate", DESCENDING)]


def test_sort_twice_does_not_accumulate(recording_query):
    api_filters = APIFilters(recording_query, {"sort": "-salary"})
    api_filters.sort()
    first = list(recording_query.sort)
    api_filters.sort()

    assert recording_query.sort == first == [("salary", DESCENDING)]


@pytest.mark.parametrize("sort_by", [",", "-", "+", " , -"])
def test_sort_without_field_names_uses_default(recording_query, sort_by):
    APIFilters(recording_query, {"sort": sort_by}).sort()

    assert recording_query.sort == [("postingDate", DESCENDING)]


def test_sort_skips_empty_entries(recording_query):
    APIFilters(recording_query, {"sort": "-,salary"}).sort()

    assert recording_query.sort == [("salary", ASCENDING)]


def test_limit_fields_includes_requested_fields(recording_query):
    APIFilters(recording_query, {"fields": "title,salary"}).limit_fields()

    assert recording_query.projection == {"include": ["title", "salary"], "exclude": None}


def test_limit_fields_default_hides_version_field(recording_query):
    APIFilters(recording_query, {}).limit_fields()

    assert recording_query.projection == {"include": None, "exclude": ["__v"]}


def test_search_by_query_builds_exact_phrase(recording_query):
    APIFilters(recording_query, {"q": "remote-engineer"}).search_by_query()

    assert recording_query.text == '"remote engineer"'


def test_search_by_query_absent_is_noop(recording_query):
    APIFilters(recording_query, {"title": "x"}).search_by_query()

    assert recording_query.calls == []


@pytest.mark.parametrize(
    "page, limit, expected_skip, expected_limit",
    [
        ("3", "20", 40, 20),
        (None, None, 0, 10),
        ("abc", None, 0, 10),
        ("2", "xyz", 10, 10),
        ("2abc", "5", 5, 5),
        ("-3", "5", 0, 5),
        ("0", "0", 0, 10),
        ("1", "-4", 0, 10),
        ("2", "1000", 100, 100),
    ],
)
def test_pagination(recording_query, page, limit, expected_skip, expected_limit):
    params = {}
    if page is not None:
        params["page"] = page
    if limit is not None:
        params["limit"] = limit
    APIFilters(recording_query, params).pagination()

    assert recording_query.skip == expected_skip
    assert recording_query.limit == expected_limit
    assert recording_query.calls == ["skip", "limit"]


def test_unparseable_page_matches_absent_page(make_query):
    with_bad = APIFilters(make_query(), {"page": "abc", "limit": "7"}).pagination().query
    without = APIFilters(make_query(), {"limit": "7"}).pagination().query

    assert (with_bad.skip, with_bad.limit) == (without.skip, without.limit)


def test_stages_chain_and_return_self(recording_query):
    api_filters = APIFilters(recording_query, {"q": "python", "salary[gt]": "1"})
    assert api_filters.filter() is api_filters
    assert api_filters.sort().limit_fields().search_by_query().pagination() is api_filters
    assert recording_query.calls == ["filter", "sort", "projection", "text", "skip", "limit"]


def test_parse_query_params_nests_and_sanitizes():
    params = parse_query_params([
        ("salary[gte]", "10"),
        ("salary[$where]", "sleep(1000)"),
        ("$where", "1"),
        ("industry[in][]", "Banking"),
        ("q", "python"),
    ])

    assert params == {"salary": {"gte": "10"}, "industry": {"in": "Banking"}, "q": "python"}