"""
Tests for the terms aggregation compiler.
"""

import pytest

from es_query.core.errors import (
    DuplicateAggregationField,
    InvalidAggregationSpec,
    MissingAggregationField,
    UnknownAggregationOption,
    UnsupportedConditionType,
    UnsupportedOrderValue,
)
from es_query.core.models import AggregationNode, AggregationTerm
from es_query.query.aggregations import Aggregations, build_term, normalize_order


def test_string_spec_builds_single_term():
    assert Aggregations.terms_for("some.field.keyword") == {
        "aggs": {"some.field.keyword": {"terms": {"field": "some.field.keyword"}}}
    }


def test_list_spec_builds_sibling_terms():
    assert Aggregations.terms_for(["some.field.keyword", "some.field.integer"]) == {
        "aggs": {
            "some.field.keyword": {"terms": {"field": "some.field.keyword"}},
            "some.field.integer": {"terms": {"field": "some.field.integer"}},
        }
    }


def test_list_spec_with_mapping_element():
    spec = [{"field": "some.field.keyword", "size": 10_000, "order": "_key"}, "some.field.integer"]

    assert Aggregations.terms_for(spec) == {
        "aggs": {
            "some.field.keyword": {
                "terms": {
                    "field": "some.field.keyword",
                    "size": 10_000,
                    "order": [{"_key": "desc"}],
                }
            },
            "some.field.integer": {"terms": {"field": "some.field.integer"}},
        }
    }


def test_nested_lists_are_flattened():
    spec = ["some.field.keyword", ["some.int", "some.other.int"]]

    assert list(Aggregations.compile(spec)) == ["some.field.keyword", "some.int", "some.other.int"]


def test_duplicate_fields_raise():
    with pytest.raises(DuplicateAggregationField) as exc_info:
        Aggregations.terms_for(["some.field.keyword"] * 2)

    assert str(exc_info.value) == "duplicate field aggregation provided for 'some.field.keyword'"
    assert isinstance(exc_info.value, InvalidAggregationSpec)


def test_duplicate_fields_across_nested_lists_raise():
    with pytest.raises(DuplicateAggregationField):
        Aggregations.compile(["a", ["b", {"field": "a", "size": 1}]])


def test_mapping_spec_without_field_raises():
    with pytest.raises(MissingAggregationField):
        Aggregations.terms_for({"size": 10_000})


def test_mapping_spec_with_unknown_option_raises():
    with pytest.raises(UnknownAggregationOption, match="invalid"):
        Aggregations.terms_for({"field": "some.field.keyword", "invalid": "key"})


def test_mapping_spec_with_options():
    spec = {"field": "some.field.keyword", "size": 10_000, "order": "_key"}

    assert Aggregations.terms_for(spec) == {
        "aggs": {
            "some.field.keyword": {
                "terms": {
                    "field": "some.field.keyword",
                    "size": 10_000,
                    "order": [{"_key": "desc"}],
                }
            }
        }
    }


def test_mapping_spec_with_sub_aggregations():
    spec = {
        "field": "some.field.keyword",
        "aggs": ["some.field.id", {"field": "some.field.name", "size": 5, "aggs": "leaf"}],
    }

    assert Aggregations.terms_for(spec) == {
        "aggs": {
            "some.field.keyword": {
                "terms": {"field": "some.field.keyword"},
                "aggs": {
                    "some.field.id": {"terms": {"field": "some.field.id"}},
                    "some.field.name": {
                        "terms": {"field": "some.field.name", "size": 5},
                        "aggs": {"leaf": {"terms": {"field": "leaf"}}},
                    },
                },
            }
        }
    }


def test_sub_aggregations_are_scoped_per_level():
    """The same field may appear at different nesting levels."""
    nodes = Aggregations.compile({"field": "a", "aggs": {"field": "a"}})

    assert nodes["a"].sub_aggregations["a"].term.field == "a"


def test_partition_options_nest_under_include():
    spec = {"field": "f", "partition": 1, "num_partitions": 10}

    assert Aggregations.terms_for(spec)["aggs"]["f"]["terms"] == {
        "field": "f",
        "include": {"partition": 1, "num_partitions": 10},
    }


def test_one_sided_partition_is_passed_through():
    assert Aggregations.terms_for({"field": "f", "numPartitions": 4})["aggs"]["f"]["terms"] == {
        "field": "f",
        "include": {"num_partitions": 4},
    }


def test_unsupported_spec_type_raises():
    with pytest.raises(UnsupportedConditionType):
        Aggregations.terms_for(1)


def test_compile_returns_nodes():
    nodes = Aggregations.compile({"field": "f", "size": 3})

    assert nodes == {"f": AggregationNode(term=AggregationTerm(field="f", size=3))}


@pytest.mark.parametrize(
    "order, expected",
    [
        (None, None),
        ("f", [{"f": "desc"}]),
        ({"f": "asc"}, [{"f": "asc"}]),
        (["f", {"g": "asc"}], [{"f": "desc"}, {"g": "asc"}]),
        ([["f"], [{"g": "asc"}]], [{"f": "desc"}, {"g": "asc"}]),
        ("", None),
        ([], None),
    ],
)
def test_order_normalization(order, expected):
    assert normalize_order(order) == expected


def test_omitted_order_leaves_no_order_key():
    assert "order" not in build_term(field="f").to_dsl()


@pytest.mark.parametrize("order", [5, 1.5, True, object()])
def test_unsupported_order_value_raises(order):
    with pytest.raises(UnsupportedOrderValue):
        build_term(field="f", order=order)


@pytest.mark.parametrize("field", [None, "", "   "])
def test_blank_field_raises(field):
    with pytest.raises(MissingAggregationField, match="field must be provided"):
        build_term(field=field)


def test_invalid_option_values_raise_invalid_spec():
    with pytest.raises(InvalidAggregationSpec):
        build_term(field="f", size=-1)
    with pytest.raises(InvalidAggregationSpec):
        build_term(field=3)
