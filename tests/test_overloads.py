import pytest

from pliable.introspection import describe
from pliable.nodes import SuppliedArguments, node_from_mapping
from pliable.overloads import (
    Outcome,
    make_candidate,
    rank_constructors,
    select_constructor,
)
from sample_types import Colour, Drawing, Endpoint, Pair, Shape, Triple


def supplied(data):
    return SuppliedArguments.from_node(node_from_mapping(data))


def selected(target, data):
    candidate = select_constructor(describe(target), supplied(data))
    return None if candidate is None else candidate.constructor.index


def test_candidate_records_parameter_outcomes():
    constructor = describe(Endpoint).constructors[0]

    candidate = make_candidate(constructor, supplied({"A": "1", "c": "x"}))

    assert [b.outcome for b in candidate.bindings] == [
        Outcome.MATCHED,
        Outcome.UNBINDABLE,
        Outcome.MATCHED,
        Outcome.DEFAULTED,
    ]
    assert candidate.bindings[0].value.value == "1"
    assert candidate.bindings[3].value == "d"
    assert not candidate.is_viable


def test_more_matched_parameters_win():
    assert selected(Triple, {"a": "1", "b": "2", "c": "3", "d": "4"}) == 0


def test_string_parameters_break_ties():
    assert selected(Triple, {"a": "1", "b": "2", "c": "3"}) == 2


def test_unbindable_constructors_are_never_selected():
    assert selected(Endpoint, {"a": "1", "c": "x"}) == 1
    assert selected(Colour, {"r": "1"}) is None


def test_parameterless_constructor_wins_without_arguments():
    assert selected(Pair, {}) == 0


def test_parameterless_constructor_is_not_ranked_with_arguments():
    ranked = rank_constructors(describe(Pair), supplied({"a": "1"}))

    assert [c.constructor.index for c in ranked] == [1]


def test_defaulted_constructor_selected_when_nothing_matches():
    assert selected(Drawing, {"unknown": "x"}) == 0


def test_ranking_lists_every_viable_candidate_in_order():
    ranked = rank_constructors(describe(Triple), supplied({"a": "1", "b": "2", "c": "3"}))

    assert [c.constructor.index for c in ranked] == [2, 1, 0]
    assert [c.matched_count for c in ranked] == [3, 3, 3]
    assert [c.string_matched_count for c in ranked] == [3, 2, 0]


@pytest.mark.parametrize("target", [Shape, list])
def test_no_candidates_for_abstract_or_parameterless_types(target):
    assert rank_constructors(describe(target), supplied({"x": "1"})) == []
