"""
tests/test_goal_evaluator.py

Unit tests for goal formula evaluation.

Tests cover:
- Vertical relations (ontop, inside, above, under) including the floor
- Horizontal relations (leftof, rightof, beside)
- holding and negative literals
- Disjunction / conjunction semantics of DNF formulas
"""

import pytest

from component_29_world_model import Literal, parse_formula, parse_literal
from component_31_arm_domain import PlanningState
from component_31_goal_evaluator import (
    conjunction_holds,
    goal_predicate,
    literal_holds,
    satisfied_conjunction,
    satisfies,
    unsatisfied_literals,
)


@pytest.fixture
def state():
    """Columns: [a,b] [c] [e]; the arm holds d."""
    return PlanningState(stacks=(("a", "b"), ("c",), ("e",)), holding="d", arm=0)


def holds(text, state):
    return literal_holds(parse_literal(text), state)


# ==================== Vertical Relations ====================


class TestVerticalRelations:
    """Test relations read off the rows of one column."""

    def test_ontop(self, state):
        assert holds("ontop(b,a)", state)
        assert not holds("ontop(a,b)", state)
        assert not holds("ontop(c,a)", state)

    def test_inside_uses_same_geometry(self, state):
        assert holds("inside(b,a)", state)
        assert not holds("inside(a,b)", state)

    def test_ontop_floor_means_bottom_row(self, state):
        assert holds("ontop(a,floor)", state)
        assert holds("ontop(c,floor)", state)
        assert not holds("ontop(b,floor)", state)

    def test_above_and_under(self):
        state = PlanningState(stacks=(("a", "b", "c"),), arm=0)

        assert holds("above(c,a)", state)
        assert holds("under(a,c)", state)
        assert not holds("above(a,c)", state)
        assert not holds("under(c,b)", state)

    def test_above_floor_for_every_placed_object(self, state):
        assert holds("above(b,floor)", state)
        assert holds("above(a,floor)", state)

    def test_other_relations_with_floor_are_false(self, state):
        assert not holds("under(a,floor)", state)
        assert not holds("leftof(a,floor)", state)
        assert not holds("beside(a,floor)", state)


# ==================== Horizontal Relations ====================


class TestHorizontalRelations:
    """Test relations read off the column indices."""

    def test_leftof_and_rightof(self, state):
        assert holds("leftof(a,c)", state)
        assert holds("leftof(b,e)", state)
        assert holds("rightof(e,a)", state)
        assert not holds("rightof(a,c)", state)
        assert not holds("leftof(a,b)", state)

    def test_beside_means_adjacent_columns(self, state):
        assert holds("beside(a,c)", state)
        assert holds("beside(e,c)", state)
        assert not holds("beside(a,e)", state)
        assert not holds("beside(a,b)", state)


# ==================== Holding and Negation ====================


class TestHoldingAndNegation:
    """Test the arm relation and negative literals."""

    def test_holding(self, state):
        assert holds("holding(d)", state)
        assert not holds("holding(a)", state)

    def test_held_object_has_no_position(self, state):
        assert not holds("ontop(d,a)", state)
        assert not holds("above(d,floor)", state)
        assert not holds("leftof(d,e)", state)
        assert not holds("rightof(e,d)", state)

    def test_negation_is_logical_complement(self, state):
        for text in ("ontop(b,a)", "ontop(a,b)", "holding(d)", "ontop(d,a)"):
            literal = parse_literal(text)
            negated = parse_literal("-" + text)
            assert literal_holds(negated, state) != literal_holds(literal, state)

    def test_negative_literal_syntax(self, state):
        assert holds("-ontop(a,b)", state)
        assert not holds("-holding(d)", state)


# ==================== Formula Tests ====================


class TestFormulas:
    """Test DNF semantics."""

    def test_any_conjunction_suffices(self, state):
        formula = parse_formula("ontop(a,b) | holding(d)")

        assert satisfies(state, formula)
        assert satisfied_conjunction(state, formula) == formula[1]

    def test_all_literals_of_a_conjunction_required(self, state):
        formula = parse_formula("ontop(b,a) & holding(c)")

        assert not satisfies(state, formula)
        assert satisfied_conjunction(state, formula) is None
        assert unsatisfied_literals(state, formula[0]) == [Literal("holding", ("c",))]

    def test_empty_conjunction_is_true(self, state):
        assert conjunction_holds([], state)

    def test_goal_predicate(self, state):
        is_goal = goal_predicate(parse_formula("holding(d)"))

        assert is_goal(state)
        assert not is_goal(PlanningState(stacks=(("d",),), arm=0))
