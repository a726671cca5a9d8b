"""
Component 31: Goal Evaluator

Decides whether a planning state satisfies a goal formula in disjunctive
normal form. Spatial relations are read off the (column, row) position of
their arguments; `holding` compares the arm payload.

Author: BlockArm Development Team
"""

from typing import Callable, Dict, List, Optional

from common.constants import FLOOR, RELATION_HOLDING
from component_29_world_model import (
    Conjunction,
    DNFFormula,
    Literal,
    Position,
    find_position,
)
from component_31_arm_domain import PlanningState

_SpatialTest = Callable[[Position, Position], bool]

_SAME_COLUMN_TESTS: Dict[str, _SpatialTest] = {
    "ontop": lambda a, b: a.row == b.row + 1,
    "inside": lambda a, b: a.row == b.row + 1,
    "above": lambda a, b: a.row > b.row,
    "under": lambda a, b: a.row < b.row,
}

_COLUMN_TESTS: Dict[str, _SpatialTest] = {
    "leftof": lambda a, b: a.column < b.column,
    "rightof": lambda a, b: a.column > b.column,
    "beside": lambda a, b: abs(a.column - b.column) == 1,
}


def _holds_positively(literal: Literal, state: PlanningState) -> bool:
    relation = literal.relation

    if relation == RELATION_HOLDING:
        return state.holding == literal.args[0]

    src, dst = literal.args
    src_pos = find_position(src, state.stacks)
    if src_pos is None:
        return False

    if dst == FLOOR:
        # The floor sits at row -1 under every column
        if relation in ("ontop", "inside"):
            return src_pos.row == 0
        return relation == "above"

    dst_pos = find_position(dst, state.stacks)
    if dst_pos is None:
        return False

    if relation in _SAME_COLUMN_TESTS:
        return src_pos.column == dst_pos.column and _SAME_COLUMN_TESTS[relation](
            src_pos, dst_pos
        )
    return _COLUMN_TESTS[relation](src_pos, dst_pos)


def literal_holds(literal: Literal, state: PlanningState) -> bool:
    """
    Truth of a single literal in a state.

    A spatial literal whose first argument is not placed in a column (e.g.
    the held object) is false. Negative literals are the negation of their
    positive form.
    """
    value = _holds_positively(literal, state)
    return value if literal.polarity else not value


def conjunction_holds(conjunction: Conjunction, state: PlanningState) -> bool:
    return all(literal_holds(literal, state) for literal in conjunction)


def satisfies(state: PlanningState, formula: DNFFormula) -> bool:
    """True iff some conjunction of `formula` has every literal true in `state`."""
    return any(conjunction_holds(conjunction, state) for conjunction in formula)


def satisfied_conjunction(
    state: PlanningState, formula: DNFFormula
) -> Optional[Conjunction]:
    """First conjunction of `formula` that holds in `state`, if any."""
    for conjunction in formula:
        if conjunction_holds(conjunction, state):
            return conjunction
    return None


def unsatisfied_literals(
    state: PlanningState, conjunction: Conjunction
) -> List[Literal]:
    """Literals of a conjunction that are false in `state`."""
    return [literal for literal in conjunction if not literal_holds(literal, state)]


def goal_predicate(formula: DNFFormula) -> Callable[[PlanningState], bool]:
    """Goal test for the search engine."""

    def is_goal(state: PlanningState) -> bool:
        return satisfies(state, formula)

    return is_goal
