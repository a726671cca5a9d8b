"""
Component 31: Planning Heuristics

Heuristic functions for guided search in the robot-arm domain:
- ZeroHeuristic: Uniform-cost search (admissible)
- StackPenaltyHeuristic: Penalise objects buried under other objects

Heuristics estimate the cost from a state to the goal, enabling
efficient A* search in StateSpaceSearch. They are pure functions of the
state; the goal formula is fixed when the heuristic is built.

Author: BlockArm Development Team
"""

from typing import Optional

from blockarm_exceptions import InvalidConfigError
from common.constants import FLOOR, HEIGHT_PENALTY, SPATIAL_RELATIONS
from component_29_world_model import Conjunction, DNFFormula, Literal, find_position
from component_31_arm_domain import PlanningState
from component_31_goal_evaluator import literal_holds

# ============================================================================
# Heuristics
# ============================================================================


class Heuristic:
    """Base class for planning heuristics."""

    def estimate(self, state: PlanningState) -> float:
        """Estimate cost from state to goal."""
        raise NotImplementedError

    def __call__(self, state: PlanningState) -> float:
        return self.estimate(state)


class ZeroHeuristic(Heuristic):
    """
    Always zero: turns A* into uniform-cost search.

    Admissible and consistent, so plans are shortest possible.
    """

    def estimate(self, state: PlanningState) -> float:
        return 0.0


class StackPenaltyHeuristic(Heuristic):
    """
    Heuristic based on how deeply goal objects are buried.

    For every goal literal that does not hold yet, each object stacked on
    top of a referenced object has to be moved away first and costs
    `penalty`. The first argument is free when it is already in the arm;
    binary spatial relations add the burial of their second argument.

    Ignores arm travel and the cost of the relocations themselves, so it is
    not guaranteed admissible.
    """

    def __init__(self, formula: DNFFormula, penalty: float = HEIGHT_PENALTY):
        self.formula = formula
        self.penalty = penalty

    def estimate(self, state: PlanningState) -> float:
        """Cheapest conjunction of the formula."""
        if not self.formula:
            return 0.0
        return min(
            self._conjunction_cost(conjunction, state) for conjunction in self.formula
        )

    def _conjunction_cost(self, conjunction: Conjunction, state: PlanningState) -> float:
        return sum(self._literal_cost(literal, state) for literal in conjunction)

    def _literal_cost(self, literal: Literal, state: PlanningState) -> float:
        if literal_holds(literal, state):
            return 0.0

        src = literal.args[0]
        cost = 0.0
        if state.holding != src:
            cost += self._burial_cost(src, state)

        if literal.relation in SPATIAL_RELATIONS:
            cost += self._burial_cost(literal.args[1], state)

        return cost

    def _burial_cost(self, object_id: str, state: PlanningState) -> float:
        """Penalty for every object stacked above `object_id`."""
        if object_id == FLOOR:
            return 0.0
        position = find_position(object_id, state.stacks)
        if position is None:
            return 0.0
        above = len(state.stacks[position.column]) - 1 - position.row
        return above * self.penalty


HEURISTICS = {
    "zero": lambda formula, penalty: ZeroHeuristic(),
    "stack_penalty": lambda formula, penalty: StackPenaltyHeuristic(formula, penalty),
}


def build_heuristic(
    name: str, formula: DNFFormula, penalty: Optional[float] = None
) -> Heuristic:
    """
    Create a heuristic by name.

    Raises:
        InvalidConfigError: If the name is unknown
    """
    factory = HEURISTICS.get(name)
    if factory is None:
        raise InvalidConfigError(
            f"Unknown heuristic '{name}'",
            context={"available": sorted(HEURISTICS)},
        )
    return factory(formula, HEIGHT_PENALTY if penalty is None else penalty)
