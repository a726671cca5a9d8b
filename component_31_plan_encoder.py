"""
Component 31: Plan Encoder

Translates the state path returned by the search engine into the sequence
of primitive arm actions that produces it.

Author: BlockArm Development Team
"""

from typing import List, Sequence

from blockarm_exceptions import PlanEncodingError
from common.constants import ALREADY_TRUE_MESSAGE
from component_31_arm_domain import ArmAction, PlanningState


def encode_step(current: PlanningState, following: PlanningState) -> ArmAction:
    """
    Identify the action leading from `current` to `following`.

    Raises:
        PlanEncodingError: If the two states are not one primitive action apart
    """
    if following.arm < current.arm:
        return ArmAction.LEFT
    if following.arm > current.arm:
        return ArmAction.RIGHT
    if following.holding is not None and current.holding is None:
        return ArmAction.PICK
    if following.holding is None and current.holding is not None:
        return ArmAction.DROP

    raise PlanEncodingError(
        "States are not linked by a primitive action",
        context={"from": current.to_string(), "to": following.to_string()},
    )


def encode_path(path: Sequence[PlanningState]) -> List[ArmAction]:
    """Actions between consecutive states of a path (empty for a one-state path)."""
    return [encode_step(path[i], path[i + 1]) for i in range(len(path) - 1)]


def plan_symbols(actions: Sequence[ArmAction]) -> List[str]:
    """Compact one-letter encoding: l, r, p, d."""
    return [action.symbol for action in actions]


def describe_plan(actions: Sequence[ArmAction]) -> List[str]:
    """Action labels, or the already-true message for an empty plan."""
    if not actions:
        return [ALREADY_TRUE_MESSAGE]
    return [action.label for action in actions]
