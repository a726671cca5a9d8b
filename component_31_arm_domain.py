"""
Component 31: Robot-Arm Domain

State and action model of the robot-arm block world:
- PlanningState: immutable value snapshot (stacks, held object, arm column)
- ArmAction: the four primitive actions (move left/right, pick up, put down)
- ArmWorldGraph: successor generator feeding the A* engine
- apply_action / validate_state: single-step transitions and invariant checks

Successors share every column they do not touch with their parent state;
only the column under the arm is rebuilt by pick up / put down.

Author: BlockArm Development Team
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from blockarm_exceptions import InvalidActionError, InvalidStateError
from common.constants import ACTION_COST
from component_15_logging_config import get_logger
from component_29_physics_oracle import PlacementOracle
from component_29_world_model import WorldState
from infrastructure.interfaces import Edge, Graph

logger = get_logger(__name__)

# ============================================================================
# State Representation
# ============================================================================


@dataclass(frozen=True)
class PlanningState:
    """
    World state as a search node.

    Two states are equal when their stacks, held object and arm column are
    equal, so they can key the visited table directly.

    Attributes:
        stacks: Columns of object identifiers, bottom-to-top
        holding: Identifier of the object in the arm, or None
        arm: Column index of the arm
    """

    stacks: Tuple[Tuple[str, ...], ...]
    holding: Optional[str] = None
    arm: int = 0

    @classmethod
    def from_world(cls, world: WorldState) -> "PlanningState":
        return cls(
            stacks=tuple(tuple(column) for column in world.stacks),
            holding=world.holding,
            arm=world.arm,
        )

    @property
    def columns(self) -> int:
        return len(self.stacks)

    def top(self, column: int) -> Optional[str]:
        """Top object of a column, or None for an empty column."""
        stack = self.stacks[column]
        return stack[-1] if stack else None

    def object_ids(self) -> List[str]:
        ids = [obj for stack in self.stacks for obj in stack]
        if self.holding is not None:
            ids.append(self.holding)
        return ids

    def with_column(
        self, column: int, stack: Tuple[str, ...], holding: Optional[str]
    ) -> "PlanningState":
        """Copy of this state with one column replaced and a new held object."""
        stacks = self.stacks[:column] + (stack,) + self.stacks[column + 1 :]
        return PlanningState(stacks=stacks, holding=holding, arm=self.arm)

    def with_arm(self, arm: int) -> "PlanningState":
        return PlanningState(stacks=self.stacks, holding=self.holding, arm=arm)

    def to_string(self) -> str:
        """Human-readable state description."""
        columns = " ".join("[" + ",".join(stack) + "]" for stack in self.stacks)
        return f"{columns} arm={self.arm} holding={self.holding or '-'}"


# ============================================================================
# Action Model
# ============================================================================


_LABEL_ALIASES = {
    "move arm left": "move left",
    "move arm right": "move right",
}


class ArmAction(Enum):
    """
    Primitive arm actions: (symbol, label).

    Plans are rendered with the short labels ("move left", "move right").
    from_symbol also accepts the long forms "move arm left" and
    "move arm right".
    """

    LEFT = ("l", "move left")
    RIGHT = ("r", "move right")
    PICK = ("p", "pick up")
    DROP = ("d", "put down")

    def __init__(self, symbol: str, label: str):
        self.symbol = symbol
        self.label = label

    @classmethod
    def from_symbol(cls, symbol: str) -> "ArmAction":
        symbol = _LABEL_ALIASES.get(symbol, symbol)
        for action in cls:
            if action.symbol == symbol or action.label == symbol:
                return action
        raise InvalidActionError("Unknown action symbol", action=symbol)

    def __str__(self):
        return self.label


def apply_action(
    state: PlanningState,
    action: ArmAction,
    oracle: Optional[PlacementOracle] = None,
) -> PlanningState:
    """
    Apply one primitive action to a state.

    Args:
        state: Current state (never modified)
        action: Action to apply
        oracle: Placement oracle consulted by put down; None skips the
                physical check

    Returns:
        The successor state

    Raises:
        InvalidActionError: If the action is not applicable in `state`
    """
    if action is ArmAction.LEFT:
        if state.arm <= 0:
            raise InvalidActionError(
                "Arm is already at the leftmost column", action=action.label
            )
        return state.with_arm(state.arm - 1)

    if action is ArmAction.RIGHT:
        if state.arm >= state.columns - 1:
            raise InvalidActionError(
                "Arm is already at the rightmost column", action=action.label
            )
        return state.with_arm(state.arm + 1)

    column = state.stacks[state.arm]

    if action is ArmAction.PICK:
        if state.holding is not None:
            raise InvalidActionError(
                "Arm is already holding an object", action=action.label
            )
        if not column:
            raise InvalidActionError(
                "Nothing to pick up in this column", action=action.label
            )
        return state.with_column(state.arm, column[:-1], column[-1])

    if state.holding is None:
        raise InvalidActionError("Arm is not holding anything", action=action.label)
    if oracle is not None and not oracle.can_place(state.holding, state.top(state.arm)):
        raise InvalidActionError(
            f"{state.holding} cannot be put down on {state.top(state.arm)}",
            action=action.label,
        )
    return state.with_column(state.arm, column + (state.holding,), None)


def validate_state(state: PlanningState, expected_objects: Iterable[str]) -> None:
    """
    Check the world invariants of a state.

    Every expected object must appear exactly once, either in one column or
    in the arm, and the arm must point at an existing column.

    Raises:
        InvalidStateError: If an invariant is violated
    """
    if not 0 <= state.arm < state.columns:
        raise InvalidStateError(
            f"Arm column {state.arm} outside of 0..{state.columns - 1}",
            context={"state": state.to_string()},
        )

    ids = state.object_ids()
    expected = set(expected_objects)
    duplicates = sorted({obj for obj in ids if ids.count(obj) > 1})
    missing = sorted(expected - set(ids))
    unknown = sorted(set(ids) - expected)

    if duplicates or missing or unknown:
        raise InvalidStateError(
            "Object conservation violated",
            context={
                "duplicates": duplicates,
                "missing": missing,
                "unknown": unknown,
                "state": state.to_string(),
            },
        )


# ============================================================================
# Successor Generator
# ============================================================================


class ArmWorldGraph(Graph[PlanningState]):
    """
    Implicit graph of arm states.

    Each state has at most four outgoing edges of cost 1, one per applicable
    primitive action. Put down only produces an edge when the column is
    empty or the oracle accepts the placement.
    """

    def __init__(
        self,
        oracle: PlacementOracle,
        expected_objects: Optional[Iterable[str]] = None,
        strict: bool = False,
    ):
        """
        Initialize the successor generator.

        Args:
            oracle: Placement oracle for put down
            expected_objects: Objects every state must contain (strict mode)
            strict: Validate every generated successor
        """
        self.oracle = oracle
        self.expected_objects = (
            frozenset(expected_objects) if expected_objects is not None else None
        )
        self.strict = strict

    def successors(self, state: PlanningState) -> List[Tuple[ArmAction, PlanningState]]:
        """Applicable actions and the states they lead to."""
        result = []

        if state.arm > 0:
            result.append((ArmAction.LEFT, state.with_arm(state.arm - 1)))

        if state.arm < state.columns - 1:
            result.append((ArmAction.RIGHT, state.with_arm(state.arm + 1)))

        column = state.stacks[state.arm]

        if state.holding is None:
            if column:
                result.append(
                    (
                        ArmAction.PICK,
                        state.with_column(state.arm, column[:-1], column[-1]),
                    )
                )
        elif self.oracle.can_place(state.holding, state.top(state.arm)):
            result.append(
                (
                    ArmAction.DROP,
                    state.with_column(state.arm, column + (state.holding,), None),
                )
            )

        if self.strict and self.expected_objects is not None:
            for _, successor in result:
                validate_state(successor, self.expected_objects)

        return result

    def outgoing_edges(self, state: PlanningState) -> List[Edge[PlanningState]]:
        return [
            Edge(source=state, target=successor, cost=ACTION_COST)
            for _, successor in self.successors(state)
        ]
