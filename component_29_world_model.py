"""
Component 29: World Model

Data model of the robot-arm block world as seen by the planner:
- ObjectDefinition: read-only registry entry (form, size, color)
- WorldState: column stacks, held object, arm column and object registry
- Literal / DNFFormula: goal formulas in disjunctive normal form
- Position: (column, row) location of an object in the stacks

Also provides the textual literal syntax used by the demo and the tests
(`ontop(a,b) & holding(c) | -leftof(a,b)`) and loading of world
definitions from YAML files.

Author: BlockArm Development Team
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import yaml

from blockarm_exceptions import InvalidLiteralError, WorldDefinitionError
from common.constants import FLOOR, RELATION_ARITY
from component_15_logging_config import get_logger

logger = get_logger(__name__)

WORLDS_DIR: Path = Path(__file__).resolve().parent / "worlds"

# ============================================================================
# Objects and World State
# ============================================================================


@dataclass(frozen=True)
class ObjectDefinition:
    """
    Physical description of an object in the world.

    Attributes:
        form: brick, plank, ball, pyramid, box or table
        size: small or large
        color: free-form colour name
    """

    form: str
    size: str
    color: Optional[str] = None


FLOOR_DEFINITION = ObjectDefinition(form=FLOOR, size="large")


@dataclass
class WorldState:
    """
    Snapshot of the world handed to the planner.

    Attributes:
        stacks: Columns of object identifiers, bottom-to-top
        holding: Identifier of the object in the arm, or None
        arm: Column index of the arm
        objects: Object registry (identifier -> definition)
    """

    stacks: List[List[str]]
    holding: Optional[str] = None
    arm: int = 0
    objects: Dict[str, ObjectDefinition] = field(default_factory=dict)

    @property
    def columns(self) -> int:
        return len(self.stacks)

    def object_ids(self) -> List[str]:
        """All identifiers present in the world, in column order, held object last."""
        ids = [obj for stack in self.stacks for obj in stack]
        if self.holding is not None:
            ids.append(self.holding)
        return ids


# ============================================================================
# Positions
# ============================================================================


@dataclass(frozen=True)
class Position:
    """Column and row of an object; row 0 rests on the floor."""

    column: int
    row: int


def find_position(
    object_id: str, stacks: Sequence[Sequence[str]]
) -> Optional[Position]:
    """
    Locate an object in the stacks.

    Returns:
        Position of the object, or None when the object is not placed in a
        column (held by the arm, the floor token, or unknown).
    """
    for column, stack in enumerate(stacks):
        for row, obj in enumerate(stack):
            if obj == object_id:
                return Position(column, row)
    return None


# ============================================================================
# Literals and Formulas
# ============================================================================


@dataclass(frozen=True)
class Literal:
    """
    A signed relation over object identifiers.

    Example: Literal("ontop", ("a", "floor")) asks for a to stand on the floor;
    Literal("ontop", ("a", "b"), polarity=False) asks for a NOT to be on b.
    """

    relation: str
    args: Tuple[str, ...]
    polarity: bool = True

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

        expected = RELATION_ARITY.get(self.relation)
        if expected is None:
            raise InvalidLiteralError(
                f"Unknown relation '{self.relation}'", literal=stringify_literal(self)
            )
        if len(self.args) != expected:
            raise InvalidLiteralError(
                f"Relation '{self.relation}' takes {expected} argument(s), got {len(self.args)}",
                literal=stringify_literal(self),
            )

    def __str__(self):
        return stringify_literal(self)


Conjunction = List[Literal]
DNFFormula = List[Conjunction]


def stringify_literal(literal: Literal) -> str:
    """Render a literal as `relation(arg1,arg2)`, prefixed by '-' when negative."""
    return (
        ("" if literal.polarity else "-")
        + literal.relation
        + "("
        + ",".join(literal.args)
        + ")"
    )


def stringify_formula(formula: DNFFormula) -> str:
    """Render a DNF formula as `l1 & l2 | l3`."""
    return " | ".join(
        " & ".join(stringify_literal(lit) for lit in conjunction)
        for conjunction in formula
    )


_LITERAL_PATTERN = re.compile(r"^\s*(-?)\s*([a-z]+)\s*\(([^()]*)\)\s*$")


def parse_literal(text: str) -> Literal:
    """
    Parse the textual form produced by stringify_literal.

    Raises:
        InvalidLiteralError: If the text is not a well-formed literal
    """
    match = _LITERAL_PATTERN.match(text)
    if not match:
        raise InvalidLiteralError("Cannot parse literal", literal=text)

    negation, relation, raw_args = match.groups()
    args = tuple(arg.strip() for arg in raw_args.split(",") if arg.strip())
    return Literal(relation=relation, args=args, polarity=not negation)


def parse_formula(text: str) -> DNFFormula:
    """Parse `l1 & l2 | l3` into a DNF formula."""
    if not text.strip():
        raise InvalidLiteralError("Empty goal formula", literal=text)
    return [
        [parse_literal(part) for part in disjunct.split("&")]
        for disjunct in text.split("|")
    ]


def formula_objects(formula: DNFFormula) -> List[str]:
    """Object identifiers mentioned by a formula (floor excluded), first-seen order."""
    seen: Dict[str, None] = {}
    for conjunction in formula:
        for literal in conjunction:
            for arg in literal.args:
                if arg != FLOOR:
                    seen.setdefault(arg, None)
    return list(seen)


# ============================================================================
# World Definitions
# ============================================================================


def world_from_dict(data: Dict[str, Any], source: Optional[str] = None) -> WorldState:
    """
    Build a WorldState from a plain dict (as loaded from YAML).

    Expected keys: stacks, objects; optional: holding, arm.

    Raises:
        WorldDefinitionError: If the definition is malformed or inconsistent
    """
    if not isinstance(data, dict):
        raise WorldDefinitionError("World definition must be a mapping", source=source)

    for key in ("stacks", "objects"):
        if key not in data:
            raise WorldDefinitionError(f"Missing key '{key}'", source=source)

    raw_stacks = data["stacks"]
    if not isinstance(raw_stacks, list) or not raw_stacks:
        raise WorldDefinitionError(
            "'stacks' must be a non-empty list of columns", source=source
        )

    try:
        objects = {
            str(obj_id): ObjectDefinition(
                form=str(entry["form"]),
                size=str(entry["size"]),
                color=entry.get("color"),
            )
            for obj_id, entry in data["objects"].items()
        }
    except (AttributeError, KeyError, TypeError) as e:
        raise WorldDefinitionError(
            "Malformed object registry", source=source, original_exception=e
        ) from e

    stacks = [[str(obj) for obj in (column or [])] for column in raw_stacks]
    holding = data.get("holding")
    holding = str(holding) if holding is not None else None

    try:
        arm = int(data.get("arm", 0))
    except (TypeError, ValueError) as e:
        raise WorldDefinitionError(
            "Arm must be an integer", source=source, original_exception=e
        ) from e

    world = WorldState(stacks=stacks, holding=holding, arm=arm, objects=objects)
    _check_world(world, source)
    return world


def _check_world(world: WorldState, source: Optional[str]) -> None:
    if not 0 <= world.arm < world.columns:
        raise WorldDefinitionError(
            f"Arm column {world.arm} outside of 0..{world.columns - 1}", source=source
        )

    ids = world.object_ids()
    duplicates = sorted({obj for obj in ids if ids.count(obj) > 1})
    if duplicates:
        raise WorldDefinitionError(
            f"Objects placed more than once: {duplicates}", source=source
        )

    undefined = [obj for obj in ids if obj not in world.objects]
    if undefined:
        raise WorldDefinitionError(f"Undefined objects: {undefined}", source=source)

    if FLOOR in world.objects:
        raise WorldDefinitionError(
            f"'{FLOOR}' is reserved and cannot be an object", source=source
        )


def load_world(path: Union[str, Path]) -> WorldState:
    """
    Load a world definition from a YAML file.

    A bare name (e.g. "small") is resolved against the bundled worlds/
    directory.

    Raises:
        WorldDefinitionError: If the file is missing, not YAML, or malformed
    """
    world_path = Path(path)
    if not world_path.exists() and not world_path.suffix:
        world_path = WORLDS_DIR / f"{path}.yaml"

    if not world_path.exists():
        raise WorldDefinitionError("World file not found", source=str(world_path))

    try:
        with open(world_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise WorldDefinitionError(
            "World file is not valid YAML",
            source=str(world_path),
            original_exception=e,
        ) from e

    world = world_from_dict(data, source=str(world_path))
    logger.info(
        "World loaded",
        extra={
            "source": str(world_path),
            "columns": world.columns,
            "objects": len(world.objects),
        },
    )
    return world
