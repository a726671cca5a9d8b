"""
Component 29: Physics Oracle

Physical placement rules of the block world:
- Small objects cannot support large objects
- Balls cannot support anything
- Balls must be in boxes or on the floor, otherwise they roll away
- Boxes cannot contain pyramids, planks or boxes of the same size
- Small boxes cannot be supported by small bricks or pyramids
- Large boxes cannot be supported by large pyramids
- Objects are "inside" boxes, but "ontop" of other objects

The planner never looks at these rules itself. It asks a PlacementOracle
whether the held object may be put down on the top object of a column.

Author: BlockArm Development Team
"""

import threading
from typing import Callable, Dict, List, Optional

from cachetools import LRUCache

from blockarm_exceptions import UnknownObjectError
from common.constants import FLOOR, ORACLE_CACHE_MAXSIZE
from component_15_logging_config import get_logger
from component_29_world_model import FLOOR_DEFINITION, ObjectDefinition

logger = get_logger(__name__)

# ============================================================================
# Rule Table
# ============================================================================


def placement_violations(
    src: ObjectDefinition, dst: ObjectDefinition, relation: str
) -> List[str]:
    """
    List the physical rules broken by putting `src` in relation to `dst`.

    Args:
        src: Object being placed
        dst: Supporting object (FLOOR_DEFINITION for the floor)
        relation: "ontop", "inside" or "above"

    Returns:
        Names of the violated rules; empty when the placement is legal
    """
    violations = []

    if src.size == "large" and dst.size == "small":
        violations.append("small_supports_large")

    supporting = relation in ("ontop", "above")

    if supporting and dst.form == "ball":
        violations.append("ball_supports_object")

    if (
        supporting
        and src.form == "box"
        and dst.form in ("brick", "pyramid")
        and dst.size == "small"
    ):
        violations.append("small_brick_or_pyramid_supports_box")

    if (
        supporting
        and src.form == "box"
        and src.size == "large"
        and dst.form == "pyramid"
        and dst.size == "large"
    ):
        violations.append("large_pyramid_supports_large_box")

    if relation == "ontop" and src.form == "ball" and dst.form not in ("box", FLOOR):
        violations.append("ball_rolls_away")

    if relation == "inside":
        if dst.form != "box":
            violations.append("inside_non_box")
        elif src.form in ("pyramid", "plank", "box") and src.size == dst.size:
            violations.append("box_contains_same_size")

    if relation == "ontop" and dst.form == "box":
        violations.append("ontop_box")

    return violations


def illegal_placement(
    src: ObjectDefinition, dst: ObjectDefinition, relation: str
) -> bool:
    """True if placing `src` in `relation` to `dst` breaks a physical rule."""
    return bool(placement_violations(src, dst, relation))


def placement_relation(dst: ObjectDefinition) -> str:
    """Relation an object ends up in when put down on `dst`."""
    return "inside" if dst.form == "box" else "ontop"


# ============================================================================
# Oracle
# ============================================================================


class PlacementOracle:
    """
    Answers "may object A be put down on object B" for one world.

    Answers depend only on the two object definitions, so they are memoised
    in a bounded LRU cache shared by all identifiers with the same
    definitions.

    Thread Safety:
        The cache is guarded by a lock; one oracle may serve several
        searches at once.
    """

    def __init__(
        self,
        objects: Dict[str, ObjectDefinition],
        cache_size: int = ORACLE_CACHE_MAXSIZE,
        rule: Callable[[ObjectDefinition, ObjectDefinition, str], bool] = illegal_placement,
    ):
        self.objects = objects
        self.rule = rule
        self._cache: LRUCache = LRUCache(maxsize=cache_size)
        self._lock = threading.RLock()
        self.stats = {"queries": 0, "cache_hits": 0}

    def definition(self, object_id: str) -> ObjectDefinition:
        if object_id == FLOOR:
            return FLOOR_DEFINITION
        try:
            return self.objects[object_id]
        except KeyError:
            raise UnknownObjectError(
                "Object not in registry", object_id=object_id
            ) from None

    def can_place(self, src_id: str, dst_id: Optional[str]) -> bool:
        """
        Check whether `src_id` may be put down on `dst_id`.

        Args:
            src_id: Identifier of the held object
            dst_id: Identifier of the top object of the column, or None / "floor"
                    for an empty column

        Returns:
            True if the placement is physically legal
        """
        if dst_id is None or dst_id == FLOOR:
            return True

        src = self.definition(src_id)
        dst = self.definition(dst_id)
        key = (src, dst)

        with self._lock:
            self.stats["queries"] += 1
            cached = self._cache.get(key)
            if cached is not None:
                self.stats["cache_hits"] += 1
                return cached

            allowed = not self.rule(src, dst, placement_relation(dst))
            self._cache[key] = allowed

        if not allowed:
            logger.debug(
                "Placement rejected",
                extra={"src": src_id, "dst": dst_id},
            )
        return allowed
