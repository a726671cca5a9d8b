"""
Centralized constants for the BlockArm planner.

This module provides a single source of truth for the magic numbers,
vocabulary and default configuration values used throughout the planner.

Organization:
    - World Vocabulary: Relation names and special tokens
    - Search Defaults: Deadlines, expansion budgets and edge costs
    - Heuristic Tuning: Penalties used by the heuristic estimator
    - Cache Configuration: Size limits for memoised oracle answers
    - Concurrency: Worker pool sizing for multi-interpretation planning

Usage:
    from common.constants import FLOOR, DEFAULT_TIMEOUT_SECONDS

Note:
    These constants define default values. PlannerConfig (blockarm_config.py)
    overrides them from config/planner.yaml.
"""

# =============================================================================
# World Vocabulary
# =============================================================================

FLOOR: str = "floor"
"""
Token standing for the floor below every column.

The floor is never stored in a column. A literal ontop(x, floor) holds when
x is the bottom object of its column.
"""

RELATION_HOLDING: str = "holding"

SPATIAL_RELATIONS: frozenset = frozenset(
    {"ontop", "inside", "above", "under", "leftof", "rightof", "beside"}
)
"""
Binary relations evaluated from the (column, row) positions of their arguments.
"""

RELATION_ARITY: dict = {
    RELATION_HOLDING: 1,
    **{relation: 2 for relation in SPATIAL_RELATIONS},
}

ALREADY_TRUE_MESSAGE: str = "That is already true!"
"""
Reported by the planner driver when a goal holds before any action.
"""

# =============================================================================
# Search Defaults
# =============================================================================

DEFAULT_TIMEOUT_SECONDS: float = 10.0
"""
Wall-clock deadline for one planning call.

On expiry the search reports "not found" instead of blocking. This is the
only cancellation mechanism of a planning call.
"""

DEFAULT_MAX_EXPANSIONS = None
"""
Optional expansion budget. None means the deadline alone bounds the search.
"""

ACTION_COST: float = 1.0
"""
Uniform cost of every primitive arm action.
"""

# =============================================================================
# Heuristic Tuning
# =============================================================================

HEIGHT_PENALTY: int = 5
"""
Penalty per object stacked above an object that has to move.

Every object on top must be relocated first (pick up, travel, put down,
travel back), so 5 roughly matches the primitive actions one relocation costs.

Tuning:
    - Lower values: closer to admissible, more expansions
    - Higher values: greedier search, possibly longer plans
"""

DEFAULT_HEURISTIC: str = "stack_penalty"
HEURISTIC_NAMES = frozenset({"zero", "stack_penalty"})

# =============================================================================
# Cache Configuration
# =============================================================================

ORACLE_CACHE_MAXSIZE: int = 1024
"""
Maximum number of memoised placement answers per PlacementOracle.
"""

# =============================================================================
# Concurrency
# =============================================================================

DEFAULT_PARALLEL_WORKERS: int = 1
"""
Number of worker threads used to plan independent interpretations.

1 plans the interpretations sequentially.
"""
