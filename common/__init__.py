"""
Common constants for the BlockArm planner.

This package provides centralized vocabulary and default configuration
values used throughout the planner modules.
"""

from common.constants import *

__all__ = [
    # World Vocabulary
    "FLOOR",
    "RELATION_HOLDING",
    "SPATIAL_RELATIONS",
    "RELATION_ARITY",
    "ALREADY_TRUE_MESSAGE",
    # Search Defaults
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_MAX_EXPANSIONS",
    "ACTION_COST",
    # Heuristic Tuning
    "HEIGHT_PENALTY",
    "DEFAULT_HEURISTIC",
    "HEURISTIC_NAMES",
    # Cache Configuration
    "ORACLE_CACHE_MAXSIZE",
    # Concurrency
    "DEFAULT_PARALLEL_WORKERS",
]
