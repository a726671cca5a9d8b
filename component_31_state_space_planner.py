"""
Component 31: State-Space Planner (Robot-Arm Block World)

Facade module providing a single import point for arm planning.

The planner is split into focused modules:
- component_31_planner_core: Generic A* search engine
- component_31_arm_domain: Planning states, arm actions, successor generator
- component_31_goal_evaluator: Truth of goal formulas in a state
- component_31_heuristics: Planning heuristics (Zero, StackPenalty)
- component_31_plan_encoder: State path -> primitive actions
- component_31_arm_planner: Planning driver (ArmPlanner, PlanResult)

Author: BlockArm Development Team
"""

import argparse
import logging
import sys
from typing import List, Optional

from blockarm_config import PlannerConfig, load_config
from blockarm_exceptions import BlockArmException, get_user_friendly_message
from component_15_logging_config import get_logger
from component_29_world_model import load_world, parse_formula

# Domain model
from component_31_arm_domain import (
    ArmAction,
    ArmWorldGraph,
    PlanningState,
    apply_action,
    validate_state,
)

# Planning driver
from component_31_arm_planner import ArmPlanner, PlanResult

# Goal evaluation
from component_31_goal_evaluator import goal_predicate, literal_holds, satisfies

# Heuristics
from component_31_heuristics import (
    Heuristic,
    StackPenaltyHeuristic,
    ZeroHeuristic,
    build_heuristic,
)

# Plan encoding
from component_31_plan_encoder import describe_plan, encode_path, plan_symbols

# Core search engine
from component_31_planner_core import StateSpaceSearch, a_star_search

logger = get_logger(__name__)

__all__ = [
    # Core search
    "StateSpaceSearch",
    "a_star_search",
    # Domain
    "PlanningState",
    "ArmAction",
    "ArmWorldGraph",
    "apply_action",
    "validate_state",
    # Goals
    "literal_holds",
    "satisfies",
    "goal_predicate",
    # Heuristics
    "Heuristic",
    "ZeroHeuristic",
    "StackPenaltyHeuristic",
    "build_heuristic",
    # Encoding
    "encode_path",
    "plan_symbols",
    "describe_plan",
    # Driver
    "ArmPlanner",
    "PlanResult",
    "PlannerConfig",
]


# ============================================================================
# Command-line demo
# ============================================================================


def main(argv: Optional[List[str]] = None) -> int:
    """Example usage: plan goals in a bundled world."""
    parser = argparse.ArgumentParser(description="Plan robot-arm actions for a goal")
    parser.add_argument(
        "goals",
        nargs="*",
        default=["ontop(e,floor) & inside(f,k)"],
        help="Goal formulas, one per interpretation (e.g. 'ontop(a,b) | holding(c)')",
    )
    parser.add_argument("--world", default="small", help="World name or YAML file")
    parser.add_argument("--config", default=None, help="Planner YAML file")
    parser.add_argument(
        "--check",
        default=None,
        help="Check a plan against the first goal instead of planning "
        "(comma-separated symbols or labels, e.g. 'p,r,d')",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        world = load_world(args.world)
        planner = ArmPlanner(load_config(args.config))
        interpretations = [parse_formula(goal) for goal in args.goals]
        if args.check is not None:
            actions = [
                ArmAction.from_symbol(item.strip())
                for item in args.check.split(",")
                if item.strip()
            ]
            valid, error = planner.validate_plan(world, actions, interpretations[0])
        else:
            plans = planner.plan(interpretations, world)
    except BlockArmException as e:
        if args.verbose:
            logger.log_exception(e, "Planning demo failed")
        print(get_user_friendly_message(e, include_details=args.verbose))
        return 1

    if args.check is not None:
        print("Plan is valid" if valid else f"Plan is invalid: {error}")
        return 0 if valid else 1

    for plan in plans:
        print(f"Goal: {args.goals[plan.index]}")
        for i, step in enumerate(describe_plan(plan.actions)):
            print(f"{i + 1}. {step}")
        print(f"Cost: {plan.cost:g}  Symbols: {''.join(plan.symbols) or '-'}\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
