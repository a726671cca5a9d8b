"""
Component 31: Arm Planner

Top-level planning driver for the robot-arm block world:
- plan_formula: plan one goal formula against a world
- plan: plan every candidate interpretation independently and collect
  the successes
- validate_plan / simulate_plan / diagnose_failure: replay a plan

Each planning call builds its own oracle, successor generator, heuristic
and search engine, so calls share no mutable state and may run on
separate worker threads.

Author: BlockArm Development Team
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from blockarm_config import PlannerConfig
from blockarm_exceptions import (
    BlockArmException,
    ConfigurationException,
    InvalidActionError,
    InvalidStateError,
    NoPlanFoundError,
    PlanningFailedError,
    UnknownObjectError,
)
from component_15_logging_config import (
    PerformanceLogger,
    get_logger,
    log_component_end,
    log_component_start,
)
from component_29_physics_oracle import PlacementOracle
from component_29_world_model import (
    Conjunction,
    DNFFormula,
    ObjectDefinition,
    WorldState,
    formula_objects,
    stringify_formula,
)
from component_31_arm_domain import (
    ArmAction,
    ArmWorldGraph,
    PlanningState,
    apply_action,
    validate_state,
)
from component_31_goal_evaluator import (
    goal_predicate,
    satisfied_conjunction,
    satisfies,
    unsatisfied_literals,
)
from component_31_heuristics import build_heuristic
from component_31_plan_encoder import describe_plan, encode_path, plan_symbols
from component_31_planner_core import StateSpaceSearch

logger = get_logger(__name__)

OracleFactory = Callable[[Dict[str, ObjectDefinition]], PlacementOracle]


@dataclass
class PlanResult:
    """
    A complete plan for one goal formula.

    Attributes:
        formula: Goal formula the plan achieves
        actions: Primitive actions, in execution order
        cost: Total action cost
        path: States visited by the plan, initial state first
        stats: Search statistics
        index: Position of the formula among the planned interpretations
        achieved: Conjunction of the formula that holds in the final state
    """

    formula: DNFFormula
    actions: List[ArmAction]
    cost: float
    path: List[PlanningState] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)
    index: int = 0
    achieved: Conjunction = field(default_factory=list)

    @property
    def already_true(self) -> bool:
        return not self.actions

    @property
    def labels(self) -> List[str]:
        return [action.label for action in self.actions]

    @property
    def symbols(self) -> List[str]:
        return plan_symbols(self.actions)

    def __str__(self):
        return ", ".join(describe_plan(self.actions))


class ArmPlanner:
    """
    Plans primitive arm actions that make a goal formula true.

    Capabilities:
    - A* search with a configurable heuristic and deadline
    - Independent planning of several interpretations (optionally parallel)
    - Plan validation, simulation and failure diagnosis
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        oracle_factory: Optional[OracleFactory] = None,
    ):
        """
        Initialize planner.

        Args:
            config: Planner settings (default: PlannerConfig())
            oracle_factory: Builds the placement oracle for a world's object
                            registry (default: PlacementOracle)
        """
        self.config = config or PlannerConfig()
        self.oracle_factory = oracle_factory or self._default_oracle

    def _default_oracle(self, objects: Dict[str, ObjectDefinition]) -> PlacementOracle:
        return PlacementOracle(objects, cache_size=self.config.oracle_cache_size)

    # ========================================================================
    # Planning
    # ========================================================================

    def plan_formula(
        self, formula: DNFFormula, world: WorldState, index: int = 0
    ) -> PlanResult:
        """
        Find a plan that makes `formula` true in `world`.

        Args:
            formula: Goal in disjunctive normal form
            world: Current world
            index: Interpretation index recorded on the result

        Returns:
            PlanResult (empty action list if the goal already holds)

        Raises:
            NoPlanFoundError: Search exhausted, deadline elapsed or budget used up
            UnknownObjectError: The formula mentions an object not in the registry
            InvalidStateError: The world violates the state invariants
        """
        formula_text = stringify_formula(formula)

        for object_id in formula_objects(formula):
            if object_id not in world.objects:
                raise UnknownObjectError(
                    "Goal mentions an unknown object",
                    object_id=object_id,
                    context={"formula": formula_text},
                )

        start = PlanningState.from_world(world)
        expected_objects = world.object_ids()
        validate_state(start, expected_objects)

        graph = ArmWorldGraph(
            self.oracle_factory(world.objects),
            expected_objects=expected_objects,
            strict=self.config.strict_state_checks,
        )
        heuristic = build_heuristic(
            self.config.heuristic, formula, self.config.height_penalty
        )
        engine = StateSpaceSearch(max_expansions=self.config.max_expansions)

        logger.info(
            "Planning goal",
            extra={"formula": formula_text, "state": start.to_string()},
        )

        with PerformanceLogger(logger.logger, "Planning", formula=formula_text):
            result = engine.search(
                graph,
                start,
                goal_predicate(formula),
                heuristic,
                timeout=self.config.timeout_seconds,
            )

        if result is None:
            raise NoPlanFoundError(
                f"No plan found ({engine.termination})",
                formula=formula_text,
                reason=engine.termination,
                context={
                    "expansions": engine.stats["expansions"],
                    "generated": engine.stats["generated"],
                },
            )

        actions = encode_path(result.path)
        plan = PlanResult(
            formula=formula,
            actions=actions,
            cost=result.cost,
            path=result.path,
            stats=result.stats,
            index=index,
            achieved=satisfied_conjunction(result.goal, formula) or [],
        )
        logger.info(
            f"Plan for {formula_text}: {plan}",
            extra={
                "cost": plan.cost,
                "expansions": result.stats["expansions"],
                "achieved": " & ".join(str(literal) for literal in plan.achieved),
            },
        )
        return plan

    def plan(
        self, interpretations: Sequence[DNFFormula], world: WorldState
    ) -> List[PlanResult]:
        """
        Plan every interpretation independently.

        A failure on one interpretation never stops the others. Results come
        back in input order.

        Args:
            interpretations: Candidate goal formulas
            world: Current world

        Returns:
            Plans of every interpretation that could be achieved

        Raises:
            PlanningFailedError: If every interpretation failed
            InvalidStateError: If the world itself is inconsistent
        """
        if not interpretations:
            raise PlanningFailedError("No interpretations to plan", errors=[])

        outcomes: Dict[int, Union[PlanResult, BlockArmException]] = {}
        workers = min(self.config.parallel_workers, len(interpretations))
        log_component_start(
            logger, "ArmPlanner.plan", interpretations=len(interpretations)
        )

        if workers > 1:
            logger.debug(
                f"Planning {len(interpretations)} interpretations on {workers} workers"
            )
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {
                    executor.submit(self._plan_candidate, formula, world, i): i
                    for i, formula in enumerate(interpretations)
                }
                for future in as_completed(futures):
                    outcomes[futures[future]] = future.result()
        else:
            for i, formula in enumerate(interpretations):
                outcomes[i] = self._plan_candidate(formula, world, i)

        plans = []
        errors = []
        for i in sorted(outcomes):
            outcome = outcomes[i]
            if isinstance(outcome, PlanResult):
                plans.append(outcome)
            else:
                errors.append(outcome)

        if not plans:
            raise PlanningFailedError(
                f"All {len(interpretations)} interpretations failed",
                errors=errors,
                original_exception=errors[0] if errors else None,
            )

        log_component_end(
            logger, "ArmPlanner.plan", planned=len(plans), failed=len(errors)
        )
        return plans

    def _plan_candidate(
        self, formula: DNFFormula, world: WorldState, index: int
    ) -> Union[PlanResult, BlockArmException]:
        try:
            return self.plan_formula(formula, world, index=index)
        except (InvalidStateError, ConfigurationException):
            raise
        except BlockArmException as e:
            logger.warning(
                f"Interpretation {index} failed: {e.message}",
                extra={"formula": stringify_formula(formula)},
            )
            return e

    # ========================================================================
    # Plan Replay
    # ========================================================================

    def simulate_plan(
        self, world: WorldState, actions: Sequence[ArmAction]
    ) -> List[PlanningState]:
        """
        Execute a plan and return the state trajectory (initial state first).

        Raises:
            InvalidActionError: If an action is not applicable
        """
        oracle = self.oracle_factory(world.objects)
        state = PlanningState.from_world(world)
        states = [state]

        for i, action in enumerate(actions):
            try:
                state = apply_action(state, action, oracle)
            except InvalidActionError as e:
                e.context["step_index"] = i
                raise
            states.append(state)

        return states

    def validate_plan(
        self, world: WorldState, actions: Sequence[ArmAction], formula: DNFFormula
    ) -> Tuple[bool, Optional[str]]:
        """
        Check that a plan achieves `formula` from `world`.

        Returns:
            (success, error_message)
        """
        try:
            states = self.simulate_plan(world, actions)
        except InvalidActionError as e:
            step = e.context.get("step_index")
            return False, f"Action {step} ({e.context.get('action')}) failed: {e.message}"

        if not satisfies(states[-1], formula):
            return False, "Final state does not satisfy goal"

        return True, None

    def diagnose_failure(
        self, world: WorldState, actions: Sequence[ArmAction], formula: DNFFormula
    ) -> Dict[str, Any]:
        """
        Analyse why a plan fails.

        Returns:
            Diagnostic information:
            - failed_at: Action index where the plan fails
            - failed_action: The failing action
            - unsatisfied: Goal literals still false (per conjunction)
            - state_before: State before the failed action
            - error: Description, None if the plan works
        """
        oracle = self.oracle_factory(world.objects)
        state = PlanningState.from_world(world)

        for i, action in enumerate(actions):
            try:
                next_state = apply_action(state, action, oracle)
            except InvalidActionError as e:
                return {
                    "failed_at": i,
                    "failed_action": action,
                    "unsatisfied": [],
                    "state_before": state,
                    "error": e.message,
                }
            state = next_state

        if not satisfies(state, formula):
            missing = [unsatisfied_literals(state, conj) for conj in formula]
            rendered = [[str(literal) for literal in conj] for conj in missing]
            return {
                "failed_at": len(actions),
                "failed_action": None,
                "unsatisfied": missing,
                "state_before": state,
                "error": f"Goal not achieved. Missing: {rendered}",
            }

        return {"error": None}
