"""
Component 31: State-Space Search Core

Generic best-first (A*) search over implicit graphs:
- Open frontier ordered by f = g + h, ties broken by insertion order
- Visited table keyed by node value (best g, cached h, predecessor)
- Decrease-key by re-insertion; shadowed frontier entries skipped on pop
- Wall-clock deadline and optional expansion budget
- Path reconstruction through predecessor links

The engine knows nothing about the block world. Domains plug in through
infrastructure.interfaces.Graph, a goal predicate and a heuristic.

Author: BlockArm Development Team
"""

import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, Set

from common.constants import DEFAULT_MAX_EXPANSIONS, DEFAULT_TIMEOUT_SECONDS
from component_15_logging_config import get_logger
from infrastructure.interfaces import Graph, N, SearchResult

logger = get_logger(__name__)

TERMINATION_GOAL = "goal"
TERMINATION_EXHAUSTED = "exhausted"
TERMINATION_TIMEOUT = "timeout"
TERMINATION_EXPANSION_LIMIT = "expansion_limit"


# ============================================================================
# Search Bookkeeping
# ============================================================================


@dataclass(order=True)
class FrontierEntry(Generic[N]):
    """
    Entry in the open frontier.

    Attributes:
        f_score: Total estimated cost (g + h), primary sort key
        sequence: Insertion counter, breaks ties in insertion order
        node: Node this entry stands for
        g_score: Cost from start recorded when the entry was pushed
    """

    f_score: float
    sequence: int
    node: N = field(compare=False)
    g_score: float = field(compare=False)


@dataclass
class NodeRecord(Generic[N]):
    """
    Visited-table record: best known cost and how it was reached.

    Attributes:
        g_score: Best known cost from start
        h_score: Heuristic estimate, computed once per node
        parent: Predecessor on the best known path (None for the start node)
    """

    g_score: float
    h_score: float
    parent: Optional[N] = None


def reconstruct_path(records: Dict[N, NodeRecord], goal: N) -> List[N]:
    """Follow predecessor links from `goal` back to the start, return start -> goal."""
    path = [goal]
    node = records[goal].parent
    while node is not None:
        path.append(node)
        node = records[node].parent
    path.reverse()
    return path


# ============================================================================
# A* Search
# ============================================================================


class StateSpaceSearch:
    """
    A* search engine.

    One instance runs one search at a time; `stats` describes the last run.
    All frontier and visited data is local to a `search` call.

    Features:
    - Optimal paths under admissible, consistent heuristics
    - Correct (possibly suboptimal) paths under inadmissible heuristics
    - Reopening of finalised nodes when a cheaper path shows up
    - Deterministic results for equal f-scores
    """

    def __init__(self, max_expansions: Optional[int] = DEFAULT_MAX_EXPANSIONS):
        """
        Initialize search engine.

        Args:
            max_expansions: Maximum nodes to expand before giving up
                            (None: bounded by the deadline only)
        """
        self.max_expansions = max_expansions
        self.stats: Dict[str, Any] = self._fresh_stats()

    @staticmethod
    def _fresh_stats() -> Dict[str, Any]:
        return {
            "expansions": 0,
            "generated": 0,
            "reopened": 0,
            "stale_skipped": 0,
            "heuristic_calls": 0,
            "plan_length": 0,
            "termination": None,
            "elapsed_ms": 0.0,
        }

    @property
    def termination(self) -> Optional[str]:
        """Why the last search stopped: goal, exhausted, timeout or expansion_limit."""
        return self.stats["termination"]

    def search(
        self,
        graph: Graph[N],
        start: N,
        is_goal: Callable[[N], bool],
        heuristic: Callable[[N], float],
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> Optional[SearchResult[N]]:
        """
        Find a cheapest path from `start` to a node satisfying `is_goal`.

        Args:
            graph: Implicit graph providing outgoing edges
            start: Initial node
            is_goal: Goal predicate, tested when a node is popped
            heuristic: Estimated remaining cost, a pure function of the node
            timeout: Wall-clock budget in seconds

        Returns:
            SearchResult with path and cost, or None if no goal node was
            reached before the frontier emptied, the deadline elapsed, or the
            expansion budget ran out (see `termination`)
        """
        self.stats = self._fresh_stats()
        started = time.monotonic()
        deadline = started + timeout

        logger.debug(
            "Starting A* search",
            extra={"timeout": timeout, "max_expansions": self.max_expansions},
        )

        sequence = itertools.count()
        h_start = self._estimate(heuristic, start)
        records: Dict[N, NodeRecord] = {start: NodeRecord(0.0, h_start, None)}
        open_list: List[FrontierEntry] = [
            FrontierEntry(h_start, next(sequence), start, 0.0)
        ]
        closed_set: Set[N] = set()

        result = None
        termination = TERMINATION_EXHAUSTED

        while open_list:
            current = heapq.heappop(open_list)
            record = records[current.node]

            # Shadowed by a cheaper re-insertion
            if current.g_score > record.g_score or current.node in closed_set:
                self.stats["stale_skipped"] += 1
                continue

            if is_goal(current.node):
                path = reconstruct_path(records, current.node)
                result = SearchResult(path=path, cost=record.g_score)
                termination = TERMINATION_GOAL
                break

            if time.monotonic() >= deadline:
                termination = TERMINATION_TIMEOUT
                break

            if (
                self.max_expansions is not None
                and self.stats["expansions"] >= self.max_expansions
            ):
                termination = TERMINATION_EXPANSION_LIMIT
                break

            closed_set.add(current.node)
            self.stats["expansions"] += 1

            for edge in graph.outgoing_edges(current.node):
                if edge.cost <= 0:
                    raise ValueError(f"Edge cost must be positive, got {edge.cost}")

                tentative_g = record.g_score + edge.cost
                successor = records.get(edge.target)

                if successor is not None and tentative_g >= successor.g_score:
                    continue

                if successor is None:
                    h_score = self._estimate(heuristic, edge.target)
                    records[edge.target] = NodeRecord(
                        tentative_g, h_score, current.node
                    )
                else:
                    # Found better path
                    successor.g_score = tentative_g
                    successor.parent = current.node
                    h_score = successor.h_score
                    if edge.target in closed_set:
                        closed_set.discard(edge.target)
                        self.stats["reopened"] += 1

                heapq.heappush(
                    open_list,
                    FrontierEntry(
                        tentative_g + h_score, next(sequence), edge.target, tentative_g
                    ),
                )
                self.stats["generated"] += 1

        self.stats["termination"] = termination
        self.stats["elapsed_ms"] = (time.monotonic() - started) * 1000

        if result is not None:
            self.stats["plan_length"] = len(result.path) - 1
            result.stats = dict(self.stats)
            logger.info(
                f"Goal reached! Cost: {result.cost}, Expansions: {self.stats['expansions']}",
                extra={"generated": self.stats["generated"]},
            )
            return result

        logger.warning(
            f"No goal reached after {self.stats['expansions']} expansions",
            extra={"termination": termination},
        )
        return None

    def _estimate(self, heuristic: Callable[[N], float], node: N) -> float:
        self.stats["heuristic_calls"] += 1
        return float(heuristic(node))


def a_star_search(
    graph: Graph[N],
    start: N,
    is_goal: Callable[[N], bool],
    heuristic: Callable[[N], float],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    max_expansions: Optional[int] = DEFAULT_MAX_EXPANSIONS,
) -> Optional[SearchResult[N]]:
    """Run one A* search with a fresh engine (see StateSpaceSearch.search)."""
    return StateSpaceSearch(max_expansions=max_expansions).search(
        graph, start, is_goal, heuristic, timeout
    )
