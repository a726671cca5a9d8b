"""
infrastructure/interfaces.py

Base interfaces for the generic search engine.

This module defines the graph abstraction searched by the A* engine in
component_31_planner_core. The graph is implicit: nothing is materialised up
front, edges are produced on demand from a node.

Interface Contract:
    Every searchable domain implements the Graph abstract base class:
    - Nodes are immutable values with value-based __eq__ and __hash__
    - outgoing_edges(node) returns the transitions leaving a node
    - Edge costs are positive

Usage:
    from infrastructure.interfaces import Edge, Graph

    class CorridorGraph(Graph[int]):
        def outgoing_edges(self, node: int) -> List[Edge[int]]:
            return [Edge(node, node + 1, 1.0)]
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, TypeVar

N = TypeVar("N")


@dataclass(frozen=True)
class Edge(Generic[N]):
    """
    A directed, weighted transition between two nodes.

    Attributes:
        source: Node the edge leaves from
        target: Node the edge leads to
        cost: Positive transition cost
    """

    source: N
    target: N
    cost: float = 1.0


@dataclass
class SearchResult(Generic[N]):
    """
    Result of a successful search.

    Attributes:
        path: Nodes from the start node to the goal node (inclusive)
        cost: Total cost of the path
        stats: Search statistics of the run that produced the path

    Example:
        result = engine.search(graph, start, is_goal, heuristic, timeout=10)
        if result is not None:
            print(f"{len(result.path) - 1} steps, cost {result.cost}")
    """

    path: List[N]
    cost: float
    stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def goal(self) -> N:
        """Last node of the path."""
        return self.path[-1]


class Graph(ABC, Generic[N]):
    """
    Abstract base class for implicit graphs searched by the A* engine.

    Design Pattern:
        Strategy pattern: the engine knows nothing about the domain, the
        domain knows nothing about the search order.

    Thread Safety:
        Implementations SHOULD be safe to call from several worker threads
        at once. outgoing_edges must never mutate the node it is given.
    """

    @abstractmethod
    def outgoing_edges(self, node: N) -> List[Edge[N]]:
        """
        Compute the edges leaving a node.

        Args:
            node: The node to expand

        Returns:
            List of edges whose source is `node`. An empty list marks a
            dead end.
        """
        pass
