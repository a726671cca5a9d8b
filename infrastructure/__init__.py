"""
infrastructure package

Shared infrastructure components for the BlockArm planner.

Modules:
    - interfaces: Graph abstraction and search result types
"""

from infrastructure.interfaces import Edge, Graph, SearchResult

__all__ = [
    "Edge",
    "Graph",
    "SearchResult",
]
