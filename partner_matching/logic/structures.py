"""
Supporting Structures

Priority queue for ranked selection and a participant graph for
partnership / social-network analysis.
"""

import heapq
import itertools
from typing import Generic, Iterable, List, Optional, TypeVar

import networkx as nx

from .contracts import Participant

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """
    Max-priority queue. Items with equal priority come out in insertion order.
    """

    def __init__(self):
        self._heap: List[tuple] = []
        self._counter = itertools.count()

    def push(self, item: T, priority: float) -> None:
        heapq.heappush(self._heap, (-priority, next(self._counter), item))

    def pop(self) -> Optional[T]:
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[2]

    def peek(self) -> Optional[T]:
        return self._heap[0][2] if self._heap else None

    def __len__(self) -> int:
        return len(self._heap)


class ParticipantGraph:
    """Undirected weighted graph keyed by participant id."""

    def __init__(self):
        self._graph = nx.Graph()

    def add_node(self, participant_id: str) -> None:
        self._graph.add_node(participant_id)

    def add_edge(self, first_id: str, second_id: str, weight: float = 1.0) -> None:
        self._graph.add_edge(first_id, second_id, weight=float(weight))

    def has_node(self, participant_id: str) -> bool:
        return self._graph.has_node(participant_id)

    def neighbors(self, participant_id: str) -> List[str]:
        if not self._graph.has_node(participant_id):
            return []
        return list(self._graph.neighbors(participant_id))

    def weight(self, first_id: str, second_id: str) -> float:
        data = self._graph.get_edge_data(first_id, second_id)
        return float(data["weight"]) if data else 0.0

    def connected_components(self) -> List[List[str]]:
        return [list(component) for component in nx.connected_components(self._graph)]

    def __len__(self) -> int:
        return self._graph.number_of_nodes()


def build_partner_graph(participants: Iterable[Participant]) -> ParticipantGraph:
    """Build the partnership graph from each participant's existing partner ids."""
    graph = ParticipantGraph()
    for participant in participants:
        graph.add_node(participant.id)
        for partner_id in sorted(participant.partner_ids):
            graph.add_edge(participant.id, partner_id)
    return graph
