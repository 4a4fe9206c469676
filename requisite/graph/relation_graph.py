# Copyright Rand Arete @ Ananke 2025
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================
"""Relation graph construction.

Compiles caller subjects and relations into Nodes joined by Edges. Every
edge is recorded on both endpoints whatever its kind; the direction of a
relation lives on the edge itself, so either endpoint can find it.

The graph also partitions itself into connected components. Components
share no nodes, so each can be propagated independently.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Dict, Hashable, Iterable, List, Optional, Sequence

from requisite.core.errors import DuplicateKeyError, UnknownKeyError
from requisite.core.node import Edge, Node
from requisite.core.subject import Relation, RelationLike, Subject, as_relations

logger = logging.getLogger(__name__)


class RelationGraph:
    """Nodes and edges for one solve.

    Example:
        >>> graph = RelationGraph.build(
        ...     [Subject("a", ["Int"], definite=True), Subject("b")],
        ...     [Relation.subset("a", "b")],
        ... )
        >>> [n.key for n in graph.nodes["a"].upper_neighbors]
        ['b']
    """

    def __init__(self) -> None:
        self._nodes: Dict[Hashable, Node] = {}
        self._edges: List[Edge] = []

    @classmethod
    def build(
        cls,
        subjects: Iterable[Subject],
        relations: Iterable[RelationLike] = (),
    ) -> RelationGraph:
        """Build a graph from caller input.

        All subjects are registered before any relation, so relations may
        reference subjects declared anywhere in the input.

        Args:
            subjects: Entities to solve, in caller order
            relations: Relations between them, in caller order

        Returns:
            The constructed graph

        Raises:
            DuplicateKeyError: Two subjects share a key
            UnknownKeyError: A relation names an undeclared key
        """
        graph = cls()
        for subject in subjects:
            graph.add_subject(subject)
        for relation in as_relations(relations):
            graph.add_relation(relation)
        logger.debug(
            f"Built relation graph: {len(graph._nodes)} nodes, {len(graph._edges)} edges"
        )
        return graph

    @property
    def nodes(self) -> Dict[Hashable, Node]:
        """Nodes by key, in subject order.

        A copy; register subjects through add_subject.
        """
        return dict(self._nodes)

    @property
    def edges(self) -> List[Edge]:
        """Edges in relation order."""
        return self._edges

    def add_subject(self, subject: Subject) -> Node:
        """Register a subject as a new node.

        Raises:
            DuplicateKeyError: The key is already registered
        """
        if subject.key in self._nodes:
            raise DuplicateKeyError(subject.key)
        node = Node.from_subject(subject, order=len(self._nodes))
        self._nodes[subject.key] = node
        return node

    def add_relation(self, relation: Relation) -> Edge:
        """Compile a relation into an edge on both endpoints.

        Raises:
            UnknownKeyError: Either endpoint is undeclared
        """
        source = self._nodes.get(relation.source)
        if source is None:
            raise UnknownKeyError(relation.source, relation)
        target = self._nodes.get(relation.target)
        if target is None:
            raise UnknownKeyError(relation.target, relation)

        edge = Edge(source=source, target=target, kind=relation.kind, index=len(self._edges))
        source.attach(edge)
        if target is not source:
            target.attach(edge)
        self._edges.append(edge)
        return edge

    def get(self, key: Hashable) -> Optional[Node]:
        return self._nodes.get(key)

    def components(self) -> List[List[Node]]:
        """Partition nodes into connected components.

        Any edge connects its endpoints regardless of kind or direction.
        Components are ordered by their first node in subject order, and
        nodes within a component are in subject order.

        Returns:
            List of components, each a list of nodes
        """
        assigned: Dict[int, int] = {}
        components: List[List[Node]] = []

        for start in self._nodes.values():
            if id(start) in assigned:
                continue
            index = len(components)
            members: List[Node] = []
            queue = deque([start])
            assigned[id(start)] = index
            while queue:
                node = queue.popleft()
                members.append(node)
                for neighbor in node.neighbors():
                    if id(neighbor) not in assigned:
                        assigned[id(neighbor)] = index
                        queue.append(neighbor)
            members.sort(key=lambda n: n.order)
            components.append(members)

        return components

    def component_of(self, key: Hashable) -> List[Node]:
        """The component containing the node with ``key``."""
        for component in self.components():
            if any(node.key == key for node in component):
                return component
        raise UnknownKeyError(key)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._nodes

    def __repr__(self) -> str:
        return f"RelationGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"


def build_graph(
    subjects: Sequence[Subject],
    relations: Sequence[RelationLike] = (),
) -> Dict[Hashable, Node]:
    """Build the graph and return its key → Node mapping."""
    return RelationGraph.build(subjects, relations).nodes
