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
"""Solve entry point: graph build, propagation per component, result assembly.

Example (``let a: String = "gammo"; let b: bool = a``):

    >>> output = solve(
    ...     [
    ...         Subject("a", ["String"], value="gammo"),
    ...         Subject("b", superset_bound=["bool"]),
    ...     ],
    ...     [Relation.subset("a", "b")],
    ... )
    >>> output.is_consistent
    False
    >>> output.errors[0].describe()
    "String flows from 'a' into 'b', whose bound excludes it"
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Tuple

from immutables import Map as ImmutableMap

from requisite.core.errors import SolverError
from requisite.core.node import Node
from requisite.core.subject import RelationLike, Subject
from requisite.graph.relation_graph import RelationGraph
from requisite.propagation.collector import ErrorCollector
from requisite.propagation.propagator import Propagator
from requisite.propagation.worklist import FixpointResult

from .config import SolverConfig
from .output import SolverOutput

logger = logging.getLogger(__name__)


def solve(
    subjects: Iterable[Subject],
    relations: Iterable[RelationLike] = (),
    config: Optional[SolverConfig] = None,
) -> SolverOutput:
    """Propagate requirements and report every contradiction.

    Graph errors are raised before any propagation runs. Otherwise every
    component is solved and all contradictions are returned on the output.

    Args:
        subjects: Entities to solve, in caller order
        relations: Relations between them, in caller order
        config: Solver options; defaults to SolverConfig()

    Returns:
        The immutable SolverOutput

    Raises:
        DuplicateKeyError: Two subjects share a key
        UnknownKeyError: A relation names an undeclared key
    """
    config = config if config is not None else SolverConfig()
    graph = RelationGraph.build(subjects, relations)
    return solve_graph(graph, config)


def solve_graph(graph: RelationGraph, config: Optional[SolverConfig] = None) -> SolverOutput:
    """Solve an already built graph. The graph's nodes are frozen afterwards.

    A graph can be solved once; build a new one to solve again.

    Raises:
        SolverError: The graph has already been solved
    """
    if any(node.frozen for node in graph.nodes.values()):
        raise SolverError("Graph has already been solved; build a new RelationGraph")
    config = config if config is not None else SolverConfig()
    propagator = Propagator(config.domain, max_iterations=config.max_iterations)
    components = graph.components()

    logger.debug(
        f"Solving {len(graph)} entities in {len(components)} components "
        f"(max_workers={config.max_workers})"
    )

    outcomes = _run_components(propagator, components, config.max_workers)

    collector = ErrorCollector()
    results: List[FixpointResult] = []
    for result, component_errors in outcomes:
        results.append(result)
        collector.merge(component_errors)

    for node in graph.nodes.values():
        node.freeze()

    output = SolverOutput(
        solutions=ImmutableMap(graph.nodes),
        errors=collector.errors(),
        components=tuple(results),
    )
    if not output.is_consistent:
        logger.debug(
            f"Solve found {len(output.errors)} errors "
            f"({collector.discovered} reports before deduplication)"
        )
    return output


def _run_components(
    propagator: Propagator,
    components: List[List[Node]],
    max_workers: int,
) -> List[Tuple[FixpointResult, ErrorCollector]]:
    """Solve components, in parallel when allowed.

    Results are returned in component order either way, so the merged
    error list does not depend on thread scheduling.
    """
    if max_workers <= 1 or len(components) <= 1:
        return [propagator.solve_component(component) for component in components]

    with ThreadPoolExecutor(max_workers=min(max_workers, len(components))) as executor:
        return list(executor.map(propagator.solve_component, components))
