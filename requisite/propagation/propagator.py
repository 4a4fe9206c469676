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
"""Fixpoint propagation of requirement sets over one component.

Requirements flow along edges from the lower endpoint to the upper one:
whatever the lower entity has, the upper entity must have too. The
propagator runs a worklist algorithm until no ``has`` set changes:

1. Seed the worklist with every definite node, then every other node that
   starts with requirements, in subject order
2. Pop a node N; for each edge flow ``(N, M)`` push each requirement r of N
   into M:
   - r outside M's superset bound: report EXCLUDED, do not insert
   - M definite and lacking r: report CONFLICT
   - otherwise insert r into M with provenance N's chain + N
3. Queue M whenever its ``has`` grew
4. Once the worklist is empty, check each node's own bounds: requirements
   in the subset bound that never arrived are MISSING, initial requirements
   outside the superset bound are UNPERMITTED. A component stopped by the
   iteration cap skips the MISSING check, since its gaps may be unfilled
   rather than unfillable

Key properties:
- Monotonic: ``has`` only grows, and definite nodes never change
- Terminating: each (node, requirement) pair is inserted at most once
- Local: errors are attributed to the first edge a requirement cannot cross
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from requisite.core.errors import ErrorKind, TypeCheckError
from requisite.core.node import Node
from requisite.core.requirement import HashableDomain, RequirementDomain

from .collector import ErrorCollector
from .worklist import FIFOWorklist, FixpointResult, IterationLimiter

logger = logging.getLogger(__name__)


class Propagator:
    """Runs the fixpoint for one component at a time.

    The propagator holds configuration only; all state lives in the nodes
    of the component being solved, so one instance can solve disjoint
    components concurrently.

    Example:
        >>> propagator = Propagator()
        >>> for component in graph.components():
        ...     result, errors = propagator.solve_component(component)
    """

    def __init__(
        self,
        domain: Optional[RequirementDomain] = None,
        max_iterations: Optional[int] = None,
    ):
        """Initialize the propagator.

        Args:
            domain: Requirement comparison; defaults to HashableDomain
            max_iterations: Cap on worklist pops per component (None = no cap)
        """
        self._domain = domain if domain is not None else HashableDomain()
        self._max_iterations = max_iterations

    @property
    def domain(self) -> RequirementDomain:
        return self._domain

    def solve_component(
        self,
        nodes: Sequence[Node],
    ) -> Tuple[FixpointResult, ErrorCollector]:
        """Propagate requirements through one connected component.

        Args:
            nodes: The component's nodes, in subject order

        Returns:
            The fixpoint result and the errors found
        """
        collector = ErrorCollector()
        worklist = FIFOWorklist()
        limiter = IterationLimiter(self._max_iterations)
        insertions = 0

        for node in nodes:
            if node.definite:
                worklist.add(node)
        for node in nodes:
            if not node.definite and node.has:
                worklist.add(node)

        converged = True
        while worklist:
            if limiter.is_exhausted():
                converged = False
                break
            node = worklist.pop()
            limiter.increment()

            for edge in node.edges:
                for lower, upper in edge.flows():
                    if lower is not node or upper is node:
                        continue
                    added = self.push(lower, upper, collector)
                    if added:
                        insertions += added
                        worklist.add(upper)

        keys = tuple(node.key for node in nodes)
        if not converged:
            logger.warning(
                f"Iteration limit ({self._max_iterations}) reached for component "
                f"starting at {keys[0]!r}; {len(worklist)} nodes still queued"
            )

        self.check_bounds(nodes, collector, missing=converged)

        logger.debug(
            f"Component {keys[0]!r}: {len(nodes)} nodes, {limiter.count} iterations, "
            f"{insertions} insertions, {len(collector)} errors"
        )
        result = FixpointResult(
            keys=keys,
            converged=converged,
            iterations=limiter.count,
            insertions=insertions,
            error_count=len(collector),
        )
        return result, collector

    def push(self, lower: Node, upper: Node, collector: ErrorCollector) -> int:
        """Push ``lower``'s requirements across one ``lower ≤ upper`` flow.

        Args:
            lower: Node the requirements come from
            upper: Node that must have them
            collector: Where to report contradictions

        Returns:
            Number of requirements added to ``upper``
        """
        added = 0
        # lower's requirements are distinct, so a snapshot of upper suffices
        known = upper.has
        for requirement in lower.requirements():
            if not self._domain.permits(upper.superset_bound, requirement):
                collector.add(self._report(lower, upper, requirement, ErrorKind.EXCLUDED))
                continue
            if self._domain.contains(known, requirement):
                continue
            if upper.definite:
                collector.add(self._report(lower, upper, requirement, ErrorKind.CONFLICT))
                continue
            if upper.add_requirement(requirement, lower.chain(requirement)):
                added += 1
        return added

    def check_bounds(
        self,
        nodes: Sequence[Node],
        collector: ErrorCollector,
        missing: bool = True,
    ) -> None:
        """Report each node's own bound violations once propagation is done.

        Args:
            nodes: The component's nodes
            collector: Where to report violations
            missing: Whether to report unmet subset bounds. Only sound once
                the worklist has emptied; a stopped worklist may still owe
                a node the requirement.
        """
        for node in nodes:
            required = node.required if missing else ()
            for requirement in self._domain.difference(required, node.has):
                collector.add(
                    TypeCheckError(
                        requirement=requirement,
                        source_key=node.key,
                        target_key=node.key,
                        provenance=(),
                        kind=ErrorKind.MISSING,
                    )
                )
            if node.superset_bound is None:
                continue
            for requirement in self._domain.difference(node.requirements(), node.superset_bound):
                collector.add(
                    TypeCheckError(
                        requirement=requirement,
                        source_key=node.key,
                        target_key=node.key,
                        provenance=node.provenance(requirement),
                        kind=ErrorKind.UNPERMITTED,
                    )
                )

    def _report(
        self,
        lower: Node,
        upper: Node,
        requirement: object,
        kind: ErrorKind,
    ) -> TypeCheckError:
        return TypeCheckError(
            requirement=requirement,
            source_key=lower.key,
            target_key=upper.key,
            provenance=lower.chain(requirement),
            kind=kind,
        )
