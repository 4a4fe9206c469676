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
"""Fluent builder for solver input.

Example (``let a = 2; let b = 2.5; var c = a; c = b; return c``):

    >>> output = (
    ...     SolverBuilder()
    ...     .with_subject("a", ["num"], value=2)
    ...     .with_subject("b", ["float"], value=2.5)
    ...     .with_subject("c")
    ...     .with_subject("return")
    ...     .subset("a", "c")
    ...     .subset("b", "c")
    ...     .subset("c", "return")
    ...     .solve()
    ... )
    >>> sorted(output.has("return"))
    ['float', 'num']
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Hashable, Iterable, List, Optional

from requisite.core.requirement import RequirementDomain
from requisite.core.subject import Relation, RelationKind, Subject
from requisite.graph.relation_graph import RelationGraph

from .config import SolverConfig
from .engine import solve
from .output import SolverOutput


class SolverBuilder:
    """Collects subjects, relations and options, then solves."""

    def __init__(self) -> None:
        self._subjects: List[Subject] = []
        self._relations: List[Relation] = []
        self._config = SolverConfig()

    def with_subject(
        self,
        subject: Any,
        requirements: Iterable[Any] = (),
        *,
        definite: bool = False,
        subset_bound: Optional[Iterable[Any]] = None,
        superset_bound: Optional[Iterable[Any]] = None,
        value: Any = None,
    ) -> SolverBuilder:
        """Add a subject, either a Subject instance or a key plus fields.

        Returns:
            Self for chaining
        """
        if not isinstance(subject, Subject):
            subject = Subject(
                key=subject,
                requirements=tuple(requirements),
                definite=definite,
                subset_bound=tuple(subset_bound) if subset_bound is not None else None,
                superset_bound=tuple(superset_bound) if superset_bound is not None else None,
                value=value,
            )
        self._subjects.append(subject)
        return self

    def with_definite(self, key: Hashable, requirements: Iterable[Any], **kwargs: Any) -> SolverBuilder:
        """Add a subject whose requirement set is fixed."""
        return self.with_subject(key, requirements, definite=True, **kwargs)

    def with_relation(self, relation: Relation) -> SolverBuilder:
        self._relations.append(relation)
        return self

    def subset(self, source: Hashable, target: Hashable) -> SolverBuilder:
        """Declare ``source ≤ target``."""
        return self.with_relation(Relation(source, target, RelationKind.SUBSET))

    def superset(self, source: Hashable, target: Hashable) -> SolverBuilder:
        """Declare ``source ≥ target``."""
        return self.with_relation(Relation(source, target, RelationKind.SUPERSET))

    def equal(self, source: Hashable, target: Hashable) -> SolverBuilder:
        return self.with_relation(Relation(source, target, RelationKind.EQUAL))

    def with_config(self, config: SolverConfig) -> SolverBuilder:
        self._config = config
        return self

    def with_domain(self, domain: RequirementDomain) -> SolverBuilder:
        self._config = replace(self._config, domain=domain)
        return self

    def with_max_iterations(self, max_iterations: Optional[int]) -> SolverBuilder:
        self._config = replace(self._config, max_iterations=max_iterations)
        return self

    def with_max_workers(self, max_workers: int) -> SolverBuilder:
        self._config = replace(self._config, max_workers=max_workers)
        return self

    @property
    def config(self) -> SolverConfig:
        return self._config

    def build_graph(self) -> RelationGraph:
        """Build the relation graph without solving it."""
        return RelationGraph.build(self._subjects, self._relations)

    def solve(self) -> SolverOutput:
        """Solve the collected input."""
        return solve(self._subjects, self._relations, self._config)
