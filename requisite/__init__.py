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
"""Requisite: requirement-set propagation for type checking.

Requisite infers and verifies requirement sets (capabilities, exact types,
...) for named program entities related by subset, superset and equality
relations. Requirements known for definite entities are propagated through
the relation graph to a fixpoint, and every contradiction is reported with
the chain of entities the offending requirement travelled through.

Key Components:
    - core: Requirements, subjects, relations, nodes and errors
    - graph: Relation graph construction and component partitioning
    - propagation: Fixpoint worklist propagation and error collection
    - solver: solve() entry point, configuration, builder and output

Usage:
    >>> from requisite import Relation, Subject, solve
    >>> output = solve(
    ...     [Subject("a", ["Int"], definite=True), Subject("b")],
    ...     [Relation.subset("a", "b")],
    ... )
    >>> output.has("b")
    frozenset({'Int'})
"""

from .core import (
    Capability,
    DuplicateKeyError,
    Edge,
    ErrorKind,
    ExactType,
    FrozenNodeError,
    GraphBuildError,
    HashableDomain,
    Node,
    Relation,
    RelationKind,
    RequirementDomain,
    SolverError,
    Subject,
    TypeCheckError,
    UnknownKeyError,
)
from .graph import RelationGraph
from .propagation import ErrorCollector, Propagator
from .solver import SolverBuilder, SolverConfig, SolverOutput, solve, solve_graph

__version__ = "0.1.0"


__all__ = [
    # Input
    "Subject",
    "Relation",
    "RelationKind",
    # Requirements
    "Capability",
    "ExactType",
    "HashableDomain",
    "RequirementDomain",
    # Graph and propagation
    "Edge",
    "Node",
    "RelationGraph",
    "Propagator",
    "ErrorCollector",
    # Solving
    "SolverBuilder",
    "SolverConfig",
    "SolverOutput",
    "solve",
    "solve_graph",
    # Errors
    "DuplicateKeyError",
    "ErrorKind",
    "FrozenNodeError",
    "GraphBuildError",
    "SolverError",
    "TypeCheckError",
    "UnknownKeyError",
]
