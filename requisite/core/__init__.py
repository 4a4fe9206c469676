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
"""Core data model: requirements, subjects, relations, nodes and errors."""

from .requirement import (
    Capability,
    ExactType,
    HashableDomain,
    Requirement,
    RequirementDomain,
    ordered_unique,
)
from .subject import Relation, RelationKind, RelationLike, Subject, as_relations
from .node import Edge, Node
from .errors import (
    DuplicateKeyError,
    ErrorKind,
    FrozenNodeError,
    GraphBuildError,
    SolverError,
    TypeCheckError,
    UnknownKeyError,
)


__all__ = [
    # Requirements
    "Capability",
    "ExactType",
    "HashableDomain",
    "Requirement",
    "RequirementDomain",
    "ordered_unique",
    # Input
    "Relation",
    "RelationKind",
    "RelationLike",
    "Subject",
    "as_relations",
    # State
    "Edge",
    "Node",
    # Errors
    "DuplicateKeyError",
    "ErrorKind",
    "FrozenNodeError",
    "GraphBuildError",
    "SolverError",
    "TypeCheckError",
    "UnknownKeyError",
]
