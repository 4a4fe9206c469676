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
"""Solver configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional

from requisite.core.requirement import HashableDomain, RequirementDomain


@dataclass(frozen=True)
class SolverConfig:
    """Options for a single ``solve()`` call.

    Attributes:
        domain: Requirement comparison supplied by the front-end
        max_iterations: Cap on worklist pops per component. None means no
            cap; termination is already guaranteed for well-behaved domains,
            so set this only when the domain is untrusted.
        max_workers: Threads used to solve disjoint components. 1 solves
            them sequentially.
    """

    DEFAULT_MAX_WORKERS: ClassVar[int] = 1

    domain: RequirementDomain = field(default_factory=HashableDomain)
    max_iterations: Optional[int] = None
    max_workers: int = DEFAULT_MAX_WORKERS

    def __post_init__(self) -> None:
        if self.max_iterations is not None and self.max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")

    @property
    def parallel(self) -> bool:
        return self.max_workers > 1
