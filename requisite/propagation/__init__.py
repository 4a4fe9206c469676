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
"""Requirement propagation over the relation graph.

Key components:
- Propagator: Fixpoint worklist algorithm for one component
- ErrorCollector: Deduplicates and orders contradiction reports
- FIFOWorklist: Schedules node processing order
- IterationLimiter: Optional cap on worklist pops
"""

from .collector import ErrorCollector
from .propagator import Propagator
from .worklist import FIFOWorklist, FixpointResult, IterationLimiter


__all__ = [
    # Propagation
    "Propagator",
    "ErrorCollector",
    # Worklist
    "FIFOWorklist",
    "FixpointResult",
    "IterationLimiter",
]
