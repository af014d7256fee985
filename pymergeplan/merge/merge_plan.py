################################################################################
#  Licensed to the Apache Software Foundation (ASF) under one
#  or more contributor license agreements.  See the NOTICE file
#  distributed with this work for additional information
#  regarding copyright ownership.  The ASF licenses this file
#  to you under the Apache License, Version 2.0 (the
#  "License"); you may not use this file except in compliance
#  with the License.  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
# limitations under the License.
################################################################################

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from pymergeplan.merge.size_prober import ContentSummary
from pymergeplan.plan.work_patch import WorkPatch


class TaskPlanKind(Enum):
    MOVE_ONLY = "move-only"
    MERGE_ONLY = "merge-only"
    MERGE_THEN_MOVE_SUBSET = "merge-then-move-subset"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class LeafDirectory:
    """
    One merge-or-move unit: the output root, a partition / skewed-value directory, or a regular
    file found at partition depth. A file is always moved as is.
    """
    path: str
    segments: Tuple[str, ...] = ()
    summary: Optional[ContentSummary] = None
    is_file: bool = False

    @property
    def total_size(self) -> int:
        return self.summary.total_size if self.summary else -1

    @property
    def file_count(self) -> int:
        return self.summary.file_count if self.summary else -1


@dataclass(frozen=True)
class MergePlan:
    """
    Outcome of one merge resolution. ``patch`` holds the work mutations the selected task needs;
    nothing is mutated until the resolver applies it.
    """
    kind: TaskPlanKind
    patch: WorkPatch = field(default_factory=WorkPatch.empty)
    total_merge_size: int = 0
    merged_leaves: Tuple[LeafDirectory, ...] = ()
    moved_leaves: Tuple[LeafDirectory, ...] = ()
    dropped_leaves: Tuple[LeafDirectory, ...] = ()

    def processed_leaves(self) -> Tuple[LeafDirectory, ...]:
        return self.merged_leaves + self.moved_leaves + self.dropped_leaves

    def __str__(self) -> str:
        return (f"{self.kind} (merge {len(self.merged_leaves)} dirs / {self.total_merge_size} bytes, "
                f"move {len(self.moved_leaves)} dirs, drop {len(self.dropped_leaves)} dirs)")
