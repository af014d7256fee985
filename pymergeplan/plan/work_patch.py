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
from typing import Dict, List, Optional, Tuple

from pymergeplan.common.file_io import FILE_OP_LOGGER
from pymergeplan.plan.descriptors import LoadMultiFilesDesc, PartitionDesc
from pymergeplan.plan.map_work import MapWork
from pymergeplan.plan.move_work import MoveWork
from pymergeplan.plan.plan_exception import PlanInvariantError


@dataclass(frozen=True)
class WorkPatch:
    """
    The mutations a merge resolution makes to the work of the selected task:
    input paths to drop, input paths to register (with their partition and aliases), the split
    size of the merge job and the narrowed move of the directories that are not merged.
    """
    removed_paths: Tuple[str, ...] = ()
    path_to_partition_info: Dict[str, PartitionDesc] = field(default_factory=dict)
    path_to_aliases: Dict[str, List[str]] = field(default_factory=dict)
    split_size: Optional[int] = None
    multi_files_desc: Optional[LoadMultiFilesDesc] = None

    @staticmethod
    def empty() -> 'WorkPatch':
        return WorkPatch()

    def is_empty(self) -> bool:
        return (not self.removed_paths and not self.path_to_partition_info
                and self.split_size is None and self.multi_files_desc is None)

    def apply(self, map_work: Optional[MapWork], move_work: Optional[MoveWork] = None):
        """Applies the patch in place. Must be called from a single thread."""
        if self.is_empty():
            return
        if map_work is None:
            raise PlanInvariantError("Cannot apply a merge patch without a map work")

        for path in self.removed_paths:
            FILE_OP_LOGGER.debug("merge resolver removing %s", path)
            map_work.remove_path_to_partition_info(path)
            map_work.remove_path_to_alias(path)

        for path, partition_desc in self.path_to_partition_info.items():
            map_work.resolve_dynamic_partition_stored_as_sub_dirs_merge(
                path, partition_desc.table_desc, self.path_to_aliases.get(path, []), partition_desc)

        if self.split_size is not None:
            map_work.set_split_sizes(self.split_size)

        if self.multi_files_desc is not None:
            if move_work is None:
                raise PlanInvariantError("Cannot narrow the move step: merge-and-move task has no move work")
            move_work.set_multi_files_desc(self.multi_files_desc)
