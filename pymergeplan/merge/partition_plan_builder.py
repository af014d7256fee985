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

import logging
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple

import pyarrow
import pyarrow.fs

from pymergeplan.common.file_io import FILE_OP_LOGGER, FileIO
from pymergeplan.merge.merge_decision import MergeDecision
from pymergeplan.merge.merge_plan import LeafDirectory, MergePlan, TaskPlanKind
from pymergeplan.merge.size_prober import ContentSummary, SizeProber
from pymergeplan.partition.partition_path_utils import PartitionPathUtils
from pymergeplan.plan.descriptors import LoadMultiFilesDesc, PartitionDesc
from pymergeplan.plan.map_work import MapWork
from pymergeplan.plan.move_work import MoveWork
from pymergeplan.plan.plan_exception import PlanInvariantError
from pymergeplan.plan.work_patch import WorkPatch

logger = logging.getLogger(__name__)


class PartitionPlanBuilder:
    """
    Decides merge or move for every leaf directory of an output root and assembles one plan.

    With ``depth == 0`` the root itself is the only leaf. Otherwise the leaves are the
    directories exactly ``depth`` levels below the root (dynamic partition columns plus list
    bucketing levels), each decided on its own file size distribution: a single average over
    the whole tree would over-merge some partitions and under-merge others. A regular file
    sitting at that depth is a leaf of its own and is always moved, so the narrowed move step
    still covers it.

    The builder only reads the work objects. Its mutations are returned as a WorkPatch on the
    plan.
    """

    def __init__(
            self,
            file_io: FileIO,
            target_size: int,
            avg_size_threshold: int,
            probe_parallelism: int = 1):
        """
        Args:
            file_io: FileIO of the output root
            target_size: Split size installed into the merge work
            avg_size_threshold: Average file size below which a leaf is merged
            probe_parallelism: Number of threads measuring leaves
        """
        self.file_io = file_io
        self.size_prober = SizeProber(file_io)
        self.target_size = target_size
        self.avg_size_threshold = avg_size_threshold
        self.probe_parallelism = max(1, probe_parallelism)

    def build(
            self,
            root: str,
            depth: int,
            map_work: Optional[MapWork] = None,
            move_work: Optional[MoveWork] = None,
            part_spec: Optional[Dict[str, Optional[str]]] = None) -> MergePlan:
        """
        Args:
            root: Output directory of the producing stage
            depth: Directory levels below ``root`` that make up one leaf
            map_work: Map work of the merge task, holding the single root input entry
            move_work: Work of the move step nested in the merge-and-move task
            part_spec: Full dynamic partition spec when dynamic partitioning is active, static
                columns carrying values and dynamic ones None

        Returns:
            The merge plan; the caller applies its patch.
        """
        if depth <= 0:
            return self._build_single_leaf(root)
        return self._build_leaves(root, depth, map_work, move_work, part_spec)

    def _build_single_leaf(self, root: str) -> MergePlan:
        leaf, decision = self._probe(root, 0)
        FILE_OP_LOGGER.debug("merge resolve simple case - total size %s from %s", decision.total_size, root)

        if decision.merge_needed:
            return MergePlan(
                kind=TaskPlanKind.MERGE_ONLY,
                patch=WorkPatch(split_size=self.target_size),
                total_merge_size=decision.total_size,
                merged_leaves=(leaf,),
            )
        return MergePlan(kind=TaskPlanKind.MOVE_ONLY, moved_leaves=(leaf,))

    def _build_leaves(
            self,
            root: str,
            depth: int,
            map_work: Optional[MapWork],
            move_work: Optional[MoveWork],
            part_spec: Optional[Dict[str, Optional[str]]]) -> MergePlan:
        root_path, root_desc, aliases = self._root_entry(map_work)

        try:
            leaf_entries = self.file_io.list_status_at_depth(root, depth)
        except (OSError, pyarrow.ArrowException):
            logger.warning("Failed to list directories %d levels below %s, moving all output",
                           depth, root, exc_info=True)
            return MergePlan(kind=TaskPlanKind.MOVE_ONLY)

        path_to_partition_info: Dict[str, PartitionDesc] = OrderedDict()
        path_to_aliases: Dict[str, List[str]] = OrderedDict()
        merged, moved, dropped = [], [], []
        total_size = 0

        for leaf, decision in self._probe_all(leaf_entries, depth):
            if part_spec is not None and not leaf.is_file:
                full_spec = PartitionPathUtils.full_partition_spec(part_spec, leaf.path)
                if full_spec is None:
                    logger.warning("merger ignoring invalid dynamic partition path %s", leaf.path)
                    dropped.append(leaf)
                    continue
                partition_desc = PartitionDesc(root_desc.table_desc, full_spec)
            else:
                partition_desc = root_desc

            if decision.merge_needed:
                FILE_OP_LOGGER.debug("merge resolver will merge %s", leaf.path)
                path_to_partition_info[leaf.path] = partition_desc
                path_to_aliases[leaf.path] = list(aliases)
                total_size += decision.total_size
                merged.append(leaf)
            else:
                FILE_OP_LOGGER.debug("merge resolver will move %s", leaf.path)
                moved.append(leaf)

        if not merged:
            return MergePlan(
                kind=TaskPlanKind.MOVE_ONLY,
                moved_leaves=tuple(moved),
                dropped_leaves=tuple(dropped),
            )

        multi_files_desc = self._narrow_move(move_work, moved, depth) if moved else None
        return MergePlan(
            kind=TaskPlanKind.MERGE_THEN_MOVE_SUBSET if moved else TaskPlanKind.MERGE_ONLY,
            patch=WorkPatch(
                removed_paths=(root_path,),
                path_to_partition_info=path_to_partition_info,
                path_to_aliases=path_to_aliases,
                split_size=self.target_size,
                multi_files_desc=multi_files_desc,
            ),
            total_merge_size=total_size,
            merged_leaves=tuple(merged),
            moved_leaves=tuple(moved),
            dropped_leaves=tuple(dropped),
        )

    @staticmethod
    def _root_entry(map_work: Optional[MapWork]) -> Tuple[str, PartitionDesc, List[str]]:
        if map_work is None:
            raise PlanInvariantError("Partitioned merge resolution needs the map work of the merge task")
        if len(map_work.path_to_partition_info) != 1 or len(map_work.path_to_aliases) != 1:
            raise PlanInvariantError(
                f"Merge work must have exactly one input path before resolution, got "
                f"{list(map_work.path_to_partition_info)} / {list(map_work.path_to_aliases)}")

        root_path, root_desc = next(iter(map_work.path_to_partition_info.items()))
        aliases = next(iter(map_work.path_to_aliases.values()))
        return root_path, root_desc, aliases

    def _probe(self, path: str, depth: int) -> Tuple[LeafDirectory, MergeDecision]:
        summary = self.size_prober.measure(path)
        if summary is None:
            logger.warning("Cannot measure files under %s, it will not be merged", path)
        leaf = LeafDirectory(path, tuple(PartitionPathUtils.trailing_segments(path, depth)), summary)
        return leaf, MergeDecision.decide(summary, self.avg_size_threshold)

    def _probe_entry(
            self,
            entry: Tuple[str, pyarrow.fs.FileInfo],
            depth: int) -> Tuple[LeafDirectory, MergeDecision]:
        path, info = entry
        if info.type != pyarrow.fs.FileType.File:
            return self._probe(path, depth)

        FILE_OP_LOGGER.debug("merge resolver found file %s at partition depth", path)
        summary = ContentSummary(info.size or 0, 1)
        leaf = LeafDirectory(path, tuple(PartitionPathUtils.trailing_segments(path, depth)), summary, is_file=True)
        return leaf, MergeDecision.decide(summary, self.avg_size_threshold)

    def _probe_all(
            self,
            leaf_entries: List[Tuple[str, pyarrow.fs.FileInfo]],
            depth: int) -> List[Tuple[LeafDirectory, MergeDecision]]:
        if self.probe_parallelism == 1 or len(leaf_entries) <= 1:
            return [self._probe_entry(entry, depth) for entry in leaf_entries]

        with ThreadPoolExecutor(max_workers=min(self.probe_parallelism, len(leaf_entries))) as executor:
            return list(executor.map(lambda entry: self._probe_entry(entry, depth), leaf_entries))

    @staticmethod
    def _narrow_move(move_work: Optional[MoveWork], moved: List[LeafDirectory], depth: int) -> LoadMultiFilesDesc:
        """
        Rewrites the root-level move into one move per untouched leaf, re-anchoring the last
        ``depth`` names of each leaf under the configured target directory.
        """
        if move_work is None or move_work.load_file_work is None:
            raise PlanInvariantError(
                "Merge-and-move task has no child move step with a load file descriptor to narrow")

        load_file_desc = move_work.load_file_work
        target_dirs = []
        for leaf in moved:
            target = load_file_desc.target_dir
            for segment in leaf.segments:
                target = FileIO.to_uri(target, segment)
            target_dirs.append(target)

        return LoadMultiFilesDesc(
            source_dirs=[leaf.path for leaf in moved],
            target_dirs=target_dirs,
            is_dfs_dir=load_file_desc.is_dfs_dir,
            columns=load_file_desc.columns,
            column_types=load_file_desc.column_types,
        )
