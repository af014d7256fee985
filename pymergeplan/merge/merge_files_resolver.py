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
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

import pyarrow

from pymergeplan.common.file_io import FileIO
from pymergeplan.common.options import Options
from pymergeplan.common.options.merge_options import MergeOptions
from pymergeplan.merge.merge_plan import MergePlan, TaskPlanKind
from pymergeplan.merge.partition_plan_builder import PartitionPlanBuilder
from pymergeplan.plan.plan_exception import PlanInvariantError
from pymergeplan.plan.resolver_context import MergeResolverContext
from pymergeplan.plan.task import CandidateTasks, Task

logger = logging.getLogger(__name__)


class ConditionalResolver(ABC):
    """Picks, at run time, which of the prebuilt tasks of a conditional branch point runs."""

    @abstractmethod
    def get_tasks(self, options, ctx) -> List[Task]:
        """
        Args:
            options: Dict or Options with the session configuration
            ctx: Resolver specific context built by the plan compiler

        Returns:
            The tasks to run
        """
        pass


class MergeFilesResolver(ConditionalResolver):
    """
    Chooses between moving the output of a stage as is, merging it, or merging part of it and
    moving the rest, based on the files the stage actually wrote.

    Filesystem trouble never fails the resolution: the worst outcome is the move-only task,
    which leaves small files in place but never loses data.
    """

    def __init__(self, file_io_factory: Optional[Callable[[str, Options], FileIO]] = None):
        self.file_io_factory = file_io_factory or FileIO

    def resolve(self, options, ctx: MergeResolverContext) -> MergePlan:
        """Computes the merge plan for ``ctx`` without touching any work object."""
        merge_options = MergeOptions(options)
        dir_path = ctx.dir

        try:
            file_io = self.file_io_factory(dir_path, merge_options.options)
            exists = file_io.exists(dir_path)
        except (OSError, pyarrow.ArrowException):
            logger.warning("Exception while checking %s, resolver returning move task", dir_path, exc_info=True)
            return MergePlan(kind=TaskPlanKind.MOVE_ONLY)

        if not exists:
            logger.info("Resolver returning move task for %s", dir_path)
            return MergePlan(kind=TaskPlanKind.MOVE_ONLY)

        builder = PartitionPlanBuilder(
            file_io,
            target_size=merge_options.effective_target_size(),
            avg_size_threshold=merge_options.avg_size_threshold(),
            probe_parallelism=merge_options.probe_parallelism(),
        )

        depth = ctx.depth()
        if depth == 0:
            return builder.build(dir_path, 0)

        candidates = ctx.candidate_tasks
        part_spec = ctx.dp_ctx.get_part_spec() if ctx.has_dynamic_partitions() else None
        return builder.build(
            dir_path,
            depth,
            map_work=candidates.merge_task.get_map_work(),
            move_work=candidates.merge_and_move_move_work(),
            part_spec=part_spec,
        )

    def get_tasks(self, options, ctx: MergeResolverContext) -> List[Task]:
        """Resolves ``ctx``, applies the plan to the selected task's work and returns that task."""
        plan = self.resolve(options, ctx)
        tasks = self.select_tasks(plan, ctx.candidate_tasks)
        if len(tasks) != 1:
            raise PlanInvariantError(f"Merge resolution must select exactly one task, got {tasks}")

        selected = tasks[0]
        if not plan.patch.is_empty():
            plan.patch.apply(selected.get_map_work(), ctx.candidate_tasks.merge_and_move_move_work())

        logger.info("Merge resolution for %s: %s, running %s", ctx.dir, plan, selected)
        return tasks

    def get_task(self, options, ctx: MergeResolverContext) -> Task:
        return self.get_tasks(options, ctx)[0]

    @staticmethod
    def select_tasks(plan: MergePlan, candidates: CandidateTasks) -> List[Task]:
        if plan.kind == TaskPlanKind.MOVE_ONLY:
            return [candidates.move_task]
        if plan.kind == TaskPlanKind.MERGE_ONLY:
            return [candidates.merge_task]
        if plan.kind == TaskPlanKind.MERGE_THEN_MOVE_SUBSET:
            return [candidates.merge_and_move_task]
        return []
