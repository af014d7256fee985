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

import pickle
import unittest
from collections import OrderedDict

from pymergeplan.plan.descriptors import (LoadFileDesc, LoadMultiFilesDesc,
                                          PartitionDesc, TableDesc)
from pymergeplan.plan.dynamic_partition_ctx import DynamicPartitionCtx
from pymergeplan.plan.list_bucketing_ctx import ListBucketingCtx
from pymergeplan.plan.map_work import MapredWork, MapWork, SparkWork, TezWork
from pymergeplan.plan.move_work import MoveWork
from pymergeplan.plan.plan_exception import PlanInvariantError
from pymergeplan.plan.resolver_context import MergeResolverContext
from pymergeplan.plan.task import CandidateTasks, Task
from pymergeplan.plan.work_patch import WorkPatch
from pymergeplan.tests.output_dir_fixture import TABLE, new_candidate_tasks


class CandidateTasksTest(unittest.TestCase):

    def test_from_list(self):
        tasks = [Task("move"), Task("merge"), Task("merge-and-move")]
        candidates = CandidateTasks.from_list(tasks)
        self.assertIs(candidates.move_task, tasks[0])
        self.assertIs(candidates.merge_task, tasks[1])
        self.assertIs(candidates.merge_and_move_task, tasks[2])

    def test_from_list_requires_three_tasks(self):
        with self.assertRaises(ValueError):
            CandidateTasks.from_list([Task("move"), Task("merge")])

    def test_merge_and_move_move_work(self):
        candidates = new_candidate_tasks("/out", "/warehouse/sales")
        move_work = candidates.merge_and_move_move_work()
        self.assertIsInstance(move_work, MoveWork)
        self.assertIsNot(move_work, candidates.move_task.work)
        self.assertIsNone(CandidateTasks.from_list([Task("a"), Task("b"), Task("c")]).merge_and_move_move_work())


class MapWorkProviderTest(unittest.TestCase):

    def test_every_engine_exposes_its_map_work(self):
        map_work = MapWork()
        self.assertIs(map_work.get_map_work(), map_work)
        self.assertIs(MapredWork(map_work).get_map_work(), map_work)
        self.assertIs(TezWork([map_work, object()]).get_map_work(), map_work)
        self.assertIs(SparkWork([map_work]).get_map_work(), map_work)
        self.assertIs(Task("merge", TezWork([map_work])).get_map_work(), map_work)

    def test_vertex_work_without_map_work(self):
        with self.assertRaises(ValueError):
            TezWork([]).get_map_work()

    def test_task_without_map_work(self):
        with self.assertRaises(TypeError):
            Task("move", MoveWork()).get_map_work()

    def test_register_partition_directory(self):
        map_work = MapWork()
        aliases = ["sales"]
        desc = PartitionDesc(TABLE, {"ds": "1"})
        map_work.resolve_dynamic_partition_stored_as_sub_dirs_merge("/out/ds=1", TABLE, aliases, desc)
        aliases.append("other")

        self.assertEqual(map_work.path_to_partition_info, {"/out/ds=1": desc})
        self.assertEqual(map_work.path_to_aliases, {"/out/ds=1": ["sales"]})
        with self.assertRaises(ValueError):
            map_work.resolve_dynamic_partition_stored_as_sub_dirs_merge(
                "/out/ds=2", TableDesc("default.other"), aliases, desc)


class ContextTest(unittest.TestCase):

    def test_dynamic_partition_ctx(self):
        dp_ctx = DynamicPartitionCtx(OrderedDict([("country", "NO"), ("ds", None), ("hr", None)]))
        self.assertEqual(dp_ctx.get_num_dp_cols(), 2)
        self.assertEqual(dp_ctx.get_part_spec(), OrderedDict([("country", "NO"), ("ds", None), ("hr", None)]))
        with self.assertRaises(ValueError):
            DynamicPartitionCtx({"ds": None}, num_dp_cols=2)

    def test_list_bucketing_level(self):
        self.assertEqual(ListBucketingCtx(["key", "value"], [["1", "a"]], True).calculate_list_bucketing_level(), 2)
        self.assertEqual(ListBucketingCtx(["key"], [["1"]], False).calculate_list_bucketing_level(), 0)
        self.assertEqual(ListBucketingCtx().calculate_list_bucketing_level(), 0)

    def test_depth(self):
        candidates = new_candidate_tasks("/out", "/warehouse/sales")
        lb_ctx = ListBucketingCtx(["key"], [["1"]], True)
        dp_ctx = DynamicPartitionCtx(OrderedDict([("ds", None), ("hr", None)]))

        self.assertEqual(MergeResolverContext(candidates, "/out").depth(), 0)
        self.assertEqual(MergeResolverContext(candidates, "/out", lb_ctx=lb_ctx).depth(), 1)
        self.assertEqual(MergeResolverContext(candidates, "/out", dp_ctx=dp_ctx).depth(), 2)
        self.assertEqual(MergeResolverContext(candidates, "/out", dp_ctx, lb_ctx).depth(), 3)
        static_only = DynamicPartitionCtx({"ds": "1"})
        self.assertFalse(MergeResolverContext(candidates, "/out", dp_ctx=static_only).has_dynamic_partitions())
        self.assertEqual(MergeResolverContext(candidates, "/out", dp_ctx=static_only).depth(), 0)

    def test_context_pickles(self):
        candidates = new_candidate_tasks("/out", "/warehouse/sales")
        ctx = MergeResolverContext(
            candidates, "/out", DynamicPartitionCtx({"ds": None}), ListBucketingCtx(["key"], [["1"]], True))

        restored = pickle.loads(pickle.dumps(ctx))
        self.assertEqual(restored.dir, "/out")
        self.assertEqual(restored.dp_ctx, ctx.dp_ctx)
        self.assertEqual(restored.lb_ctx, ctx.lb_ctx)
        self.assertEqual(restored.candidate_tasks.merge_task.get_map_work(), candidates.merge_task.get_map_work())
        self.assertIs(restored.candidate_tasks.merge_task.work, restored.candidate_tasks.merge_and_move_task.work)


class WorkPatchTest(unittest.TestCase):

    def test_empty_patch_changes_nothing(self):
        map_work = MapWork({"/out": PartitionDesc(TABLE)}, {"/out": ["/out"]})
        WorkPatch.empty().apply(map_work)
        WorkPatch.empty().apply(None)
        self.assertEqual(map_work, MapWork({"/out": PartitionDesc(TABLE)}, {"/out": ["/out"]}))

    def test_apply(self):
        map_work = MapWork({"/out": PartitionDesc(TABLE)}, {"/out": ["/out"]})
        move_work = MoveWork(load_file_work=LoadFileDesc("/warehouse/sales"))
        desc = PartitionDesc(TABLE, {"ds": "2"})
        multi = LoadMultiFilesDesc(["/out/ds=1"], ["/warehouse/sales/ds=1"])
        patch = WorkPatch(
            removed_paths=("/out",),
            path_to_partition_info={"/out/ds=2": desc},
            path_to_aliases={"/out/ds=2": ["/out"]},
            split_size=15,
            multi_files_desc=multi,
        )

        patch.apply(map_work, move_work)

        self.assertEqual(map_work.path_to_partition_info, {"/out/ds=2": desc})
        self.assertEqual(map_work.path_to_aliases, {"/out/ds=2": ["/out"]})
        self.assertEqual(
            (map_work.max_split_size, map_work.min_split_size,
             map_work.min_split_size_per_node, map_work.min_split_size_per_rack),
            (15, 15, 15, 15))
        self.assertTrue(map_work.is_merge_from_resolver)
        self.assertIsNone(move_work.load_file_work)
        self.assertIsNone(move_work.load_table_work)
        self.assertEqual(move_work.multi_files_desc, multi)

    def test_narrowing_needs_move_work(self):
        patch = WorkPatch(multi_files_desc=LoadMultiFilesDesc(["/out/ds=1"], ["/t/ds=1"]))
        with self.assertRaises(PlanInvariantError):
            patch.apply(MapWork(), None)

    def test_multi_files_desc_lengths_must_match(self):
        with self.assertRaises(ValueError):
            LoadMultiFilesDesc(["/out/ds=1", "/out/ds=2"], ["/t/ds=1"])


if __name__ == '__main__':
    unittest.main()
