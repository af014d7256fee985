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

from dataclasses import dataclass
from typing import Optional

from pymergeplan.plan.dynamic_partition_ctx import DynamicPartitionCtx
from pymergeplan.plan.list_bucketing_ctx import ListBucketingCtx
from pymergeplan.plan.task import CandidateTasks


@dataclass(frozen=True)
class MergeResolverContext:
    """
    Everything the merge resolver needs at run time. Built by the plan compiler, shipped with
    the plan (it pickles), and never mutated by the resolver.

    ``dir`` is the directory the producing stage writes to.
    """
    candidate_tasks: CandidateTasks
    dir: str
    dp_ctx: Optional[DynamicPartitionCtx] = None
    lb_ctx: Optional[ListBucketingCtx] = None

    def has_dynamic_partitions(self) -> bool:
        return self.dp_ctx is not None and self.dp_ctx.get_num_dp_cols() > 0

    def list_bucketing_level(self) -> int:
        return 0 if self.lb_ctx is None else self.lb_ctx.calculate_list_bucketing_level()

    def depth(self) -> int:
        """Number of trailing directory levels that make up one partition / skewed-value leaf."""
        num_dp_cols = self.dp_ctx.get_num_dp_cols() if self.has_dynamic_partitions() else 0
        return num_dp_cols + self.list_bucketing_level()
