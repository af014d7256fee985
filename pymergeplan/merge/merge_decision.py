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
from typing import ClassVar, Optional

from pymergeplan.merge.size_prober import ContentSummary


@dataclass(frozen=True)
class MergeDecision:
    """Whether one directory suffers from small files, and how many bytes a merge would read."""
    merge_needed: bool
    total_size: Optional[int] = None

    NO_MERGE: ClassVar['MergeDecision']

    @staticmethod
    def merge(total_size: int) -> 'MergeDecision':
        return MergeDecision(True, total_size)

    @staticmethod
    def decide(summary: Optional[ContentSummary], avg_size_threshold: int) -> 'MergeDecision':
        """
        Merge when there is more than one file and the integer average file size is strictly
        below ``avg_size_threshold``.

        An unmeasurable directory (None) is never merged. Several empty files are merged
        whenever the threshold is positive, e.g. the empty buckets of a bucketed table.
        """
        if summary is None:
            return MergeDecision.NO_MERGE
        if summary.file_count <= 1:
            return MergeDecision.NO_MERGE
        if summary.total_size // summary.file_count < avg_size_threshold:
            return MergeDecision.merge(summary.total_size)
        return MergeDecision.NO_MERGE


MergeDecision.NO_MERGE = MergeDecision(False)
