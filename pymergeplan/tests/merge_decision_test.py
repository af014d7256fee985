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

import unittest

from parameterized import parameterized

from pymergeplan.merge.merge_decision import MergeDecision
from pymergeplan.merge.size_prober import ContentSummary


class MergeDecisionTest(unittest.TestCase):

    def test_unmeasurable_directory_is_not_merged(self):
        self.assertEqual(MergeDecision.decide(None, 1 << 30), MergeDecision.NO_MERGE)

    @parameterized.expand([
        (0, 0),
        (0, 1),
        (5, 1),
        (1 << 40, 1),
    ])
    def test_single_file_or_less_is_not_merged(self, total_size, file_count):
        decision = MergeDecision.decide(ContentSummary(total_size, file_count), 1 << 40)
        self.assertFalse(decision.merge_needed)

    @parameterized.expand([
        # total, files, threshold, merge
        (30, 3, 15, True),
        (44, 3, 15, True),
        (45, 3, 15, False),
        (46, 3, 15, False),
        (200, 2, 15, False),
        (2, 2, 15, True),
        (29, 2, 15, True),
        (30, 2, 15, False),
    ])
    def test_average_below_threshold_is_merged(self, total_size, file_count, threshold, merge):
        decision = MergeDecision.decide(ContentSummary(total_size, file_count), threshold)
        self.assertEqual(decision.merge_needed, merge)
        if merge:
            self.assertEqual(decision.total_size, total_size)
        else:
            self.assertIsNone(decision.total_size)

    def test_many_empty_files_are_merged(self):
        decision = MergeDecision.decide(ContentSummary(0, 8), 1)
        self.assertEqual(decision, MergeDecision.merge(0))

    def test_empty_files_with_zero_threshold_are_not_merged(self):
        self.assertFalse(MergeDecision.decide(ContentSummary(0, 8), 0).merge_needed)


if __name__ == '__main__':
    unittest.main()
