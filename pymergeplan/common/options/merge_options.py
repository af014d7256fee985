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

from pymergeplan.common.memory_size import MemorySize
from pymergeplan.common.options.config_option import ConfigOption
from pymergeplan.common.options.config_options import ConfigOptions
from pymergeplan.common.options.options import Options


class MergeOptions:
    """Options read by the small-files merge resolver."""

    TARGET_SIZE_PER_TASK: ConfigOption[MemorySize] = (
        ConfigOptions.key("merge.size.per-task")
        .memory_type()
        .default_value(MemorySize.of_bytes(256 * 1000 * 1000))
        .with_description(
            "Target split size of the merge job. The resolver installs the larger of this value "
            "and 'merge.small-files.avg-size' as min and max split size of the merge work."
        )
    )

    SMALL_FILES_AVG_SIZE: ConfigOption[MemorySize] = (
        ConfigOptions.key("merge.small-files.avg-size")
        .memory_type()
        .default_value(MemorySize.of_bytes(16 * 1000 * 1000))
        .with_description(
            "When the average output file size of a directory is smaller than this number, "
            "the resolver schedules a merge of that directory."
        )
    )

    PROBE_PARALLELISM: ConfigOption[int] = (
        ConfigOptions.key("merge.probe.parallelism")
        .int_type()
        .default_value(1)
        .with_description(
            "Number of threads used to measure partition directories. "
            "1 measures them one after another on the calling thread."
        )
    )

    def __init__(self, options):
        self.options = Options.of(options)

    def target_size(self) -> int:
        return self.options.get(MergeOptions.TARGET_SIZE_PER_TASK).get_bytes()

    def avg_size_threshold(self) -> int:
        return self.options.get(MergeOptions.SMALL_FILES_AVG_SIZE).get_bytes()

    def effective_target_size(self) -> int:
        return max(self.target_size(), self.avg_size_threshold())

    def probe_parallelism(self) -> int:
        parallelism = self.options.get(MergeOptions.PROBE_PARALLELISM)
        if parallelism < 1:
            raise ValueError(f"{MergeOptions.PROBE_PARALLELISM.key()} must be >= 1, got {parallelism}")
        return parallelism
