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
from typing import List


@dataclass(frozen=True)
class ListBucketingCtx:
    """
    Skewed-value layout of a table. When stored as sub-directories every skewed column adds
    one directory level (``col=value`` or the default directory) below the partition.
    """
    skewed_col_names: List[str] = field(default_factory=list)
    skewed_col_values: List[List[str]] = field(default_factory=list)
    stored_as_sub_directories: bool = False

    def is_skewed_stored_as_dir(self) -> bool:
        return self.stored_as_sub_directories and len(self.skewed_col_names) > 0

    def calculate_list_bucketing_level(self) -> int:
        return len(self.skewed_col_names) if self.is_skewed_stored_as_dir() else 0
