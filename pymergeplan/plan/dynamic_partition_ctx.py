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

from collections import OrderedDict
from typing import Dict, Optional


class DynamicPartitionCtx:
    """
    Partition columns of an insert whose trailing values are only known once the data is
    written.

    ``part_spec`` is ordered like the table's partition columns; static columns carry their
    value, dynamic columns map to None.
    """

    def __init__(self, part_spec: Dict[str, Optional[str]], num_dp_cols: Optional[int] = None):
        self.part_spec = OrderedDict(part_spec)
        if num_dp_cols is None:
            num_dp_cols = sum(1 for value in self.part_spec.values() if value is None)
        if num_dp_cols < 0 or num_dp_cols > len(self.part_spec):
            raise ValueError(
                f"num_dp_cols must be between 0 and {len(self.part_spec)}, got {num_dp_cols}")
        self.num_dp_cols = num_dp_cols

    def get_part_spec(self) -> 'OrderedDict[str, Optional[str]]':
        return OrderedDict(self.part_spec)

    def get_num_dp_cols(self) -> int:
        return self.num_dp_cols

    def __eq__(self, other) -> bool:
        if not isinstance(other, DynamicPartitionCtx):
            return False
        return self.part_spec == other.part_spec and self.num_dp_cols == other.num_dp_cols

    def __hash__(self) -> int:
        return hash((tuple(self.part_spec.items()), self.num_dp_cols))

    def __repr__(self) -> str:
        return f"DynamicPartitionCtx(part_spec={dict(self.part_spec)}, num_dp_cols={self.num_dp_cols})"
