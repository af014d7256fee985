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

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pymergeplan.plan.descriptors import PartitionDesc, TableDesc


class MapWorkProvider(ABC):
    """Anything an execution engine runs that has a map-side work unit."""

    @abstractmethod
    def get_map_work(self) -> 'MapWork':
        """Returns the map-side work unit, the one the merge resolver rewrites."""


@dataclass
class MapWork(MapWorkProvider):
    """
    Map-side work unit of a merge job.

    ``path_to_partition_info`` and ``path_to_aliases`` name the input directories of the job;
    the split-size fields size its parallelism.
    """
    path_to_partition_info: Dict[str, PartitionDesc] = field(default_factory=dict)
    path_to_aliases: Dict[str, List[str]] = field(default_factory=dict)
    max_split_size: Optional[int] = None
    min_split_size: Optional[int] = None
    min_split_size_per_node: Optional[int] = None
    min_split_size_per_rack: Optional[int] = None
    is_merge_from_resolver: bool = False

    def get_map_work(self) -> 'MapWork':
        return self

    def add_path_to_partition_info(self, path: str, partition_desc: PartitionDesc):
        self.path_to_partition_info[path] = partition_desc

    def add_path_to_alias(self, path: str, aliases: List[str]):
        self.path_to_aliases[path] = list(aliases)

    def remove_path_to_partition_info(self, path: str):
        self.path_to_partition_info.pop(path, None)

    def remove_path_to_alias(self, path: str):
        self.path_to_aliases.pop(path, None)

    def resolve_dynamic_partition_stored_as_sub_dirs_merge(
            self, path: str, table_desc: TableDesc, aliases: List[str], partition_desc: PartitionDesc):
        """Registers one partition / skewed-value directory as an input of the merge job."""
        if partition_desc.table_desc != table_desc:
            raise ValueError(
                f"Partition of {path} belongs to table {partition_desc.table_desc.name}, "
                f"expected {table_desc.name}")
        self.add_path_to_alias(path, aliases)
        self.add_path_to_partition_info(path, partition_desc)

    def set_split_sizes(self, split_size: int):
        self.max_split_size = split_size
        self.min_split_size = split_size
        self.min_split_size_per_node = split_size
        self.min_split_size_per_rack = split_size
        self.is_merge_from_resolver = True


@dataclass
class MapredWork(MapWorkProvider):
    """Classic map-reduce job: one map work, optionally one reduce side."""
    map_work: MapWork
    reduce_work: Optional[object] = None

    def get_map_work(self) -> MapWork:
        return self.map_work


@dataclass
class _VertexWork(MapWorkProvider):
    all_work: List[object] = field(default_factory=list)

    def get_map_work(self) -> MapWork:
        if not self.all_work or not isinstance(self.all_work[0], MapWork):
            raise ValueError(f"{type(self).__name__} does not start with a map work")
        return self.all_work[0]


@dataclass
class TezWork(_VertexWork):
    """DAG of vertices; the merge job is its first (map) vertex."""


@dataclass
class SparkWork(_VertexWork):
    """Spark job graph; the merge job is its first (map) work."""
