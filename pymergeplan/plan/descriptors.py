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
from typing import Dict, List, Optional


@dataclass(frozen=True)
class TableDesc:
    """Catalog-side description of the table the output belongs to."""
    name: str
    properties: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PartitionDesc:
    """A table plus the full partition spec (column -> value) of one input path."""
    table_desc: TableDesc
    partition_spec: Optional[Dict[str, str]] = None


@dataclass(frozen=True)
class LoadFileDesc:
    """Move of a whole output directory to ``target_dir``."""
    target_dir: str
    is_dfs_dir: bool = True
    columns: Optional[str] = None
    column_types: Optional[str] = None


@dataclass(frozen=True)
class LoadTableDesc:
    """Load of the output into a catalog table or partition."""
    table_desc: TableDesc
    partition_spec: Dict[str, Optional[str]] = field(default_factory=dict)
    replace: bool = True


@dataclass(frozen=True)
class LoadMultiFilesDesc:
    """Move of several source directories, each to its own target directory."""
    source_dirs: List[str]
    target_dirs: List[str]
    is_dfs_dir: bool = True
    columns: Optional[str] = None
    column_types: Optional[str] = None

    def __post_init__(self):
        if len(self.source_dirs) != len(self.target_dirs):
            raise ValueError(
                f"source_dirs and target_dirs must have the same length, "
                f"got {len(self.source_dirs)} and {len(self.target_dirs)}")

    def moves(self) -> List[tuple]:
        return list(zip(self.source_dirs, self.target_dirs))
