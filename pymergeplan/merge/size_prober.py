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
from dataclasses import dataclass
from typing import Optional

import pyarrow
import pyarrow.fs

from pymergeplan.common.file_io import FILE_OP_LOGGER, FileIO

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentSummary:
    """Total length and number of the regular files below a directory."""
    total_size: int
    file_count: int

    def average_size(self) -> int:
        return self.total_size // self.file_count if self.file_count > 0 else 0


class SizeProber:
    """
    Measures the files below a directory, through any number of sub-directories.

    Every call is an independent walk; nothing is cached between calls.
    """

    def __init__(self, file_io: FileIO):
        self.file_io = file_io

    def measure(self, path: str) -> Optional[ContentSummary]:
        """
        Returns the summary of all regular files below ``path``, or None when any directory of
        the subtree cannot be listed. A partial sum is never returned.
        """
        total_size = 0
        file_count = 0
        pending = [path]
        while pending:
            directory = pending.pop()
            try:
                file_infos = self.file_io.list_status(directory, allow_not_found=False)
            except (OSError, pyarrow.ArrowException) as e:
                logger.debug("Failed to list %s while measuring %s: %s", directory, path, e)
                return None

            for info in file_infos:
                FILE_OP_LOGGER.debug("Resolver looking at %s", info.path)
                if info.type == pyarrow.fs.FileType.Directory:
                    pending.append(FileIO.to_uri(directory, info.base_name))
                elif info.type == pyarrow.fs.FileType.File:
                    total_size += info.size or 0
                    file_count += 1

        return ContentSummary(total_size, file_count)
