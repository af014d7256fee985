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

from pymergeplan.plan.descriptors import (LoadFileDesc, LoadMultiFilesDesc,
                                          LoadTableDesc)


@dataclass
class MoveWork:
    """
    Work of a move task. Exactly one of the descriptors is normally set: a single
    directory move, a table/partition load, or a list of directory moves.
    """
    load_file_work: Optional[LoadFileDesc] = None
    load_table_work: Optional[LoadTableDesc] = None
    multi_files_desc: Optional[LoadMultiFilesDesc] = None

    def set_multi_files_desc(self, multi_files_desc: LoadMultiFilesDesc):
        self.load_file_work = None
        self.load_table_work = None
        self.multi_files_desc = multi_files_desc
