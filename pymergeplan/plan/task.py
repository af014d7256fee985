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
from typing import Any, List, Optional

from pymergeplan.plan.map_work import MapWork, MapWorkProvider
from pymergeplan.plan.move_work import MoveWork


@dataclass(eq=False)
class Task:
    """
    A node of the task graph built by the plan compiler. The resolver never runs tasks; it
    only reads and rewrites their work.
    """
    task_id: str
    work: Any = None
    child_tasks: List['Task'] = field(default_factory=list)

    def add_child(self, task: 'Task') -> 'Task':
        self.child_tasks.append(task)
        return self

    def get_map_work(self) -> MapWork:
        if not isinstance(self.work, MapWorkProvider):
            raise TypeError(f"Task {self.task_id} has no map-side work, got {type(self.work).__name__}")
        return self.work.get_map_work()

    def first_child(self) -> Optional['Task']:
        return self.child_tasks[0] if self.child_tasks else None

    def __repr__(self) -> str:
        return f"Task({self.task_id})"


@dataclass(frozen=True)
class CandidateTasks:
    """
    The three prebuilt alternatives of a merge branch point.

    ``merge_and_move_task`` runs the merge job and then its first child, a move task whose
    work gets narrowed to the directories that are moved untouched.
    """
    move_task: Task
    merge_task: Task
    merge_and_move_task: Task

    @staticmethod
    def from_list(tasks: List[Task]) -> 'CandidateTasks':
        """Builds the candidates from the positional (move, merge, merge-and-move) list."""
        if len(tasks) != 3:
            raise ValueError(f"Expected move, merge and merge-and-move tasks, got {len(tasks)} tasks")
        return CandidateTasks(move_task=tasks[0], merge_task=tasks[1], merge_and_move_task=tasks[2])

    def merge_and_move_move_work(self) -> Optional[MoveWork]:
        child = self.merge_and_move_task.first_child()
        if child is None or not isinstance(child.work, MoveWork):
            return None
        return child.work
