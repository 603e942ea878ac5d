# apps/goals/adapters/memory_repositories.py
import copy
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from apps.goals.domain.entities import (
    KeyResultEntity,
    ObjectiveEntity,
    ProgressSource,
    ProjectProgressEntity,
    SubObjectiveEntity,
)
from apps.goals.domain.exceptions import KeyResultNotFound
from apps.goals.ports.repositories import IGoalLinkRepository, IKeyResultRepository, IObjectiveRepository


@dataclass
class TaskRecord:
    id: int
    project_id: Optional[int] = None
    parent_task_id: Optional[int] = None
    completed: bool = False


@dataclass
class KeyResultUpdateRecord:
    key_result_id: int
    previous_value: float
    new_value: float
    author_id: int
    note: str = ""


class InMemoryGoalRepository(IObjectiveRepository, IKeyResultRepository, IGoalLinkRepository):
    """
    Wszystkie porty celów w pamięci (testy, próby bez bazy).
    Zapisy postępu trafiają też do `writes`, odczyty celów do `loads`.
    """

    def __init__(self):
        self.objectives: Dict[int, ObjectiveEntity] = {}
        self.key_results: Dict[int, KeyResultEntity] = {}
        self.tasks: Dict[int, TaskRecord] = {}
        self.updates: List[KeyResultUpdateRecord] = []

        self.objective_tasks: List[Tuple[int, int]] = []
        self.key_result_tasks: List[Tuple[int, int]] = []
        self.objective_projects: List[Tuple[int, int]] = []

        self.writes: List[Tuple[int, int]] = []
        self.loads: List[int] = []

    # --- Wypełnianie danymi ---

    def add_objective(self, objective_id: int, source: ProgressSource = ProgressSource.KEY_RESULTS,
                      progress: int = 0, parent_id: Optional[int] = None) -> ObjectiveEntity:
        objective = ObjectiveEntity(id=objective_id, progress=progress,
                                    progress_source=source, parent_id=parent_id)
        self.objectives[objective_id] = objective
        return objective

    def add_key_result(self, key_result_id: int, objective_id: int, start: float = 0,
                       current: float = 0, target: float = 100) -> KeyResultEntity:
        kr = KeyResultEntity(id=key_result_id, objective_id=objective_id, start_value=start,
                             current_value=current, target_value=target)
        self.key_results[key_result_id] = kr
        return kr

    def add_task(self, task_id: int, project_id: Optional[int] = None,
                 parent_task_id: Optional[int] = None, completed: bool = False) -> TaskRecord:
        task = TaskRecord(id=task_id, project_id=project_id,
                          parent_task_id=parent_task_id, completed=completed)
        self.tasks[task_id] = task
        return task

    def link_task(self, objective_id: int, task_id: int):
        self.objective_tasks.append((objective_id, task_id))

    def link_key_result_task(self, key_result_id: int, task_id: int):
        self.key_result_tasks.append((key_result_id, task_id))

    def link_project(self, objective_id: int, project_id: int):
        self.objective_projects.append((objective_id, project_id))

    # --- IObjectiveRepository ---

    def _project_progress(self, project_id: int) -> ProjectProgressEntity:
        top_level = [t for t in self.tasks.values()
                     if t.project_id == project_id and t.parent_task_id is None]
        return ProjectProgressEntity(
            project_id=project_id,
            total_tasks=len(top_level),
            completed_tasks=sum(1 for t in top_level if t.completed),
        )

    def get_snapshot(self, objective_id: int) -> Optional[ObjectiveEntity]:
        self.loads.append(objective_id)
        stored = self.objectives.get(objective_id)
        if stored is None:
            return None

        snapshot = copy.deepcopy(stored)
        snapshot.key_results = [copy.copy(kr) for kr in self.key_results.values()
                                if kr.objective_id == objective_id]
        snapshot.children = [SubObjectiveEntity(id=o.id, progress=o.progress)
                             for o in self.objectives.values() if o.parent_id == objective_id]
        snapshot.projects = [self._project_progress(p_id)
                             for o_id, p_id in self.objective_projects if o_id == objective_id]
        return snapshot

    def update_progress(self, objective_id: int, progress: int) -> None:
        self.writes.append((objective_id, progress))
        if objective_id in self.objectives:
            self.objectives[objective_id].progress = progress

    # --- IKeyResultRepository ---

    def record_update(self, key_result_id: int, new_value: float, author_id: int,
                      note: Optional[str] = None) -> KeyResultEntity:
        kr = self.key_results.get(key_result_id)
        if kr is None:
            raise KeyResultNotFound(key_result_id)

        self.updates.append(KeyResultUpdateRecord(
            key_result_id=key_result_id,
            previous_value=kr.current_value,
            new_value=new_value,
            author_id=author_id,
            note=note or "",
        ))
        kr.current_value = new_value
        return copy.copy(kr)

    # --- IGoalLinkRepository ---

    def objective_ids_for_task(self, task_id: int) -> List[int]:
        return [o_id for o_id, t_id in self.objective_tasks if t_id == task_id]

    def objective_ids_for_key_result_tasks(self, task_id: int) -> List[int]:
        return [self.key_results[kr_id].objective_id
                for kr_id, t_id in self.key_result_tasks
                if t_id == task_id and kr_id in self.key_results]

    def objective_ids_for_project(self, project_id: int) -> List[int]:
        return [o_id for o_id, p_id in self.objective_projects if p_id == project_id]

    def get_task_project_id(self, task_id: int) -> Optional[int]:
        task = self.tasks.get(task_id)
        return task.project_id if task else None
