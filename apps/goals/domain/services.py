# apps/goals/domain/services.py
import logging
from typing import Iterable, List, Optional

from apps.goals.domain.entities import ObjectiveEntity
from apps.goals.domain.exceptions import GoalProgressError, ObjectiveNotFound, ProgressCycleError
from apps.goals.domain.progress import calculate, round_progress
from apps.goals.ports.repositories import IGoalLinkRepository, IKeyResultRepository, IObjectiveRepository

logger = logging.getLogger(__name__)


class GoalProgressService:
    """
    Przeliczanie postępu celów.

    Postęp liczymy od celu w górę drzewa: najpierw dziecko, potem rodzic.
    Cel MANUAL nigdy nie jest nadpisywany i zatrzymuje propagację.
    """

    def __init__(self, objective_repository: IObjectiveRepository,
                 key_result_repository: IKeyResultRepository,
                 link_repository: IGoalLinkRepository):
        self.objectives = objective_repository
        self.key_results = key_result_repository
        self.links = link_repository

    # --- Orkiestrator ---

    def recalculate_progress(self, objective_id: int) -> float:
        """Przelicza cel i jego przodków. Zwraca niezaokrągloną wartość dla objective_id."""
        objective = self._load(objective_id)

        if objective.is_manual():
            logger.debug("Objective %s is MANUAL, skipping recalculation", objective.id)
            return float(objective.progress)

        new_progress = self._apply(objective)
        self._propagate(objective)
        return new_progress

    def _load(self, objective_id: int) -> ObjectiveEntity:
        objective = self.objectives.get_snapshot(objective_id)
        if objective is None:
            raise ObjectiveNotFound(objective_id)
        return objective

    def _apply(self, objective: ObjectiveEntity) -> float:
        value = calculate(objective)
        rounded = round_progress(value)
        self.objectives.update_progress(objective.id, rounded)

        if rounded != objective.progress:
            logger.info("Objective %s progress %s -> %s (%s)",
                        objective.id, objective.progress, rounded, objective.progress_source.value)
        return value

    def _propagate(self, objective: ObjectiveEntity) -> None:
        # Hierarchia powinna być acykliczna, ale tego nie zakładamy
        visited = [objective.id]
        parent_id = objective.parent_id

        while parent_id is not None:
            if parent_id in visited:
                raise ProgressCycleError(visited + [parent_id])
            visited.append(parent_id)

            parent = self._load(parent_id)
            if parent.is_manual():
                break

            self._apply(parent)
            parent_id = parent.parent_id

    # --- Wyzwalacze (zmiana zadania / projektu) ---

    def objectives_for_task(self, task_id: int) -> List[int]:
        ids = list(self.links.objective_ids_for_task(task_id))
        ids += self.links.objective_ids_for_key_result_tasks(task_id)

        project_id = self.links.get_task_project_id(task_id)
        if project_id is not None:
            ids += self.links.objective_ids_for_project(project_id)

        # Każdy cel raz na zdarzenie, kolejność zachowana
        return list(dict.fromkeys(ids))

    def objectives_for_project(self, project_id: int) -> List[int]:
        return list(dict.fromkeys(self.links.objective_ids_for_project(project_id)))

    def recalculate_for_task(self, task_id: int) -> List[int]:
        return self.recalculate_many(self.objectives_for_task(task_id))

    def recalculate_for_project(self, project_id: int) -> List[int]:
        return self.recalculate_many(self.objectives_for_project(project_id))

    def recalculate_many(self, objective_ids: Iterable[int]) -> List[int]:
        """
        Best-effort: błąd jednej gałęzi jest logowany i nie blokuje pozostałych.
        Zwraca id celów przeliczonych bez błędu.
        """
        done = []
        for objective_id in dict.fromkeys(objective_ids):
            try:
                self.recalculate_progress(objective_id)
            except GoalProgressError:
                logger.exception("Goal progress recalculation failed for objective %s", objective_id)
                continue
            done.append(objective_id)
        return done

    # --- Aktualizacja KR ---

    def update_key_result_and_recalculate(self, key_result_id: int, new_value: float,
                                          author_id: int, note: Optional[str] = None) -> float:
        # record_update kończy transakcję zanim ruszymy cel
        key_result = self.key_results.record_update(key_result_id, new_value, author_id, note)
        return self.recalculate_progress(key_result.objective_id)
