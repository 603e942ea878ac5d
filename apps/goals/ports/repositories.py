# apps/goals/ports/repositories.py
from abc import ABC, abstractmethod
from typing import List, Optional
from apps.goals.domain.entities import KeyResultEntity, ObjectiveEntity


class IObjectiveRepository(ABC):
    @abstractmethod
    def get_snapshot(self, objective_id: int) -> Optional[ObjectiveEntity]:
        """Cel + KR + dzieci (id, postęp) + liczniki zadań głównych podpiętych projektów."""
        pass

    @abstractmethod
    def update_progress(self, objective_id: int, progress: int) -> None:
        """Zapisuje tylko pole progress."""
        pass


class IKeyResultRepository(ABC):
    @abstractmethod
    def record_update(self, key_result_id: int, new_value: float, author_id: int,
                      note: Optional[str] = None) -> KeyResultEntity:
        """
        Atomowo: wpis historii (previous -> new) + nowa wartość current_value.
        Rzuca KeyResultNotFound. Zwraca KR już po zmianie.
        """
        pass


class IGoalLinkRepository(ABC):
    @abstractmethod
    def objective_ids_for_task(self, task_id: int) -> List[int]:
        """Cele podpięte bezpośrednio do zadania (ObjectiveTask)."""
        pass

    @abstractmethod
    def objective_ids_for_key_result_tasks(self, task_id: int) -> List[int]:
        """Właściciele KR podpiętych do zadania (KeyResultTask)."""
        pass

    @abstractmethod
    def objective_ids_for_project(self, project_id: int) -> List[int]:
        pass

    @abstractmethod
    def get_task_project_id(self, task_id: int) -> Optional[int]:
        """None, jeśli zadanie nie istnieje albo nie ma projektu."""
        pass
