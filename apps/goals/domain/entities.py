# apps/goals/domain/entities.py
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ProgressSource(str, Enum):
    MANUAL = 'MANUAL'
    KEY_RESULTS = 'KEY_RESULTS'
    SUB_OBJECTIVES = 'SUB_OBJECTIVES'
    PROJECTS = 'PROJECTS'


@dataclass
class KeyResultEntity:
    id: Optional[int]
    objective_id: int
    start_value: float = 0.0
    current_value: float = 0.0
    target_value: float = 0.0
    name: str = ""
    unit: str = ""


@dataclass
class SubObjectiveEntity:
    """Dziecko celu - do średniej potrzebny jest tylko zapisany postęp."""
    id: int
    progress: int = 0


@dataclass
class ProjectProgressEntity:
    # Liczymy tylko zadania główne (bez podzadań)
    project_id: int
    total_tasks: int = 0
    completed_tasks: int = 0


@dataclass
class ObjectiveEntity:
    id: int
    title: str = ""
    progress: int = 0  # 0 - 100, zapisany w bazie
    progress_source: ProgressSource = ProgressSource.KEY_RESULTS
    parent_id: Optional[int] = None

    # Migawka relacji potrzebna strategiom agregacji
    key_results: List[KeyResultEntity] = field(default_factory=list)
    children: List[SubObjectiveEntity] = field(default_factory=list)
    projects: List[ProjectProgressEntity] = field(default_factory=list)

    def is_manual(self) -> bool:
        return self.progress_source == ProgressSource.MANUAL
