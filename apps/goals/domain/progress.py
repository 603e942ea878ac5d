# apps/goals/domain/progress.py
"""
Strategie agregacji postępu celu.

Czyste funkcje - dostają migawkę danych, zwracają procent 0-100 (float).
Zaokrąglamy dopiero przy zapisie (round_progress), żeby błąd nie kumulował
się na kolejnych poziomach hierarchii.
"""
import math
from typing import Callable, Dict, Iterable

from .entities import (
    KeyResultEntity,
    ObjectiveEntity,
    ProgressSource,
    ProjectProgressEntity,
    SubObjectiveEntity,
)


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(high, max(low, value))


def key_result_progress(kr: KeyResultEntity) -> float:
    """Wkład pojedynczego KR. Działa też dla zakresów malejących (target < start)."""
    span = kr.target_value - kr.start_value
    if span == 0:
        return 100.0 if kr.current_value >= kr.target_value else 0.0
    return _clamp((kr.current_value - kr.start_value) / span * 100)


def from_key_results(key_results: Iterable[KeyResultEntity]) -> float:
    key_results = list(key_results)
    if not key_results:
        return 0.0
    return sum(key_result_progress(kr) for kr in key_results) / len(key_results)


def from_sub_objectives(children: Iterable[SubObjectiveEntity]) -> float:
    children = list(children)
    if not children:
        return 0.0
    return sum(child.progress for child in children) / len(children)


def from_projects(projects: Iterable[ProjectProgressEntity]) -> float:
    total = 0
    completed = 0
    for project in projects:
        total += project.total_tasks
        completed += project.completed_tasks

    if total == 0:
        return 0.0
    return completed / total * 100


def manual(stored_progress: int) -> float:
    return float(stored_progress)


def round_progress(value: float) -> int:
    # Math.round-style: 0.5 zawsze w górę (round() w Pythonie zaokrągla do parzystej)
    return int(_clamp(math.floor(value + 0.5)))


STRATEGIES: Dict[ProgressSource, Callable[[ObjectiveEntity], float]] = {
    ProgressSource.MANUAL: lambda o: manual(o.progress),
    ProgressSource.KEY_RESULTS: lambda o: from_key_results(o.key_results),
    ProgressSource.SUB_OBJECTIVES: lambda o: from_sub_objectives(o.children),
    ProgressSource.PROJECTS: lambda o: from_projects(o.projects),
}


def calculate(objective: ObjectiveEntity) -> float:
    return STRATEGIES[objective.progress_source](objective)
