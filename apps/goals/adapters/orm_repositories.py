# apps/goals/adapters/orm_repositories.py
from contextlib import contextmanager
from typing import List, Optional

from django.db import DatabaseError, transaction
from django.db.models import Count, Q

from apps.goals.domain.entities import (
    KeyResultEntity,
    ObjectiveEntity,
    ProgressSource,
    ProjectProgressEntity,
    SubObjectiveEntity,
)
from apps.goals.domain.exceptions import KeyResultNotFound, StoreFailure
from apps.goals.models import KeyResult as KeyResultModel
from apps.goals.models import KeyResultTask, KeyResultUpdate, Objective as ObjectiveModel
from apps.goals.models import ObjectiveProject, ObjectiveTask
from apps.goals.ports.repositories import IGoalLinkRepository, IKeyResultRepository, IObjectiveRepository
from apps.projects.models import Project
from apps.tasks.domain.entities import TaskStatus
from apps.tasks.models import Task


@contextmanager
def store_errors():
    """Błędy bazy wychodzą z adaptera jako StoreFailure."""
    try:
        yield
    except DatabaseError as exc:
        raise StoreFailure(str(exc)) from exc


class DjangoObjectiveRepository(IObjectiveRepository):
    def to_entity(self, model: ObjectiveModel, projects=()) -> ObjectiveEntity:
        """Konwertuje Model Django -> migawkę dla strategii agregacji."""
        return ObjectiveEntity(
            id=model.id,
            title=model.title,
            progress=model.progress,
            progress_source=ProgressSource(model.progress_source),
            parent_id=model.parent_id,
            key_results=[kr.to_entity() for kr in model.key_results.all()],
            children=[SubObjectiveEntity(id=c.id, progress=c.progress) for c in model.children.all()],
            projects=list(projects),
        )

    def _project_progress(self, objective_id: int) -> List[ProjectProgressEntity]:
        # Tylko zadania główne (parent_task IS NULL); jedno zapytanie z agregacją
        top_level = Q(tasks__parent_task__isnull=True)
        qs = Project.objects.filter(objective_links__objective_id=objective_id).annotate(
            total=Count('tasks', filter=top_level, distinct=True),
            done=Count('tasks', filter=top_level & Q(tasks__status=TaskStatus.DONE.value), distinct=True),
        ).order_by('id')

        return [
            ProjectProgressEntity(project_id=p.id, total_tasks=p.total, completed_tasks=p.done)
            for p in qs
        ]

    def get_snapshot(self, objective_id: int) -> Optional[ObjectiveEntity]:
        with store_errors():
            try:
                model = ObjectiveModel.objects.prefetch_related('key_results', 'children').get(id=objective_id)
            except ObjectiveModel.DoesNotExist:
                return None

            projects = []
            if model.progress_source == ProgressSource.PROJECTS.value:
                projects = self._project_progress(model.id)

            return self.to_entity(model, projects)

    def update_progress(self, objective_id: int, progress: int) -> None:
        with store_errors():
            ObjectiveModel.objects.filter(id=objective_id).update(progress=progress)


class DjangoKeyResultRepository(IKeyResultRepository):
    def record_update(self, key_result_id: int, new_value: float, author_id: int,
                      note: Optional[str] = None) -> KeyResultEntity:
        with store_errors():
            with transaction.atomic():
                try:
                    kr = KeyResultModel.objects.select_for_update().get(id=key_result_id)
                except KeyResultModel.DoesNotExist:
                    raise KeyResultNotFound(key_result_id)

                KeyResultUpdate.objects.create(
                    key_result=kr,
                    previous_value=kr.current_value,
                    new_value=new_value,
                    note=note or "",
                    author_id=author_id,
                )
                # update() zamiast save(): nie odpalamy sygnałów KeyResult
                KeyResultModel.objects.filter(id=kr.id).update(current_value=new_value)

        kr.current_value = new_value
        return kr.to_entity()


class DjangoGoalLinkRepository(IGoalLinkRepository):
    def objective_ids_for_task(self, task_id: int) -> List[int]:
        with store_errors():
            qs = ObjectiveTask.objects.filter(task_id=task_id).order_by('id')
            return list(qs.values_list('objective_id', flat=True))

    def objective_ids_for_key_result_tasks(self, task_id: int) -> List[int]:
        with store_errors():
            qs = KeyResultTask.objects.filter(task_id=task_id).order_by('id')
            return list(qs.values_list('key_result__objective_id', flat=True))

    def objective_ids_for_project(self, project_id: int) -> List[int]:
        with store_errors():
            qs = ObjectiveProject.objects.filter(project_id=project_id).order_by('id')
            return list(qs.values_list('objective_id', flat=True))

    def get_task_project_id(self, task_id: int) -> Optional[int]:
        with store_errors():
            return Task.objects.filter(id=task_id).values_list('project_id', flat=True).first()
