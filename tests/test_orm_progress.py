import pytest
from django.db import DatabaseError, connection
from django.db.models.query import QuerySet
from django.test.utils import CaptureQueriesContext

from apps.goals.adapters.orm_repositories import DjangoGoalLinkRepository, DjangoObjectiveRepository
from apps.goals.domain.entities import ProgressSource
from apps.goals.domain.exceptions import KeyResultNotFound, ObjectiveNotFound, StoreFailure
from apps.goals.models import (
    KeyResult,
    KeyResultTask,
    KeyResultUpdate,
    Objective,
    ObjectiveProject,
    ObjectiveTask,
)
from apps.goals.services.progress_service import get_progress_service
from apps.projects.models import Project
from apps.tasks.models import Task

pytestmark = pytest.mark.django_db


def updates_in(queries):
    return [q['sql'] for q in queries if q['sql'].lstrip().upper().startswith('UPDATE')]


@pytest.fixture
def project(user):
    return Project.objects.create(user=user, title="Nowa strona")


def make_tasks(user, project, done, todo):
    tasks = []
    for i in range(done):
        tasks.append(Task.objects.create(user=user, project=project, title=f"done {i}", status='done'))
    for i in range(todo):
        tasks.append(Task.objects.create(user=user, project=project, title=f"todo {i}", status='todo'))
    return tasks


@pytest.mark.usefixtures('no_auto_recalculate')
class TestDjangoRepositories:
    def test_snapshot_counts_only_top_level_tasks(self, user, project):
        objective = Objective.objects.create(user=user, title="Launch", progress_source='PROJECTS')
        ObjectiveProject.objects.create(objective=objective, project=project)
        parent, *_ = make_tasks(user, project, done=1, todo=3)
        Task.objects.create(user=user, project=project, parent_task=parent, title="sub", status='done')
        Task.objects.create(user=user, project=project, parent_task=parent, title="sub 2", status='done')

        snapshot = DjangoObjectiveRepository().get_snapshot(objective.id)

        assert snapshot.progress_source == ProgressSource.PROJECTS
        assert len(snapshot.projects) == 1
        assert (snapshot.projects[0].total_tasks, snapshot.projects[0].completed_tasks) == (4, 1)

        assert get_progress_service().recalculate_progress(objective.id) == 25
        objective.refresh_from_db()
        assert objective.progress == 25

    def test_missing_objective(self):
        assert DjangoObjectiveRepository().get_snapshot(404) is None
        with pytest.raises(ObjectiveNotFound):
            get_progress_service().recalculate_progress(404)

    def test_key_results_scenario(self, user):
        objective = Objective.objects.create(user=user, title="Sprzedaż")
        KeyResult.objects.create(objective=objective, name="Klienci", start_value=0, current_value=5, target_value=10)
        KeyResult.objects.create(objective=objective, name="Umowy", start_value=10, current_value=10, target_value=10)

        get_progress_service().recalculate_progress(objective.id)

        objective.refresh_from_db()
        assert objective.progress == 75

    def test_manual_objective_is_not_written(self, user):
        objective = Objective.objects.create(user=user, title="Ręczny", progress_source='MANUAL', progress=40)
        KeyResult.objects.create(objective=objective, name="KR", current_value=10, target_value=10)

        with CaptureQueriesContext(connection) as ctx:
            result = get_progress_service().recalculate_progress(objective.id)

        assert result == 40
        assert updates_in(ctx.captured_queries) == []

    def test_links_for_task(self, user, project):
        direct = Objective.objects.create(user=user, title="Bezpośredni")
        via_kr = Objective.objects.create(user=user, title="Przez KR")
        via_project = Objective.objects.create(user=user, title="Przez projekt", progress_source='PROJECTS')
        task = Task.objects.create(user=user, project=project, title="Zadanie")
        kr = KeyResult.objects.create(objective=via_kr, name="KR", target_value=1)

        ObjectiveTask.objects.create(objective=direct, task=task)
        KeyResultTask.objects.create(key_result=kr, task=task)
        ObjectiveProject.objects.create(objective=via_project, project=project)
        ObjectiveProject.objects.create(objective=direct, project=project)

        links = DjangoGoalLinkRepository()
        assert links.get_task_project_id(task.id) == project.id
        assert links.get_task_project_id(404) is None
        assert get_progress_service().objectives_for_task(task.id) == [direct.id, via_kr.id, via_project.id]

    def test_unlinked_task_performs_no_writes(self, user):
        Objective.objects.create(user=user, title="Cel")
        task = Task.objects.create(user=user, title="Luźne zadanie")

        with CaptureQueriesContext(connection) as ctx:
            assert get_progress_service().recalculate_for_task(task.id) == []
            assert get_progress_service().recalculate_for_task(404) == []

        assert updates_in(ctx.captured_queries) == []

    def test_database_errors_become_store_failure(self, user, monkeypatch):
        objective = Objective.objects.create(user=user, title="Cel")

        def broken_update(self, **kwargs):
            raise DatabaseError("disk I/O error")

        monkeypatch.setattr(QuerySet, 'update', broken_update)

        with pytest.raises(StoreFailure) as exc_info:
            get_progress_service().recalculate_progress(objective.id)
        assert isinstance(exc_info.value.__cause__, DatabaseError)


@pytest.mark.usefixtures('no_auto_recalculate')
class TestKeyResultUpdatePathway:
    def test_update_is_recorded_and_objective_recalculated(self, user):
        objective = Objective.objects.create(user=user, title="Sprzedaż")
        kr = KeyResult.objects.create(objective=objective, name="Klienci", start_value=0, current_value=2, target_value=10)

        result = get_progress_service().update_key_result_and_recalculate(kr.id, 5, author_id=user.id, note="tydzień 3")

        assert result == 50
        kr.refresh_from_db()
        objective.refresh_from_db()
        assert kr.current_value == 5
        assert objective.progress == 50

        update = KeyResultUpdate.objects.get(key_result=kr)
        assert (update.previous_value, update.new_value) == (2, 5)
        assert update.author == user
        assert update.note == "tydzień 3"

    def test_missing_key_result(self, user):
        with pytest.raises(KeyResultNotFound):
            get_progress_service().update_key_result_and_recalculate(404, 5, author_id=user.id)
        assert KeyResultUpdate.objects.count() == 0

    def test_audit_record_and_value_change_are_atomic(self, user, monkeypatch):
        objective = Objective.objects.create(user=user, title="Sprzedaż")
        kr = KeyResult.objects.create(objective=objective, name="Klienci", current_value=2, target_value=10)

        def broken_update(self, **kwargs):
            raise DatabaseError("deadlock detected")

        monkeypatch.setattr(QuerySet, 'update', broken_update)

        with pytest.raises(StoreFailure):
            get_progress_service().update_key_result_and_recalculate(kr.id, 5, author_id=user.id)

        monkeypatch.undo()
        kr.refresh_from_db()
        assert kr.current_value == 2
        assert KeyResultUpdate.objects.count() == 0

    def test_update_records_are_append_only(self, user):
        objective = Objective.objects.create(user=user, title="Cel")
        kr = KeyResult.objects.create(objective=objective, name="KR", target_value=10)
        get_progress_service().update_key_result_and_recalculate(kr.id, 3, author_id=user.id)
        update = KeyResultUpdate.objects.get()

        update.note = "poprawka"
        with pytest.raises(ValueError):
            update.save()
        with pytest.raises(ValueError):
            update.delete()

        # Kaskada z KR nadal działa
        kr.delete()
        assert KeyResultUpdate.objects.count() == 0


class TestAutomaticTriggers:
    def test_three_level_chain_follows_task_completion(self, user, project):
        root = Objective.objects.create(user=user, title="C", progress_source='SUB_OBJECTIVES')
        Objective.objects.create(user=user, title="D", progress_source='MANUAL', progress=100, parent=root)
        middle = Objective.objects.create(user=user, title="B", progress_source='SUB_OBJECTIVES', parent=root)
        leaf = Objective.objects.create(user=user, title="A", progress_source='PROJECTS', parent=middle)
        ObjectiveProject.objects.create(objective=leaf, project=project)
        tasks = make_tasks(user, project, done=0, todo=4)

        tasks[0].status = 'done'
        tasks[0].save()

        values = dict(Objective.objects.values_list('title', 'progress'))
        assert values['A'] == 25
        assert values['B'] == 25
        assert values['C'] == 63  # (25 + 100) / 2 = 62.5
        assert values['D'] == 100

    def test_subtask_toggle_reaches_objective_linked_to_parent_task(self, user):
        objective = Objective.objects.create(user=user, title="Cel")
        kr = KeyResult.objects.create(objective=objective, name="KR", current_value=1, target_value=1)
        parent = Task.objects.create(user=user, title="Zadanie")
        KeyResultTask.objects.create(key_result=kr, task=parent)
        Objective.objects.filter(id=objective.id).update(progress=0)

        Task.objects.create(user=user, title="Podzadanie", parent_task=parent, status='done')

        objective.refresh_from_db()
        assert objective.progress == 100

    def test_removing_project_link_resets_progress(self, user, project):
        objective = Objective.objects.create(user=user, title="Cel", progress_source='PROJECTS')
        link = ObjectiveProject.objects.create(objective=objective, project=project)
        make_tasks(user, project, done=2, todo=0)
        objective.refresh_from_db()
        assert objective.progress == 100

        link.delete()

        objective.refresh_from_db()
        assert objective.progress == 0

    def test_deleting_task_recalculates_project_objectives(self, user, project):
        objective = Objective.objects.create(user=user, title="Cel", progress_source='PROJECTS')
        ObjectiveProject.objects.create(objective=objective, project=project)
        done, todo = make_tasks(user, project, done=1, todo=1)
        objective.refresh_from_db()
        assert objective.progress == 50

        todo.delete()

        objective.refresh_from_db()
        assert objective.progress == 100

    def test_key_result_edit_and_removal(self, user):
        objective = Objective.objects.create(user=user, title="Cel")
        kr = KeyResult.objects.create(objective=objective, name="KR", current_value=5, target_value=10)
        objective.refresh_from_db()
        assert objective.progress == 50

        kr.target_value = 20
        kr.save()
        objective.refresh_from_db()
        assert objective.progress == 25

        kr.delete()
        objective.refresh_from_db()
        assert objective.progress == 0

    def test_disabled_auto_recalculation(self, user, project, settings):
        settings.GOALS_AUTO_RECALCULATE = False
        objective = Objective.objects.create(user=user, title="Cel", progress_source='PROJECTS')
        ObjectiveProject.objects.create(objective=objective, project=project)
        make_tasks(user, project, done=1, todo=0)

        objective.refresh_from_db()
        assert objective.progress == 0

    def test_completed_at_is_stamped(self, user):
        task = Task.objects.create(user=user, title="Zadanie", status='done')
        assert task.completed_at is not None

        task.status = 'todo'
        task.save()
        assert task.completed_at is None

    def test_moving_objective_recalculates_old_and_new_parent(self, user):
        old = Objective.objects.create(user=user, title="Stary", progress_source='SUB_OBJECTIVES')
        new = Objective.objects.create(user=user, title="Nowy", progress_source='SUB_OBJECTIVES')
        child = Objective.objects.create(user=user, title="Podcel", progress_source='MANUAL', progress=80, parent=old)
        old.refresh_from_db()
        assert old.progress == 80

        child.parent = new
        child.save()

        values = dict(Objective.objects.values_list('title', 'progress'))
        assert values['Stary'] == 0
        assert values['Nowy'] == 80
