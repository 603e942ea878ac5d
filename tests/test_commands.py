from io import StringIO

import pytest
from django.core.management import call_command

from apps.goals.models import KeyResult, Objective, ObjectiveProject
from apps.projects.models import Project
from apps.tasks.models import Task

pytestmark = [pytest.mark.django_db, pytest.mark.usefixtures('no_auto_recalculate')]


def run(*args):
    out = StringIO()
    call_command('recalculate_goals', *args, stdout=out)
    return out.getvalue()


def test_recalculates_every_tree_from_its_leaves(user):
    root = Objective.objects.create(user=user, title="Rok", progress_source='SUB_OBJECTIVES')
    leaf = Objective.objects.create(user=user, title="Kwartał", parent=root)
    KeyResult.objects.create(objective=leaf, name="KR", current_value=3, target_value=4)

    output = run()

    assert 'Przeliczono 1 celów' in output
    assert dict(Objective.objects.values_list('title', 'progress')) == {"Rok": 75, "Kwartał": 75}


def test_selected_objectives_and_missing_ids(user):
    objective = Objective.objects.create(user=user, title="Cel")
    KeyResult.objects.create(objective=objective, name="KR", current_value=1, target_value=2)

    output = run(str(objective.id), '404')

    objective.refresh_from_db()
    assert objective.progress == 50
    assert 'cel 404' in output


def test_by_project(user):
    project = Project.objects.create(user=user, title="Projekt")
    objective = Objective.objects.create(user=user, title="Cel", progress_source='PROJECTS')
    ObjectiveProject.objects.create(objective=objective, project=project)
    Task.objects.create(user=user, project=project, title="A", status='done')
    Task.objects.create(user=user, project=project, title="B", status='todo')

    run('--project', str(project.id))

    objective.refresh_from_db()
    assert objective.progress == 50


def test_manual_leaves_drive_their_parent(user):
    root = Objective.objects.create(user=user, title="Rok", progress_source='SUB_OBJECTIVES')
    Objective.objects.create(user=user, title="Q1", progress_source='MANUAL', progress=80, parent=root)
    Objective.objects.create(user=user, title="Q2", progress_source='MANUAL', progress=40, parent=root)

    output = run()

    assert 'Przeliczono 1 celów' in output
    root.refresh_from_db()
    assert root.progress == 60
