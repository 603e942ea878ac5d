# apps/goals/views.py
import logging

from django.contrib.auth.decorators import login_required
from django.db.models import Count, Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods

from apps.goals.domain.exceptions import GoalProgressError, NotFound
from apps.goals.domain.progress import round_progress
from apps.goals.services.progress_service import get_progress_service
from apps.projects.models import Project
from apps.tasks.domain.entities import TaskStatus
from apps.tasks.models import Task
from .filters import ObjectiveFilter
from .forms import ConnectionForm, KeyResultValueForm, ObjectiveForm, TaskConnectionForm
from .models import KeyResult, KeyResultTask, Objective, ObjectiveProject, ObjectiveTask

logger = logging.getLogger(__name__)


def _objective_json(objective):
    return {
        'id': objective.id,
        'title': objective.title,
        'period': objective.period,
        'deadline': objective.deadline.isoformat() if objective.deadline else None,
        'progress': objective.progress,
        'progress_source': objective.progress_source,
        'parent_id': objective.parent_id,
    }


def _form_errors(form):
    return JsonResponse({'error': 'Validation error', 'fields': form.errors.get_json_data()}, status=400)


@login_required
def objective_list_view(request):
    """Lista celów użytkownika z postępem (filtrowana)."""
    qs = Objective.objects.filter(user=request.user).order_by('deadline', 'id')
    f = ObjectiveFilter(request.GET, queryset=qs)
    if not f.is_valid():
        return _form_errors(f.form)

    return JsonResponse({'objectives': [_objective_json(o) for o in f.qs]})


@require_http_methods(["POST"])
@login_required
def objective_create_view(request):
    form = ObjectiveForm(request.user, request.POST)
    if not form.is_valid():
        return _form_errors(form)

    objective = form.save(commit=False)
    objective.user = request.user
    objective.save()  # sygnał przelicza postęp i rodzica

    objective.refresh_from_db(fields=['progress'])
    return JsonResponse(_objective_json(objective), status=201)


@require_http_methods(["POST"])
@login_required
def objective_recalculate_view(request, pk):
    """Ręczne wyzwolenie przeliczenia postępu."""
    objective = get_object_or_404(Objective, pk=pk, user=request.user)

    service = get_progress_service()
    try:
        new_progress = service.recalculate_progress(objective.id)
    except NotFound as e:
        return JsonResponse({'error': str(e)}, status=404)
    except GoalProgressError:
        logger.exception("Error recalculating progress for objective %s", objective.id)
        return JsonResponse({'error': 'Failed to recalculate progress'}, status=500)

    return JsonResponse({'success': True, 'progress': round_progress(new_progress)})


@require_http_methods(["POST"])
@login_required
def key_result_update_view(request, pk):
    """Nowa wartość KR + wpis do historii, potem przeliczenie celu."""
    key_result = get_object_or_404(KeyResult, pk=pk, objective__user=request.user)

    form = KeyResultValueForm(request.POST)
    if not form.is_valid():
        return _form_errors(form)

    service = get_progress_service()
    try:
        new_progress = service.update_key_result_and_recalculate(
            key_result.id,
            form.cleaned_data['value'],
            author_id=request.user.id,
            note=form.cleaned_data['note'],
        )
    except NotFound as e:
        return JsonResponse({'error': str(e)}, status=404)
    except GoalProgressError:
        logger.exception("Error updating key result %s", key_result.id)
        return JsonResponse({'error': 'Failed to update key result'}, status=500)

    return JsonResponse({
        'key_result_id': key_result.id,
        'current_value': form.cleaned_data['value'],
        'objective_id': key_result.objective_id,
        'objective_progress': round_progress(new_progress),
    })


@login_required
def key_result_history_view(request, pk):
    key_result = get_object_or_404(KeyResult, pk=pk, objective__user=request.user)
    updates = key_result.updates.select_related('author')

    return JsonResponse({
        'key_result_id': key_result.id,
        'current_value': key_result.current_value,
        'progress': round_progress(key_result.progress),
        'updates': [
            {
                'previous_value': u.previous_value,
                'new_value': u.new_value,
                'note': u.note,
                'author': u.author.get_username(),
                'created_at': u.created_at.isoformat(),
            }
            for u in updates
        ],
    })


def _recalculate_response(objective, payload, status=200):
    service = get_progress_service()
    try:
        new_progress = service.recalculate_progress(objective.id)
    except NotFound as e:
        return JsonResponse({'error': str(e)}, status=404)
    except GoalProgressError:
        logger.exception("Error recalculating progress for objective %s", objective.id)
        return JsonResponse({'error': 'Failed to recalculate progress'}, status=500)

    payload['objective_progress'] = round_progress(new_progress)
    return JsonResponse(payload, status=status)


def _task_json(task):
    return {
        'id': task.id,
        'title': task.title,
        'completed': task.is_completed,
        'due_date': task.due_date.isoformat() if task.due_date else None,
        'project_id': task.project_id,
    }


@require_http_methods(["GET", "POST"])
@login_required
def objective_connections_view(request, pk):
    """Projekty i zadania podpięte do celu (GET) / nowe powiązanie (POST)."""
    objective = get_object_or_404(Objective, pk=pk, user=request.user)

    if request.method == 'GET':
        done = TaskStatus.DONE.value
        projects = (
            Project.objects.filter(objective_links__objective=objective)
            .annotate(
                total=Count('tasks', filter=Q(tasks__parent_task__isnull=True)),
                completed=Count('tasks', filter=Q(tasks__parent_task__isnull=True, tasks__status=done)),
            )
            .order_by('id')
        )
        tasks = Task.objects.filter(objective_links__objective=objective).order_by('id')

        return JsonResponse({
            'projects': [
                {
                    'id': p.id,
                    'title': p.title,
                    'status': p.status,
                    'total_tasks': p.total,
                    'completed_tasks': p.completed,
                    'progress': round_progress(p.completed / p.total * 100) if p.total else 0,
                }
                for p in projects
            ],
            'tasks': [_task_json(t) for t in tasks],
        })

    form = ConnectionForm(request.POST)
    if not form.is_valid():
        return _form_errors(form)

    if form.cleaned_data['type'] == 'project':
        project = get_object_or_404(Project, pk=form.cleaned_data['project_id'], user=request.user)
        _, created = ObjectiveProject.objects.get_or_create(objective=objective, project=project)
        if not created:
            return JsonResponse({'error': 'Project already connected to this goal'}, status=400)
        payload = {'type': 'project', 'objective_id': objective.id, 'project_id': project.id}
    else:
        task = get_object_or_404(Task, pk=form.cleaned_data['task_id'], user=request.user)
        _, created = ObjectiveTask.objects.get_or_create(objective=objective, task=task)
        if not created:
            return JsonResponse({'error': 'Task already connected to this goal'}, status=400)
        payload = {'type': 'task', 'objective_id': objective.id, 'task_id': task.id}

    return _recalculate_response(objective, payload, status=201)


@require_http_methods(["DELETE"])
@login_required
def objective_project_disconnect_view(request, pk, project_id):
    objective = get_object_or_404(Objective, pk=pk, user=request.user)
    link = get_object_or_404(ObjectiveProject, objective=objective, project_id=project_id)
    link.delete()

    return _recalculate_response(objective, {'success': True})


@require_http_methods(["DELETE"])
@login_required
def objective_task_disconnect_view(request, pk, task_id):
    objective = get_object_or_404(Objective, pk=pk, user=request.user)
    link = get_object_or_404(ObjectiveTask, objective=objective, task_id=task_id)
    link.delete()

    return _recalculate_response(objective, {'success': True})


@require_http_methods(["GET", "POST"])
@login_required
def key_result_connections_view(request, pk):
    """Zadania podpięte do KR - ich zmiana wyzwala przeliczenie celu."""
    key_result = get_object_or_404(KeyResult, pk=pk, objective__user=request.user)

    if request.method == 'GET':
        tasks = Task.objects.filter(key_result_links__key_result=key_result).order_by('id')
        return JsonResponse({'key_result_id': key_result.id, 'tasks': [_task_json(t) for t in tasks]})

    form = TaskConnectionForm(request.POST)
    if not form.is_valid():
        return _form_errors(form)

    task = get_object_or_404(Task, pk=form.cleaned_data['task_id'], user=request.user)
    _, created = KeyResultTask.objects.get_or_create(key_result=key_result, task=task)
    if not created:
        return JsonResponse({'error': 'Task already connected to this key result'}, status=400)

    return JsonResponse({'key_result_id': key_result.id, 'task_id': task.id}, status=201)


@require_http_methods(["DELETE"])
@login_required
def key_result_task_disconnect_view(request, pk, task_id):
    key_result = get_object_or_404(KeyResult, pk=pk, objective__user=request.user)
    link = get_object_or_404(KeyResultTask, key_result=key_result, task_id=task_id)
    link.delete()

    return JsonResponse({'success': True})
