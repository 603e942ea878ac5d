# apps/tasks/views.py
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods
from .domain.entities import TaskStatus
from .models import Task


@require_http_methods(["POST"])
@login_required
def task_toggle_view(request, pk):
    """
    Przełącza zadanie/podzadanie done <-> todo.
    Postęp celów przelicza sygnał (best-effort), więc błąd tam nie cofa zmiany.
    """
    task = get_object_or_404(Task, pk=pk, user=request.user)

    task.status = TaskStatus.TODO.value if task.is_completed else TaskStatus.DONE.value
    task.save()

    return JsonResponse({
        'id': task.id,
        'status': task.status,
        'completed': task.is_completed,
        'completed_at': task.completed_at.isoformat() if task.completed_at else None,
    })
