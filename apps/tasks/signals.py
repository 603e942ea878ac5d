# apps/tasks/signals.py
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver
from apps.goals.services.progress_service import auto_recalculate_enabled, get_progress_service
from .models import Task


@receiver(post_save, sender=Task)
def update_goal_progress(sender, instance, raw=False, **kwargs):
    """
    Przelicz postęp celów po zmianie zadania (best-effort).
    Zmiana zadania nie może się wywrócić przez błąd przeliczania celu.
    """
    if raw or not auto_recalculate_enabled():
        return

    service = get_progress_service()
    service.recalculate_for_task(instance.id)

    # Podzadanie: cele mogą być podpięte do zadania nadrzędnego
    if instance.parent_task_id:
        service.recalculate_for_task(instance.parent_task_id)


@receiver(post_delete, sender=Task)
def update_goal_progress_on_delete(sender, instance, **kwargs):
    # Powiązania ObjectiveTask/KeyResultTask zniknęły kaskadowo, zostaje projekt
    if instance.project_id and auto_recalculate_enabled():
        get_progress_service().recalculate_for_project(instance.project_id)
