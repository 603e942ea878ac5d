# apps/goals/signals.py
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from apps.goals.domain.entities import ProgressSource
from apps.goals.services.progress_service import auto_recalculate_enabled, get_progress_service
from .models import KeyResult, Objective, ObjectiveProject


def _recalculate(*objective_ids):
    ids = [i for i in objective_ids if i is not None]
    if ids and auto_recalculate_enabled():
        get_progress_service().recalculate_many(ids)


@receiver(pre_save, sender=Objective)
def track_parent_change(sender, instance, raw=False, **kwargs):
    """
    Przed zapisem zapamiętujemy poprzedniego rodzica,
    żeby po przeniesieniu celu przeliczyć też stare drzewo.
    """
    instance._old_parent_id = None
    if raw or not instance.pk:
        return
    old_parent_id = Objective.objects.filter(pk=instance.pk).values_list('parent_id', flat=True).first()
    instance._old_parent_id = old_parent_id


@receiver(post_save, sender=Objective)
def objective_saved(sender, instance, raw=False, **kwargs):
    """
    Nowy/zmieniony cel zmienia średnią rodzica.
    Cel automatyczny przeliczamy w całości (propaguje się sam),
    dla ręcznego od razu przeliczamy rodzica.
    Po przeniesieniu celu przeliczamy również dawnego rodzica.
    """
    if raw:
        return
    if instance.progress_source == ProgressSource.MANUAL.value:
        _recalculate(instance.parent_id)
    else:
        _recalculate(instance.id)

    old_parent_id = getattr(instance, '_old_parent_id', None)
    if old_parent_id and old_parent_id != instance.parent_id:
        if Objective.objects.filter(id=old_parent_id).exists():
            _recalculate(old_parent_id)


@receiver(post_delete, sender=Objective)
def objective_deleted(sender, instance, **kwargs):
    # Rodzic mógł zostać skasowany w tej samej kaskadzie
    if instance.parent_id and Objective.objects.filter(id=instance.parent_id).exists():
        _recalculate(instance.parent_id)


@receiver(post_save, sender=KeyResult)
def key_result_saved(sender, instance, raw=False, **kwargs):
    # Zmiana start/target; current_value zmienia się przez record_update (bez sygnału)
    if not raw:
        _recalculate(instance.objective_id)


@receiver(post_delete, sender=KeyResult)
def key_result_deleted(sender, instance, **kwargs):
    if Objective.objects.filter(id=instance.objective_id).exists():
        _recalculate(instance.objective_id)


@receiver(post_save, sender=ObjectiveProject)
@receiver(post_delete, sender=ObjectiveProject)
def project_link_changed(sender, instance, raw=False, **kwargs):
    if raw:
        return
    if Objective.objects.filter(id=instance.objective_id).exists():
        _recalculate(instance.objective_id)
