# apps/goals/models.py
from django.db import models
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from apps.goals.domain.entities import KeyResultEntity, ProgressSource
from apps.goals.domain.progress import key_result_progress


class Objective(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='objectives')
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    period = models.CharField(max_length=50, blank=True, help_text="Np. 'Q3 2026'")
    deadline = models.DateField(null=True, blank=True)

    progress = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        help_text="Postęp w procentach (0-100)"
    )

    class ProgressSourceChoices(models.TextChoices):
        MANUAL = ProgressSource.MANUAL.value, 'Ręcznie'
        KEY_RESULTS = ProgressSource.KEY_RESULTS.value, 'Kluczowe rezultaty'
        SUB_OBJECTIVES = ProgressSource.SUB_OBJECTIVES.value, 'Cele podrzędne'
        PROJECTS = ProgressSource.PROJECTS.value, 'Projekty'

    progress_source = models.CharField(
        max_length=20,
        choices=ProgressSourceChoices.choices,
        default=ProgressSourceChoices.KEY_RESULTS
    )

    # Hierarchia (cele podrzędne)
    parent = models.ForeignKey(
        'self',
        null=True, blank=True,
        on_delete=models.CASCADE,
        related_name='children'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['deadline', 'id']

    def __str__(self):
        return self.title


class KeyResult(models.Model):
    objective = models.ForeignKey(Objective, on_delete=models.CASCADE, related_name='key_results')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    start_value = models.FloatField(default=0)
    current_value = models.FloatField(default=0)
    target_value = models.FloatField()

    class FormatChoices(models.TextChoices):
        NUMBER = 'NUMBER', 'Liczba'
        PERCENTAGE = 'PERCENTAGE', 'Procent'
        CURRENCY = 'CURRENCY', 'Waluta'
        BOOLEAN = 'BOOLEAN', 'Tak/Nie'

    unit = models.CharField(max_length=30, blank=True)
    format = models.CharField(max_length=20, choices=FormatChoices.choices, default=FormatChoices.NUMBER)

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return self.name

    def to_entity(self) -> KeyResultEntity:
        return KeyResultEntity(
            id=self.id,
            objective_id=self.objective_id,
            start_value=self.start_value,
            current_value=self.current_value,
            target_value=self.target_value,
            name=self.name,
            unit=self.unit,
        )

    @property
    def progress(self):
        return key_result_progress(self.to_entity())


class KeyResultUpdate(models.Model):
    """Historia zmian wartości KR. Tylko dopisujemy - nigdy nie edytujemy ani nie kasujemy."""
    key_result = models.ForeignKey(KeyResult, on_delete=models.CASCADE, related_name='updates')
    previous_value = models.FloatField()
    new_value = models.FloatField()
    note = models.TextField(blank=True)
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='key_result_updates')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.key_result}: {self.previous_value} -> {self.new_value}"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise ValueError("KeyResultUpdate records are append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        # Kasowanie tylko kaskadowo razem z KR
        raise ValueError("KeyResultUpdate records cannot be deleted")


# Powiązania celów z projektami i zadaniami

class ObjectiveProject(models.Model):
    objective = models.ForeignKey(Objective, on_delete=models.CASCADE, related_name='project_links')
    project = models.ForeignKey('projects.Project', on_delete=models.CASCADE, related_name='objective_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('objective', 'project')

    def __str__(self):
        return f"{self.objective} <-> {self.project}"


class ObjectiveTask(models.Model):
    objective = models.ForeignKey(Objective, on_delete=models.CASCADE, related_name='task_links')
    task = models.ForeignKey('tasks.Task', on_delete=models.CASCADE, related_name='objective_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('objective', 'task')

    def __str__(self):
        return f"{self.objective} <-> {self.task}"


class KeyResultTask(models.Model):
    key_result = models.ForeignKey(KeyResult, on_delete=models.CASCADE, related_name='task_links')
    task = models.ForeignKey('tasks.Task', on_delete=models.CASCADE, related_name='key_result_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('key_result', 'task')

    def __str__(self):
        return f"{self.key_result} <-> {self.task}"
