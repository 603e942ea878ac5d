# apps/tasks/models.py
from django.db import models
from django.conf import settings
from django.utils import timezone
from apps.tasks.domain.entities import TaskStatus


class Task(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    # TextChoices dla Admina, wartości zgodne z Enum domenowym
    class StatusChoices(models.TextChoices):
        INBOX = TaskStatus.INBOX.value, 'Inbox'
        TODO = TaskStatus.TODO.value, 'To Do'
        SCHEDULED = TaskStatus.SCHEDULED.value, 'Scheduled'
        DONE = TaskStatus.DONE.value, 'Done'
        WAITING = TaskStatus.WAITING.value, 'Waiting'
        BLOCKED = TaskStatus.BLOCKED.value, 'Blocked'
        CANCELLED = TaskStatus.CANCELLED.value, 'Cancelled'

    status = models.CharField(
        max_length=20,
        choices=StatusChoices.choices,
        default=StatusChoices.INBOX
    )

    due_date = models.DateTimeField(null=True, blank=True)
    priority = models.IntegerField(default=3)

    project = models.ForeignKey(
        'projects.Project',
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='tasks'
    )

    # Podzadania nie wchodzą do postępu projektu (liczą się tylko zadania główne)
    parent_task = models.ForeignKey(
        'self',
        null=True, blank=True,
        on_delete=models.CASCADE,
        related_name='subtasks'
    )

    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title

    @property
    def is_completed(self):
        return self.status == TaskStatus.DONE.value

    def save(self, *args, **kwargs):
        if self.is_completed and not self.completed_at:
            self.completed_at = timezone.now()
        elif not self.is_completed:
            self.completed_at = None
        super().save(*args, **kwargs)
