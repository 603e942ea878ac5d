from django.contrib import admin
from .models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ('title', 'status', 'project', 'parent_task', 'completed_at')
    list_filter = ('status',)
    search_fields = ('title',)
