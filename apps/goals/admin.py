from django.contrib import admin
from apps.goals.domain.progress import round_progress
from .models import KeyResult, KeyResultTask, KeyResultUpdate, Objective, ObjectiveProject, ObjectiveTask


# current_value zmienia się tylko przez wpis do historii (key_result_update_view)
class KeyResultInline(admin.TabularInline):
    model = KeyResult
    extra = 1
    fields = ('name', 'start_value', 'current_value', 'target_value', 'unit', 'format')
    readonly_fields = ('current_value',)


class ObjectiveProjectInline(admin.TabularInline):
    model = ObjectiveProject
    extra = 0


class ObjectiveTaskInline(admin.TabularInline):
    model = ObjectiveTask
    extra = 0
    raw_id_fields = ('task',)


class KeyResultTaskInline(admin.TabularInline):
    model = KeyResultTask
    extra = 0
    raw_id_fields = ('task',)


@admin.register(Objective)
class ObjectiveAdmin(admin.ModelAdmin):
    list_display = ('title', 'progress_source', 'progress', 'parent', 'deadline')
    list_filter = ('progress_source',)
    search_fields = ('title',)
    readonly_fields = ('created_at', 'updated_at')
    inlines = [KeyResultInline, ObjectiveProjectInline, ObjectiveTaskInline]


@admin.register(KeyResult)
class KeyResultAdmin(admin.ModelAdmin):
    list_display = ('name', 'objective', 'current_value', 'target_value', 'progress_display')
    search_fields = ('name', 'objective__title')
    readonly_fields = ('current_value',)
    inlines = [KeyResultTaskInline]

    @admin.display(description='Progress')
    def progress_display(self, obj):
        return f"{round_progress(obj.progress)}%"


# Historia KR tylko do podglądu
@admin.register(KeyResultUpdate)
class KeyResultUpdateAdmin(admin.ModelAdmin):
    list_display = ('key_result', 'previous_value', 'new_value', 'author', 'created_at')
    readonly_fields = ('key_result', 'previous_value', 'new_value', 'note', 'author', 'created_at')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
