from django.apps import AppConfig

class GoalsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.goals'
    label = 'goals'

    def ready(self):
        import apps.goals.signals  # noqa: F401
