# apps/goals/services/progress_service.py
from django.conf import settings
from apps.goals.adapters.orm_repositories import (
    DjangoGoalLinkRepository,
    DjangoKeyResultRepository,
    DjangoObjectiveRepository,
)
from apps.goals.domain.services import GoalProgressService


def get_progress_service() -> GoalProgressService:
    """Składa serwis z repozytoriami Django (ręczne DI)."""
    return GoalProgressService(
        objective_repository=DjangoObjectiveRepository(),
        key_result_repository=DjangoKeyResultRepository(),
        link_repository=DjangoGoalLinkRepository(),
    )


def auto_recalculate_enabled() -> bool:
    """Czy sygnały modeli mają same przeliczać postęp (GOALS_AUTO_RECALCULATE)."""
    return getattr(settings, 'GOALS_AUTO_RECALCULATE', True)
