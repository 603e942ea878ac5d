import pytest

from apps.goals.adapters.memory_repositories import InMemoryGoalRepository
from apps.goals.domain.services import GoalProgressService


@pytest.fixture
def repo():
    return InMemoryGoalRepository()


@pytest.fixture
def service(repo):
    return GoalProgressService(repo, repo, repo)


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username='ola', password='secret')


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(username='jan', password='secret')


@pytest.fixture
def no_auto_recalculate(settings):
    """Sygnały nie przeliczają - testy wołają serwis same."""
    settings.GOALS_AUTO_RECALCULATE = False
