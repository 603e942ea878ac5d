import pytest
from django.contrib.admin.sites import site
from django.urls import reverse

from apps.goals.admin import KeyResultInline
from apps.goals.forms import ObjectiveForm
from apps.goals.models import KeyResult, Objective

pytestmark = [pytest.mark.django_db, pytest.mark.usefixtures('no_auto_recalculate')]


def form_data(parent):
    return {'title': "Cel", 'progress_source': 'MANUAL', 'progress': '0', 'parent': parent.id}


class TestObjectiveForm:
    def test_rejects_own_descendant_as_parent(self, user):
        root = Objective.objects.create(user=user, title="Rok")
        child = Objective.objects.create(user=user, title="Kwartał", parent=root)

        form = ObjectiveForm(user, form_data(child), instance=root)

        assert not form.is_valid()
        assert '__all__' in form.errors

    def test_existing_cycle_above_parent_does_not_hang(self, user):
        a = Objective.objects.create(user=user, title="A")
        b = Objective.objects.create(user=user, title="B", parent=a)
        c = Objective.objects.create(user=user, title="C")
        Objective.objects.filter(id=a.id).update(parent=b)

        form = ObjectiveForm(user, form_data(a), instance=c)

        assert form.is_valid()

    def test_parent_choices_limited_to_owner(self, user, other_user):
        foreign = Objective.objects.create(user=other_user, title="Cudzy")
        form = ObjectiveForm(user, form_data(foreign))
        assert 'parent' in form.errors


class TestAdmin:
    def test_key_result_value_is_read_only(self, rf, admin_user):
        request = rf.get('/')
        request.user = admin_user
        inline = KeyResultInline(Objective, site)
        admin = site._registry[KeyResult]

        assert 'current_value' in inline.get_readonly_fields(request)
        assert 'current_value' in admin.get_readonly_fields(request)

    def test_objective_change_page_has_task_links(self, admin_client, user):
        objective = Objective.objects.create(user=user, title="Cel")

        response = admin_client.get(reverse('admin:goals_objective_change', args=[objective.id]))

        assert response.status_code == 200
        assert b'task_links' in response.content
        assert b'project_links' in response.content

    def test_key_result_change_page(self, admin_client, user):
        objective = Objective.objects.create(user=user, title="Cel")
        kr = KeyResult.objects.create(objective=objective, name="KR", current_value=1, target_value=4)

        response = admin_client.get(reverse('admin:goals_keyresult_change', args=[kr.id]))
        assert response.status_code == 200
        assert b'task_links' in response.content

        response = admin_client.get(reverse('admin:goals_keyresult_changelist'))
        assert b'25%' in response.content
