from django import forms
from .models import Objective


class ObjectiveForm(forms.ModelForm):
    class Meta:
        model = Objective
        fields = ['title', 'description', 'period', 'deadline', 'progress_source', 'progress', 'parent']
        widgets = {
            'title': forms.TextInput(attrs={'class': 'form-control'}),
            'deadline': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
            'progress_source': forms.Select(attrs={'class': 'form-select'}),
            'parent': forms.Select(attrs={'class': 'form-select'}),
        }

    def __init__(self, user, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Filtruj cele rodzicielskie tylko do usera (żeby nie widział cudzych)
        parents = Objective.objects.filter(user=user)
        if self.instance.pk:
            parents = parents.exclude(pk=self.instance.pk)
        self.fields['parent'].queryset = parents

    def clean(self):
        cleaned = super().clean()
        parent = cleaned.get('parent')

        # Nie pozwalamy podpiąć celu pod własnego potomka
        if parent and self.instance.pk:
            node, seen = parent, set()
            # seen: w bazie może już siedzieć cykl, nie chodzimy w kółko
            while node is not None and node.pk not in seen:
                if node.pk == self.instance.pk:
                    raise forms.ValidationError("Cel nie może być podrzędny względem samego siebie.")
                seen.add(node.pk)
                node = node.parent
        return cleaned


class KeyResultValueForm(forms.Form):
    value = forms.FloatField()
    note = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 2}))


class ConnectionForm(forms.Form):
    """Podpięcie projektu albo zadania do celu."""
    type = forms.ChoiceField(choices=[('project', 'Project'), ('task', 'Task')])
    project_id = forms.IntegerField(required=False)
    task_id = forms.IntegerField(required=False)

    def clean(self):
        cleaned = super().clean()
        kind = cleaned.get('type')
        if kind and cleaned.get(f'{kind}_id') is None:
            self.add_error(f'{kind}_id', "To pole jest wymagane.")
        return cleaned


class TaskConnectionForm(forms.Form):
    task_id = forms.IntegerField()
