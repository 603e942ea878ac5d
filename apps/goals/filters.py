import django_filters
from django import forms
from .models import Objective


class ObjectiveFilter(django_filters.FilterSet):
    title = django_filters.CharFilter(
        lookup_expr='icontains',
        label="Tytuł zawiera",
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Szukaj...'})
    )
    progress_source = django_filters.ChoiceFilter(
        choices=Objective.ProgressSourceChoices.choices,
        label="Źródło postępu",
        widget=forms.Select(attrs={'class': 'form-select'})
    )
    root = django_filters.BooleanFilter(
        field_name='parent',
        lookup_expr='isnull',
        label="Tylko cele główne"
    )
    min_progress = django_filters.NumberFilter(
        field_name='progress',
        lookup_expr='gte',
        label="Postęp od (%)"
    )

    class Meta:
        model = Objective
        fields = ['parent', 'period']
