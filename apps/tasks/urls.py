# apps/tasks/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path('<int:pk>/toggle/', views.task_toggle_view, name='task_toggle'),
]
