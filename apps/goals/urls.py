from django.urls import path
from . import views

urlpatterns = [
    path('', views.objective_list_view, name='objective_list'),
    path('new/', views.objective_create_view, name='objective_create'),
    path('<int:pk>/recalculate/', views.objective_recalculate_view, name='objective_recalculate'),
    path('<int:pk>/connections/', views.objective_connections_view, name='objective_connections'),
    path('<int:pk>/connections/projects/<int:project_id>/',
         views.objective_project_disconnect_view, name='objective_project_disconnect'),
    path('<int:pk>/connections/tasks/<int:task_id>/',
         views.objective_task_disconnect_view, name='objective_task_disconnect'),
    path('key-results/<int:pk>/update/', views.key_result_update_view, name='key_result_update'),
    path('key-results/<int:pk>/updates/', views.key_result_history_view, name='key_result_history'),
    path('key-results/<int:pk>/connections/', views.key_result_connections_view, name='key_result_connections'),
    path('key-results/<int:pk>/connections/<int:task_id>/',
         views.key_result_task_disconnect_view, name='key_result_task_disconnect'),
]
