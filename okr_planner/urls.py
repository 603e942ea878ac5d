# okr_planner/urls.py
from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    path('admin/', admin.site.urls),
    path('goals/', include('apps.goals.urls')),
    path('tasks/', include('apps.tasks.urls')),
]
