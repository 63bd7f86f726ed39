from django.urls import path
from . import views

urlpatterns = [
    path('', views.dashboard, name='dashboard'),
    path('health', views.health, name='health'),
    path('status', views.status, name='status'),
    path('start', views.start, name='start'),
    path('stop', views.stop, name='stop'),
    path('targets', views.targets, name='targets'),
    path('add-target', views.add_target, name='add_target'),
    path('remove-target', views.remove_target, name='remove_target'),
    path('logs', views.logs, name='logs'),
    path('reload', views.reload, name='reload'),
]
