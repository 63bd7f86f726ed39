from django.urls import include, path

urlpatterns = [
    path('', include('apps.pinger.urls')),
]
