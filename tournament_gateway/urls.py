"""
URL configuration for tournament_gateway project.
"""
from django.contrib import admin
from django.urls import path, include

from registrations.views import HealthView

urlpatterns = [
    path('', HealthView.as_view(), name='health'),
    path('admin/', admin.site.urls),
    path('api/', include('registrations.urls')),
]
