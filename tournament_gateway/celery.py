"""
Celery configuration for the tournament registration gateway.
"""
import os
from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'tournament_gateway.settings')

app = Celery('tournament_gateway')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
