# administration/urls.py
from django.urls import path

from . import admin_dashboard

# Mounted under api/admin/
urlpatterns = [
    path('stats', admin_dashboard.get_admin_stats, name='admin_stats'),
    path('reports', admin_dashboard.get_reports, name='admin_reports'),
]
