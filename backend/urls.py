"""
URL configuration for backend project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from activities.file_views import view_file

from .health_views import health_check

urlpatterns = [
    path('admin/', admin.site.urls),

    # Health check for deployment
    path('api/health/', health_check, name='health_check'),

    # Authentication
    path('api/auth/', include('authentication.urls')),

    # Program catalog
    path('api/programs/', include('programs.urls')),

    # Student APIs
    path('api/students/', include('users.student_urls')),
    path('api/students/', include('activities.urls')),

    # Faculty APIs
    path('api/faculty/', include('activities.faculty_urls')),

    # Admin APIs
    path('api/admin/', include('users.urls')),
    path('api/admin/', include('administration.urls')),

    # Proof document proxy
    path('api/files/view', view_file, name='view_file'),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
