# users/student_urls.py
from django.urls import path

from . import views

# Mounted under api/students/
urlpatterns = [
    path('profile', views.student_profile, name='student_profile'),
    path('upload-avatar', views.upload_avatar, name='upload_avatar'),
    path('browse', views.browse_students, name='browse_students'),
]
