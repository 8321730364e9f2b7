# users/urls.py
from django.urls import path

from . import views

# Mounted under api/admin/
urlpatterns = [
    path('users', views.users_list, name='admin_users'),
    path('users/<int:user_id>', views.user_detail, name='admin_user_detail'),
    path('users/<int:user_id>/toggle-status', views.toggle_user_status, name='admin_toggle_user_status'),
]
