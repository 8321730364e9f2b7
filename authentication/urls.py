# authentication/urls.py
from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from . import jwt_auth

urlpatterns = [
    path('register', jwt_auth.register, name='register'),
    path('login', jwt_auth.login, name='login'),
    path('token/refresh', TokenRefreshView.as_view(), name='token_refresh'),
    path('profile', jwt_auth.profile, name='profile'),
    path('admin-password-reset', jwt_auth.admin_password_reset, name='admin_password_reset'),
]
