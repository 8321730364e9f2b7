# activities/urls.py
from django.urls import path

from . import views

urlpatterns = [
    path('activities', views.my_activities, name='my_activities'),
    path('activities/stats', views.my_activity_stats, name='my_activity_stats'),
    path('activities/<int:activity_id>', views.my_activity_detail, name='my_activity_detail'),
]
