# activities/faculty_urls.py
from django.urls import path

from . import faculty_views

urlpatterns = [
    path('stats', faculty_views.faculty_stats, name='faculty_stats'),
    path('activities/pending', faculty_views.pending_activities, name='pending_activities'),
    path('activities', faculty_views.all_activities, name='all_activities'),
    path('activities/<int:activity_id>', faculty_views.review, name='review_activity'),
    path('students', faculty_views.students, name='faculty_students'),
]
