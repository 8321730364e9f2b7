from django.urls import path
from . import views

app_name = 'programs'

urlpatterns = [
    path('', views.list_programs, name='list_programs'),
    path('categories', views.list_categories, name='list_categories'),
    path('specializations', views.list_specializations, name='list_specializations'),
]
