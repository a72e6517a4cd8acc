from django.urls import path
from . import views

app_name = 'courses'

urlpatterns = [
    path('api/', views.course_list, name='api_list'),
]
