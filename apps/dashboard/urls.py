from django.urls import path
from . import views

app_name = 'dashboard'

urlpatterns = [
    path('',                                   views.appointment_list,   name='appointment_list'),
    path('appointments/<str:appointment_id>/', views.appointment_detail, name='appointment_detail'),
]
