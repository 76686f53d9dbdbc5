from django.urls import path
from . import views

app_name = 'patients'

urlpatterns = [
    path('appointments/',                         views.appointment_list,   name='appointment_list'),
    path('appointments/<str:appointment_id>/',    views.appointment_detail, name='appointment_detail'),
    path('pending/',                              views.pending_list,       name='pending_list'),
    path('pending/<str:appointment_id>/resume/',  views.pending_resume,     name='pending_resume'),
    path('pending/<str:appointment_id>/delete/',  views.pending_delete,     name='pending_delete'),
]
