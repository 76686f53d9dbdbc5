from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    # Razorpay redirects here after the checkout modal completes
    path('callback/', views.payment_callback, name='callback'),

    # Backend-hosted invoice PDF
    path('invoice/<str:invoice_number>/', views.invoice_download, name='invoice'),
]
