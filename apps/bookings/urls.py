"""
Booking flow URLs.

Flow:
  /book/start/?plan=&package=      Start a booking for a plan
  /book/user-details/              Step 1: User details & measurements
  /book/recall/                    Step 2: 24-hour food & lifestyle recall
  /book/slot/                      Step 3: Mode, date & slot selection
  /book/payment/                   Step 4: Razorpay checkout
  /book/complete/                  Booking confirmed page
  /book/cancel/                    Abandon the in-flight booking
"""
from django.urls import path
from . import views

app_name = 'bookings'

urlpatterns = [
    path('start/',          views.start_booking,  name='start'),
    path('user-details/',   views.user_details,   name='user_details'),
    path('recall/',         views.recall,         name='recall'),
    path('slot/',           views.slot,           name='slot'),
    path('payment/',        views.payment,        name='payment'),
    path('complete/',       views.complete,       name='complete'),
    path('cancel/',         views.cancel_booking, name='cancel'),
]
