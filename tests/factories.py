"""Booking form states shared across tests."""

USER_DETAILS_DONE = {
    'plan_slug': 'medical-management',
    'plan_name': 'Medical Management Plan',
    'plan_price': '₹5,500',
    'patient_id': 'p1',
    'full_name': 'Asha Menon',
    'mobile': '9876543210',
    'dob': '1990-05-14',
    'age': 36,
    'gender': 'FEMALE',
    'weight': '68',
    'height': '162',
}

RECALL_DONE = dict(
    USER_DETAILS_DONE,
    daily_food='Idli, rice and sambar, fruit',
    water_intake='2',
    wake_up_time='06:30',
    sleep_time='22:30',
    appointment_id='apt-1',
    booking_progress='SLOT',
)
