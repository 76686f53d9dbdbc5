"""
Payment views.

Flow:
  1. bookings:payment  → ensure backend order → render Razorpay Checkout
  2. payment_callback  → Razorpay posts here after the modal completes
                       → backend verifies the signature
                       → CONFIRMED: bookings:complete
                       → PENDING:   verification-pending page (webhook may confirm)
                       → FAILED:    back to bookings:payment with the error
  3. invoice_download  → redirect to the backend-hosted invoice PDF
"""
import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.accounts.decorators import clinic_login_required, patient_login_required
from apps.backend.client import get_api_client
from apps.backend.exceptions import BackendError, BackendNotFoundError
from apps.backend.messages import user_friendly_error
from apps.bookings.store import BookingFormStore

from .orders import VerificationStatus, verify_payment

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Payment Callback (Razorpay posts here after the modal)
# ─────────────────────────────────────────────────────────────────────────────

@csrf_exempt
@require_POST
@patient_login_required
def payment_callback(request):
    """
    Forward the gateway result to the backend for verification.
    The booking form is only reset once the payment is confirmed.
    """
    order_id = request.POST.get('razorpay_order_id', '')
    payment_id = request.POST.get('razorpay_payment_id', '')
    signature = request.POST.get('razorpay_signature', '')
    logger.info('Callback: verifying payment %s for order %s', payment_id, order_id)

    with get_api_client(request) as api:
        result = verify_payment(api, order_id, payment_id, signature)

    appointment_id = BookingFormStore.for_request(request).get('appointment_id')

    if result.status == VerificationStatus.CONFIRMED:
        return redirect(f"{reverse('bookings:complete')}?appointment={appointment_id or ''}")

    if result.status == VerificationStatus.PENDING:
        return render(request, 'payments/verification_pending.html', {
            'message': result.message,
            'appointment_id': appointment_id,
        })

    messages.error(request, result.message)
    return redirect('bookings:payment')


# ─────────────────────────────────────────────────────────────────────────────
# Invoice download
# ─────────────────────────────────────────────────────────────────────────────

@clinic_login_required
def invoice_download(request, invoice_number):
    back = 'dashboard:appointment_list' if request.user.is_staff else 'patients:appointment_list'
    try:
        with get_api_client(request) as api:
            url = api.get_invoice_url(invoice_number)
    except BackendNotFoundError:
        messages.error(request, 'This invoice is not available yet. Please try again later.')
        return redirect(back)
    except BackendError as exc:
        logger.exception('Fetching invoice %s failed', invoice_number)
        messages.error(request, user_friendly_error(exc, 'Could not download the invoice.'))
        return redirect(back)
    return redirect(url)
