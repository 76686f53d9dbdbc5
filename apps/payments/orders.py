"""
Razorpay orders and payment verification, both owned by the backend.

The front-end only opens Razorpay Checkout for an order the backend created
and forwards the gateway's result back for verification. A verification that
times out is not a failure: the backend webhook may still confirm the
payment, so it is reported as PENDING.
"""
import logging
from dataclasses import dataclass

from django.db import models

from apps.backend.exceptions import (
    BackendError,
    BackendNotFoundError,
    BackendResponseError,
    BackendTimeoutError,
)
from apps.backend.messages import user_friendly_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Order:
    id: str
    amount: int          # paise
    currency: str = 'INR'
    receipt: str = ''
    status: str = ''

    @classmethod
    def from_api(cls, data: dict) -> 'Order':
        return cls(
            id=str(data['id']),
            amount=int(data.get('amount') or 0),
            currency=data.get('currency') or 'INR',
            receipt=data.get('receipt') or '',
            status=data.get('status') or '',
        )

    @property
    def amount_rupees(self):
        return self.amount / 100


class VerificationStatus(models.TextChoices):
    CONFIRMED = 'CONFIRMED', 'Confirmed'
    PENDING   = 'PENDING',   'Verification pending'
    FAILED    = 'FAILED',    'Failed'


@dataclass(frozen=True)
class VerificationResult:
    status: str
    message: str = ''
    already_confirmed: bool = False


def ensure_order(client, appointment_id: str) -> Order:
    """
    Reuse the appointment's open order if the backend still has one, otherwise
    create a fresh order. BackendError from order creation propagates.
    """
    try:
        order = Order.from_api(client.get_existing_order(appointment_id))
        logger.info('Reusing order %s for appointment %s', order.id, appointment_id)
        return order
    except BackendNotFoundError:
        pass
    except BackendResponseError as exc:
        if exc.payload.get('expired') or exc.payload.get('shouldCreateNew'):
            logger.info('Existing order for appointment %s expired; creating a new one', appointment_id)
        else:
            logger.info('No usable order for appointment %s (%s)', appointment_id, exc.message)

    order = Order.from_api(client.create_order(appointment_id))
    logger.info('Created order %s (%s paise) for appointment %s', order.id, order.amount, appointment_id)
    return order


def verify_payment(client, order_id: str, payment_id: str, signature: str) -> VerificationResult:
    if not order_id or not payment_id or not signature:
        return VerificationResult(VerificationStatus.FAILED, 'Missing payment verification data')

    try:
        payload = client.verify_payment(order_id, payment_id, signature)
    except BackendTimeoutError:
        logger.warning('Verification timed out for order %s; awaiting webhook', order_id)
        return VerificationResult(
            VerificationStatus.PENDING,
            'We received your payment and are confirming it. This can take a minute.',
        )
    except BackendError as exc:
        logger.exception('Payment verification failed for order %s', order_id)
        return VerificationResult(
            VerificationStatus.FAILED,
            user_friendly_error(exc, 'Payment verification failed. Please contact support.'),
        )

    logger.info('Payment %s verified for order %s', payment_id, order_id)
    return VerificationResult(
        VerificationStatus.CONFIRMED,
        payload.get('message') or 'Payment successful',
        already_confirmed=bool(payload.get('alreadyConfirmed')),
    )
