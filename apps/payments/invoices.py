"""
Invoice data for the appointment detail page.
The backend generates the invoice PDF after payment; it may lag behind.
"""
import logging
from dataclasses import dataclass

from django.utils.dateparse import parse_datetime

from apps.backend.exceptions import BackendNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Invoice:
    number: str
    amount: str = ''
    status: str = ''
    issued_at: object = None

    @classmethod
    def from_api(cls, data: dict) -> 'Invoice':
        issued = data.get('issuedAt') or data.get('createdAt')
        return cls(
            number=str(data.get('invoiceNumber') or data.get('number') or ''),
            amount=str(data.get('amount') or ''),
            status=data.get('status') or '',
            issued_at=parse_datetime(issued) if issued else None,
        )


def get_invoice_for_appointment(client, appointment_id: str):
    """
    Invoice for a paid appointment, or None when the backend has not
    generated one yet. Other BackendErrors propagate.
    """
    try:
        data = client.get_invoice_for_appointment(appointment_id)
    except BackendNotFoundError:
        logger.info('No invoice yet for appointment %s', appointment_id)
        return None
    invoice = Invoice.from_api(data)
    if not invoice.number:
        logger.warning('Invoice for appointment %s has no number: %r', appointment_id, data)
        return None
    return invoice
