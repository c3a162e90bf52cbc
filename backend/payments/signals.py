from django.dispatch import Signal, receiver
import logging

from .money import format_money

logger = logging.getLogger(__name__)

# Sent after a settlement transaction commits.
# kwargs: payment, order, is_fully_paid
payment_completed = Signal()


@receiver(payment_completed)
def log_payment_completed(sender, payment, order, is_fully_paid, **kwargs):
    logger.info(
        f"Payment {payment.id} captured {format_money(payment.currency, payment.amount_cents)} "
        f"via {payment.provider} on order {order.order_number}"
        f"{' (fully paid)' if is_fully_paid else ''}"
    )
