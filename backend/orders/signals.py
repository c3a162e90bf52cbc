from django.dispatch import Signal, receiver
import logging

logger = logging.getLogger(__name__)

# Sent after the transaction that changed an order's status commits.
# kwargs: order, old_status, new_status
order_status_changed = Signal()


@receiver(order_status_changed)
def log_order_status_change(sender, order, old_status, new_status, **kwargs):
    """
    Default receiver. Kitchen displays and notification delivery subscribe
    to the same signal.
    """
    logger.info(
        f"Order {order.order_number} ({order.tenant_id}) status {old_status} -> {new_status}"
    )
