from .setup import setup_observability, configure_logging
from .metrics import (
    ecomm_orders_created_total,
    ecomm_subscriptions_created_total,
    ecomm_contacts_created_total,
    ecomm_cache_operations_total,
    ecomm_notifications_sent_total,
    ecomm_notification_clients
)
