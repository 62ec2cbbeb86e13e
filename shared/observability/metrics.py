from prometheus_client import Counter, Gauge

# Business Metrics
ecomm_orders_created_total = Counter(
    "ecomm_orders_created_total",
    "Total orders created",
    ["payment_method"] # Labels: 'card', 'cod', 'unknown', ...
)

ecomm_subscriptions_created_total = Counter(
    "ecomm_subscriptions_created_total",
    "Total subscriptions purchased",
    ["plan_name"]
)

ecomm_contacts_created_total = Counter(
    "ecomm_contacts_created_total",
    "Total contact form submissions stored"
)

# Infrastructure Metrics
ecomm_cache_operations_total = Counter(
    "ecomm_cache_operations_total",
    "Cache operations by outcome",
    ["op", "result"] # Labels: op='get'|'set'|'delete', result='hit'|'miss'|'ok'|'error'|'skipped'
)

ecomm_notifications_sent_total = Counter(
    "ecomm_notifications_sent_total",
    "Notification events broadcast",
    ["event"]
)

ecomm_notification_clients = Gauge(
    "ecomm_notification_clients",
    "Number of connected real-time notification clients"
)
