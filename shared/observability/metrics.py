from prometheus_client import Counter

# Business Metrics
doodle_orders_created_total = Counter(
    "doodle_orders_created_total",
    "Total orders recorded"
)

doodle_products_created_total = Counter(
    "doodle_products_created_total",
    "Total products created"
)

doodle_products_deleted_total = Counter(
    "doodle_products_deleted_total",
    "Total products deleted"
)

doodle_admin_logins_total = Counter(
    "doodle_admin_logins_total",
    "Admin login attempts",
    ["result"] # Labels: 'success', 'invalid'
)

doodle_image_delete_failures_total = Counter(
    "doodle_image_delete_failures_total",
    "Product deletions aborted because image removal failed"
)

doodle_saga_compensation_total = Counter(
    "doodle_saga_compensation_total",
    "Total saga compensations triggered",
    ["step_name"] # Labels: 'mark_pending', etc.
)
