from .setup import setup_observability
from .metrics import (
    doodle_orders_created_total,
    doodle_products_created_total,
    doodle_products_deleted_total,
    doodle_admin_logins_total,
    doodle_image_delete_failures_total,
    doodle_saga_compensation_total
)
