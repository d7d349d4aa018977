"""
Ad Hoc Analysis Module
"""
from .exploration import (
    customer_age_range,
    distinct_countries,
    frame_schema,
    list_columns,
    list_tables,
    order_date_range,
    product_hierarchy,
)
from .measures import key_metrics
from .ranking import (
    fewest_order_customers,
    top_customers,
    top_products,
    top_subcategories,
)

__all__ = [
    "customer_age_range",
    "distinct_countries",
    "frame_schema",
    "list_columns",
    "list_tables",
    "order_date_range",
    "product_hierarchy",
    "key_metrics",
    "fewest_order_customers",
    "top_customers",
    "top_products",
    "top_subcategories",
]
