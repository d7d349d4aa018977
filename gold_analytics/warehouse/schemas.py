"""
Polars schemas for the Gold layer relations.

Column order matches the warehouse tables. ``REQUIRED_COLUMNS`` lists the
columns the analyses actually read; the rest are carried when present and
filled with nulls otherwise.
"""

from typing import Dict, List

import polars as pl


FACT_SALES = "fact_sales"
DIM_PRODUCTS = "dim_products"
DIM_CUSTOMERS = "dim_customers"

FACT_SALES_SCHEMA: Dict[str, pl.DataType] = {
    "order_number": pl.Utf8,
    "product_key": pl.Int64,
    "customer_key": pl.Int64,
    "order_date": pl.Date,
    "shipping_date": pl.Date,
    "due_date": pl.Date,
    "sales_amount": pl.Float64,
    "quantity": pl.Int64,
    "price": pl.Float64,
}

DIM_PRODUCTS_SCHEMA: Dict[str, pl.DataType] = {
    "product_key": pl.Int64,
    "product_id": pl.Int64,
    "product_number": pl.Utf8,
    "product_name": pl.Utf8,
    "category_id": pl.Utf8,
    "category": pl.Utf8,
    "sub_category": pl.Utf8,
    "maintenance": pl.Utf8,
    "cost": pl.Float64,
    "product_line": pl.Utf8,
    "start_date": pl.Date,
}

DIM_CUSTOMERS_SCHEMA: Dict[str, pl.DataType] = {
    "customer_key": pl.Int64,
    "customer_id": pl.Int64,
    "customer_number": pl.Utf8,
    "first_name": pl.Utf8,
    "last_name": pl.Utf8,
    "country": pl.Utf8,
    "marital_status": pl.Utf8,
    "gender": pl.Utf8,
    "birthdate": pl.Date,
    "create_date": pl.Date,
}

SCHEMAS: Dict[str, Dict[str, pl.DataType]] = {
    FACT_SALES: FACT_SALES_SCHEMA,
    DIM_PRODUCTS: DIM_PRODUCTS_SCHEMA,
    DIM_CUSTOMERS: DIM_CUSTOMERS_SCHEMA,
}

REQUIRED_COLUMNS: Dict[str, List[str]] = {
    FACT_SALES: [
        "order_number",
        "order_date",
        "product_key",
        "customer_key",
        "sales_amount",
        "quantity",
        "price",
    ],
    DIM_PRODUCTS: ["product_key", "product_name", "category", "sub_category", "cost"],
    DIM_CUSTOMERS: [
        "customer_key",
        "customer_number",
        "first_name",
        "last_name",
        "birthdate",
        "gender",
        "country",
    ],
}
