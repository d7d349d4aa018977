"""
Database Models - Gold Layer Star Schema

Declarative mappings of the read-only Gold layer produced by the upstream
warehouse ETL. The schema consists of:

Fact Tables:
- FactSales: One row per sold line item

Dimension Tables:
- DimCustomer: Customer attributes
- DimProduct: Product catalog and categories

Tables are declared in the ``gold`` schema. The connection layer remaps that
schema through ``schema_translate_map`` so the same models work against
warehouses that use a different schema name or none at all (SQLite).
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Date,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


GOLD_SCHEMA = "gold"


class Base(DeclarativeBase):
    """Base class for all Gold layer models"""
    pass


# =============================================================================
# DIMENSION TABLES
# =============================================================================

class DimCustomer(Base):
    """
    Customer Dimension Table

    One row per customer, keyed by the warehouse surrogate key.
    """
    __tablename__ = "dim_customers"

    customer_key: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[Optional[int]] = mapped_column(Integer)
    customer_number: Mapped[Optional[str]] = mapped_column(String(50))

    # Personal information
    first_name: Mapped[Optional[str]] = mapped_column(String(50))
    last_name: Mapped[Optional[str]] = mapped_column(String(50))
    country: Mapped[Optional[str]] = mapped_column(String(50))
    marital_status: Mapped[Optional[str]] = mapped_column(String(50))
    gender: Mapped[Optional[str]] = mapped_column(String(50))
    birthdate: Mapped[Optional[date]] = mapped_column(Date)

    create_date: Mapped[Optional[date]] = mapped_column(Date)

    __table_args__ = (
        Index("ix_dim_customers_country", "country"),
        {"schema": GOLD_SCHEMA},
    )


class DimProduct(Base):
    """
    Product Dimension Table

    Product catalog with category hierarchy and unit cost.
    """
    __tablename__ = "dim_products"

    product_key: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[Optional[int]] = mapped_column(Integer)
    product_number: Mapped[Optional[str]] = mapped_column(String(50))
    product_name: Mapped[Optional[str]] = mapped_column(String(50))

    # Categories
    category_id: Mapped[Optional[str]] = mapped_column(String(50))
    category: Mapped[Optional[str]] = mapped_column(String(50))
    sub_category: Mapped[Optional[str]] = mapped_column(String(50))
    maintenance: Mapped[Optional[str]] = mapped_column(String(50))

    # Pricing
    cost: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))

    product_line: Mapped[Optional[str]] = mapped_column(String(50))
    start_date: Mapped[Optional[date]] = mapped_column(Date)

    __table_args__ = (
        Index("ix_dim_products_category", "category"),
        {"schema": GOLD_SCHEMA},
    )


# =============================================================================
# FACT TABLES
# =============================================================================

class FactSales(Base):
    """
    Sales Fact Table

    One row per sold line item. ``order_date`` is nullable in the warehouse;
    report views drop those rows before aggregating.
    """
    __tablename__ = "fact_sales"

    order_number: Mapped[str] = mapped_column(String(50), primary_key=True)
    product_key: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_key: Mapped[Optional[int]] = mapped_column(Integer)

    # Dates
    order_date: Mapped[Optional[date]] = mapped_column(Date)
    shipping_date: Mapped[Optional[date]] = mapped_column(Date)
    due_date: Mapped[Optional[date]] = mapped_column(Date)

    # Measures
    sales_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))
    quantity: Mapped[Optional[int]] = mapped_column(Integer)
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))

    __table_args__ = (
        Index("ix_fact_sales_order_date", "order_date"),
        Index("ix_fact_sales_customer", "customer_key"),
        {"schema": GOLD_SCHEMA},
    )
