"""
Test Suite Configuration
"""
from datetime import date
from typing import Generator

import polars as pl
import pytest
from sqlalchemy import Engine, insert

from gold_analytics.config import Settings, WarehouseSettings
from gold_analytics.database.connection import create_warehouse_engine
from gold_analytics.database.models import Base, DimCustomer, DimProduct, FactSales
from gold_analytics.warehouse import (
    DIM_CUSTOMERS,
    DIM_PRODUCTS,
    FACT_SALES,
    GoldTables,
    conform_frame,
)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        APP_ENV="testing",
        DEBUG=True,
    )


@pytest.fixture
def as_of() -> date:
    """Fixed evaluation date so recency and age are reproducible"""
    return date(2024, 1, 15)


@pytest.fixture
def sample_fact_sales() -> pl.DataFrame:
    """
    Sale lines covering the report edge cases:
    - product 1: two orders five months apart, 60100 total
    - product 2: same-month orders, one line with zero quantity
    - product 3: exactly 10000 total over twelve months
    - SO6: no order date, unknown customer
    """
    return conform_frame(
        pl.DataFrame({
            "order_number": ["SO1", "SO2", "SO3", "SO4", "SO5", "SO1", "SO6", "SO7", "SO8"],
            "product_key": [1, 1, 2, 2, 3, 3, 1, 4, 4],
            "customer_key": [10, 11, 12, 12, 10, 10, 99, 14, 14],
            "order_date": [
                date(2023, 1, 10),
                date(2023, 6, 10),
                date(2023, 3, 5),
                date(2023, 3, 28),
                date(2022, 1, 20),
                date(2023, 1, 10),
                None,
                date(2022, 2, 1),
                date(2023, 2, 1),
            ],
            "sales_amount": [100.0, 60000.0, 10.0, 6.0, 9000.0, 1000.0, 5000.0, 20.0, 20.0],
            "quantity": [2, 1, 2, 0, 1, 1, 1, 1, 1],
            "price": [50.0, 60000.0, 5.0, 6.0, 9000.0, 1000.0, 5000.0, 20.0, 20.0],
        }),
        FACT_SALES,
    )


@pytest.fixture
def sample_dim_products() -> pl.DataFrame:
    return conform_frame(
        pl.DataFrame({
            "product_key": [1, 2, 3, 4, 5],
            "product_name": ["Road-150 Red", "Water Bottle", "Long-Sleeve Jersey", "Sport Helmet", "Cycling Cap"],
            "category": ["Bikes", "Accessories", "Clothing", "Accessories", "Clothing"],
            "sub_category": ["Road Bikes", "Bottles and Cages", "Jerseys", "Helmets", "Caps"],
            "cost": [1000.0, 2.0, 30.0, 20.0, 7.0],
        }),
        DIM_PRODUCTS,
    )


@pytest.fixture
def sample_dim_customers() -> pl.DataFrame:
    return conform_frame(
        pl.DataFrame({
            "customer_key": [10, 11, 12, 13, 14],
            "customer_number": ["AW00000010", "AW00000011", "AW00000012", "AW00000013", "AW00000014"],
            "first_name": ["Jon", "Eugene", "Ruben", "Christy", "Ana"],
            "last_name": ["Yang", "Huang", "Torres", "Zhu", "Diaz"],
            "birthdate": [
                date(1971, 10, 6),
                date(2004, 5, 14),
                date(2005, 2, 1),
                date(1990, 1, 1),
                date(1985, 7, 7),
            ],
            "gender": ["Male", "Male", "Male", "Female", "Female"],
            "country": ["Australia", "Australia", "United States", "Canada", "Germany"],
        }),
        DIM_CUSTOMERS,
    )


@pytest.fixture
def gold_tables(sample_fact_sales, sample_dim_products, sample_dim_customers) -> GoldTables:
    return GoldTables(
        fact_sales=sample_fact_sales,
        dim_products=sample_dim_products,
        dim_customers=sample_dim_customers,
    )


@pytest.fixture
def sqlite_engine(gold_tables) -> Generator[Engine, None, None]:
    """In-memory warehouse populated with the sample Gold layer"""
    engine = create_warehouse_engine(WarehouseSettings(url="sqlite://", schema_name=None))
    Base.metadata.create_all(engine)

    with engine.begin() as conn:
        conn.execute(insert(DimProduct.__table__), gold_tables.dim_products.to_dicts())
        conn.execute(insert(DimCustomer.__table__), gold_tables.dim_customers.to_dicts())
        conn.execute(insert(FactSales.__table__), gold_tables.fact_sales.to_dicts())

    yield engine

    engine.dispose()


@pytest.fixture
def export_dir(tmp_path, gold_tables):
    """Directory of CSV exports of the sample Gold layer"""
    for name, df in gold_tables.as_dict().items():
        df.write_csv(tmp_path / f"{name}.csv")
    return tmp_path
