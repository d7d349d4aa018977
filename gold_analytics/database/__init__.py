"""
Database Module
"""
from .connection import (
    check_database_health,
    close_database,
    create_warehouse_engine,
    get_connection,
    get_engine,
    init_database,
)
from .models import Base, DimCustomer, DimProduct, FactSales

__all__ = [
    "check_database_health",
    "close_database",
    "create_warehouse_engine",
    "get_connection",
    "get_engine",
    "init_database",
    "Base",
    "DimCustomer",
    "DimProduct",
    "FactSales",
]
