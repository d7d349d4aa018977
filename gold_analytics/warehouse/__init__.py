"""
Gold Layer Access Module
"""
from .reader import FileFormat, GoldTables, WarehouseError, WarehouseReader, conform_frame
from .schemas import DIM_CUSTOMERS, DIM_PRODUCTS, FACT_SALES, SCHEMAS

__all__ = [
    "FileFormat",
    "GoldTables",
    "WarehouseError",
    "WarehouseReader",
    "conform_frame",
    "DIM_CUSTOMERS",
    "DIM_PRODUCTS",
    "FACT_SALES",
    "SCHEMAS",
]
