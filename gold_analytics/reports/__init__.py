"""
Report Views Module
"""
from .common import ReportComputationError, months_between, years_between
from .context import REPORT_CUSTOMERS, REPORT_PRODUCTS, ReportContext
from .customers import build_customer_report, customer_report
from .products import build_product_report, product_report

__all__ = [
    "ReportComputationError",
    "months_between",
    "years_between",
    "REPORT_CUSTOMERS",
    "REPORT_PRODUCTS",
    "ReportContext",
    "build_customer_report",
    "customer_report",
    "build_product_report",
    "product_report",
]
