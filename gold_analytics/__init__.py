"""
Gold Layer Analytics

Descriptive analytics and report views over a star-schema Gold layer.
"""

__version__ = "1.0.0"
