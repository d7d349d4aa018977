"""
Warehouse Connection Management

Read-only SQLAlchemy 2.0 engine for the Gold layer.
Implements schema remapping, health checks, and graceful shutdown.
"""

import time
from contextlib import contextmanager
from typing import Generator, Optional

import structlog
from sqlalchemy import Connection, Engine, create_engine, text
from sqlalchemy.pool import StaticPool

from gold_analytics.config import WarehouseSettings, get_settings
from gold_analytics.database.models import GOLD_SCHEMA

logger = structlog.get_logger(__name__)

# Global engine
_engine: Optional[Engine] = None


def create_warehouse_engine(warehouse: Optional[WarehouseSettings] = None) -> Engine:
    """
    Build an engine for the given warehouse settings.

    The ``gold`` schema used by the models is translated to
    ``warehouse.schema_name`` on every statement.
    """
    warehouse = warehouse or get_settings().warehouse

    engine_config = {
        "echo": warehouse.echo,
        "pool_pre_ping": True,  # Verify connections before use
    }

    if warehouse.sync_url.startswith("sqlite"):
        # In-memory SQLite only lives as long as its single connection
        engine_config["poolclass"] = StaticPool
        engine_config["connect_args"] = {"check_same_thread": False}
    else:
        engine_config["pool_size"] = warehouse.pool_size
        engine_config["pool_timeout"] = warehouse.pool_timeout

    engine = create_engine(warehouse.sync_url, **engine_config)
    return engine.execution_options(
        schema_translate_map={GOLD_SCHEMA: warehouse.schema_name},
    )


def init_database(warehouse: Optional[WarehouseSettings] = None) -> Engine:
    """
    Initialize the warehouse engine.

    Returns:
        Engine: The initialized warehouse engine
    """
    global _engine

    if _engine is not None:
        logger.warning("Database already initialized")
        return _engine

    warehouse = warehouse or get_settings().warehouse
    engine = create_warehouse_engine(warehouse)

    # Verify connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info(
            "Warehouse connection established",
            url=engine.url.render_as_string(hide_password=True),
            schema=warehouse.schema_name,
        )
    except Exception as e:
        logger.error("Failed to connect to warehouse", error=str(e))
        engine.dispose()
        raise

    _engine = engine
    return _engine


def close_database() -> None:
    """Dispose of the warehouse engine and its pooled connections."""
    global _engine

    if _engine is not None:
        _engine.dispose()
        _engine = None
        logger.info("Warehouse connection pool closed")


def get_engine() -> Engine:
    """
    Get the warehouse engine.

    Raises:
        RuntimeError: If database is not initialized
    """
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _engine


@contextmanager
def get_connection() -> Generator[Connection, None, None]:
    """
    Get a read-only connection from the pool.

    The connection's implicit transaction is always rolled back; nothing in
    this package writes to the warehouse.

    Example:
        with get_connection() as conn:
            rows = conn.execute(query).all()
    """
    engine = get_engine()
    logger.debug("Opening warehouse connection")
    with engine.connect() as conn:
        try:
            yield conn
        except Exception as e:
            logger.error("Warehouse query failed", error=str(e), error_type=type(e).__name__)
            raise
        finally:
            conn.rollback()


def check_database_health() -> dict:
    """
    Check warehouse health status.

    Returns:
        dict: Health status with latency information
    """
    try:
        start = time.perf_counter()
        with get_connection() as conn:
            conn.execute(text("SELECT 1"))
        latency_ms = (time.perf_counter() - start) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(latency_ms, 2),
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e),
        }
