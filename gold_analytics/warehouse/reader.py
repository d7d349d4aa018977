"""
Gold Layer Reader

Reads the fact and dimension relations into Polars DataFrames, either from
the warehouse database (SQLAlchemy Core) or from a directory of CSV/Parquet
exports. Both paths conform the frames to the canonical schemas so the
analyses never have to care where the data came from.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import polars as pl
import structlog
from sqlalchemy import Engine, Table, select

from gold_analytics.database.models import DimCustomer, DimProduct, FactSales
from gold_analytics.warehouse.schemas import (
    DIM_CUSTOMERS,
    DIM_PRODUCTS,
    FACT_SALES,
    REQUIRED_COLUMNS,
    SCHEMAS,
)

logger = structlog.get_logger(__name__)

NULL_VALUES = ["", "NULL", "null", "None", "NA", "N/A"]
DATE_FORMAT = "%Y-%m-%d"

_TABLES: Dict[str, Table] = {
    FACT_SALES: FactSales.__table__,
    DIM_PRODUCTS: DimProduct.__table__,
    DIM_CUSTOMERS: DimCustomer.__table__,
}


class WarehouseError(RuntimeError):
    """A Gold layer relation is missing or cannot be read"""


class FileFormat(str, Enum):
    """Supported export formats"""
    CSV = "csv"
    PARQUET = "parquet"


@dataclass
class GoldTables:
    """The three Gold layer relations, conformed to their schemas"""
    fact_sales: pl.DataFrame
    dim_products: pl.DataFrame
    dim_customers: pl.DataFrame

    def as_dict(self) -> Dict[str, pl.DataFrame]:
        return {
            FACT_SALES: self.fact_sales,
            DIM_PRODUCTS: self.dim_products,
            DIM_CUSTOMERS: self.dim_customers,
        }

    def row_counts(self) -> Dict[str, int]:
        return {name: len(df) for name, df in self.as_dict().items()}


def conform_frame(df: pl.DataFrame, relation: str) -> pl.DataFrame:
    """
    Cast a raw frame to the canonical schema of ``relation``.

    Raises:
        WarehouseError: If a column the analyses depend on is absent
    """
    schema = SCHEMAS[relation]
    missing = [c for c in REQUIRED_COLUMNS[relation] if c not in df.columns]
    if missing:
        raise WarehouseError(f"Relation '{relation}' is missing columns: {missing}")

    exprs = []
    for name, dtype in schema.items():
        if name not in df.columns:
            exprs.append(pl.lit(None, dtype=dtype).alias(name))
            continue

        current = df.schema[name]
        col = pl.col(name)
        if dtype == pl.Date and current == pl.Utf8:
            col = col.str.to_date(DATE_FORMAT)
        elif dtype == pl.Date and isinstance(current, pl.Datetime):
            col = col.dt.date()
        else:
            col = col.cast(dtype)
        exprs.append(col.alias(name))

    return df.select(exprs)


def _coerce(value: Any) -> Any:
    """Numeric columns come back as Decimal from most drivers"""
    if isinstance(value, Decimal):
        return float(value)
    return value


class WarehouseReader:
    """
    Loads the Gold layer relations.

    Example:
        reader = WarehouseReader.from_engine(get_engine())
        tables = reader.load()
    """

    def __init__(
        self,
        engine: Optional[Engine] = None,
        directory: Optional[Union[str, Path]] = None,
    ):
        if (engine is None) == (directory is None):
            raise ValueError("Provide exactly one of engine or directory")
        self.engine = engine
        self.directory = Path(directory) if directory is not None else None

    @classmethod
    def from_engine(cls, engine: Engine) -> "WarehouseReader":
        return cls(engine=engine)

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "WarehouseReader":
        directory = Path(directory)
        if not directory.is_dir():
            raise WarehouseError(f"Export directory not found: {directory}")
        return cls(directory=directory)

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------

    def _read_table(self, relation: str) -> pl.DataFrame:
        table = _TABLES[relation]
        schema = SCHEMAS[relation]
        stmt = select(*[table.c[name] for name in schema])

        try:
            with self.engine.connect() as conn:
                rows = [tuple(_coerce(v) for v in row) for row in conn.execute(stmt)]
        except Exception as e:
            logger.error("Failed to read relation", relation=relation, error=str(e))
            raise WarehouseError(f"Cannot read relation '{relation}': {e}") from e

        return pl.DataFrame(rows, schema=schema, orient="row")

    # -------------------------------------------------------------------------
    # Exports
    # -------------------------------------------------------------------------

    def _candidates(self, relation: str) -> List[Path]:
        names = [relation, f"gold.{relation}"]
        return [
            self.directory / f"{name}.{fmt.value}"
            for name in names
            for fmt in FileFormat
        ]

    def _read_file(self, relation: str) -> pl.DataFrame:
        for path in self._candidates(relation):
            if not path.exists():
                continue

            logger.debug("Reading export", relation=relation, path=str(path))
            if path.suffix == f".{FileFormat.PARQUET.value}":
                df = pl.read_parquet(path)
            else:
                df = pl.read_csv(
                    path,
                    null_values=NULL_VALUES,
                    try_parse_dates=True,
                    infer_schema_length=10000,
                )
            return conform_frame(df, relation)

        raise WarehouseError(
            f"No export found for relation '{relation}' in {self.directory}"
        )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def read(self, relation: str) -> pl.DataFrame:
        """Read a single relation by name"""
        if relation not in SCHEMAS:
            raise WarehouseError(f"Unknown relation: {relation}")
        if self.engine is not None:
            return self._read_table(relation)
        return self._read_file(relation)

    def load(self) -> GoldTables:
        """Read all three relations"""
        tables = GoldTables(
            fact_sales=self.read(FACT_SALES),
            dim_products=self.read(DIM_PRODUCTS),
            dim_customers=self.read(DIM_CUSTOMERS),
        )
        logger.info("Gold layer loaded", **tables.row_counts())
        return tables
