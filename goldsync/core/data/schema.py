"""DuckDB table definitions for the quotation document store."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from duckdb import DuckDBPyConnection


def quote_identifier(name: str) -> str:
    return f'"{name}"'


@dataclass(frozen=True)
class ColumnDef:
    """Represents a DuckDB table column definition."""

    name: str
    data_type: str
    constraints: Sequence[str] = ()

    def render(self) -> str:
        parts = [quote_identifier(self.name), self.data_type, *self.constraints]
        return " ".join(parts)


@dataclass(frozen=True)
class TableSchema:
    """Utility wrapper describing a DuckDB table schema."""

    name: str
    columns: Sequence[ColumnDef]
    primary_key: Sequence[str] = ()

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def named(self, name: str) -> TableSchema:
        """Return the same schema under another table name."""
        return replace(self, name=name)

    def create_ddl(self) -> str:
        column_defs: list[str] = [column.render() for column in self.columns]
        if self.primary_key:
            pk_cols = ", ".join(quote_identifier(column) for column in self.primary_key)
            column_defs.append(f"PRIMARY KEY ({pk_cols})")
        columns_sql = ",\n                ".join(column_defs)
        return f"""
            CREATE TABLE IF NOT EXISTS {self.name} (
                {columns_sql}
            )
            """.strip()

    def ensure(self, conn: DuckDBPyConnection) -> None:
        """Create the table on the provided connection if it does not exist."""

        conn.execute(self.create_ddl())


# Column names mirror the stored document fields.
GOLD_PRICE_HISTORY_TABLE = TableSchema(
    name="gold_price_history",
    columns=(
        ColumnDef("id", "VARCHAR", ("NOT NULL",)),
        ColumnDef("date", "VARCHAR", ("NOT NULL",)),
        ColumnDef("type", "VARCHAR", ("NOT NULL",)),
        ColumnDef("buy", "DOUBLE", ("NOT NULL",)),
        ColumnDef("sell", "DOUBLE", ("NOT NULL",)),
        ColumnDef("provider", "VARCHAR"),
        ColumnDef("syncedAt", "VARCHAR"),
    ),
    primary_key=("id",),
)

DOCUMENT_FIELDS = ("date", "type", "buy", "sell", "provider", "syncedAt")


__all__ = ["quote_identifier", "ColumnDef", "TableSchema", "GOLD_PRICE_HISTORY_TABLE", "DOCUMENT_FIELDS"]
