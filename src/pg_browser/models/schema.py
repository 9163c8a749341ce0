"""Catalog and table data models.

These models mirror the JSON shapes returned to clients, so their field
names follow the ``information_schema`` column names.
"""

from typing import Any

from pydantic import BaseModel, Field


class TableRef(BaseModel):
    """A base table located by schema and name."""

    table_schema: str = Field(..., description="Schema name")
    table_name: str = Field(..., description="Table name")

    @property
    def full_name(self) -> str:
        """Get fully qualified table name.

        Returns:
            str: Schema-qualified table name.
        """
        return f"{self.table_schema}.{self.table_name}"


class ColumnMeta(BaseModel):
    """Name and declared type of a table column."""

    column_name: str = Field(..., description="Column name")
    data_type: str = Field(..., description="Declared PostgreSQL data type")


class TablePage(BaseModel):
    """One page of table rows together with the table's exact row count."""

    columns: list[ColumnMeta] = Field(default_factory=list, description="Columns in declared order")
    rows: list[dict[str, Any]] = Field(default_factory=list, description="Rows of this page")
    total: int = Field(..., ge=0, description="Exact number of rows in the table")

    @property
    def row_count(self) -> int:
        """Number of rows in this page."""
        return len(self.rows)
