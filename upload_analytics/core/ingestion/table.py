# core/ingestion/table.py

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from upload_analytics.core.exceptions import EmptyTableError
from upload_analytics.core.ingestion.cell_parser import CellValue, EMPTY_CELL, parse_cell

logger = logging.getLogger(__name__)

Record = Dict[str, CellValue]


@dataclass(frozen=True)
class Table:
    """
    In-memory ordered sequence of parsed records.

    The column set is the key set of the first record; later records may
    lack keys, which read as empty cells.
    """
    records: List[Record]
    columns: List[str]
    source_name: Optional[str] = None
    dropped_rows: int = field(default=0)

    @classmethod
    def from_records(cls, rows: Iterable[Mapping[str, Any]],
                     source_name: Optional[str] = None) -> "Table":
        """
        Parse raw rows into a table, dropping rows with no filled cell
        """
        records: List[Record] = []
        dropped = 0

        for row in rows:
            parsed = {str(key): parse_cell(value) for key, value in row.items()}
            if all(cell.is_empty for cell in parsed.values()):
                dropped += 1
                continue
            records.append(parsed)

        columns = list(records[0].keys()) if records else []

        if dropped:
            logger.debug(f"Dropped {dropped} empty rows from {source_name or 'table'}")

        return cls(records=records, columns=columns, source_name=source_name, dropped_rows=dropped)

    @property
    def record_count(self) -> int:
        return len(self.records)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def is_empty(self) -> bool:
        return not self.records or not self.columns

    def ensure_valid(self) -> None:
        """
        Raise EmptyTableError unless the table has a record and a column
        """
        if not self.records:
            raise EmptyTableError("No valid data rows found")
        if not self.columns:
            raise EmptyTableError("No columns found in the data")

    def cell(self, row_index: int, column: str) -> CellValue:
        return self.records[row_index].get(column, EMPTY_CELL)

    def column_cells(self, column: str) -> List[CellValue]:
        return [record.get(column, EMPTY_CELL) for record in self.records]

    def numeric_values(self, column: str) -> List[Union[int, float]]:
        """Finite numbers of a column in row order"""
        return [cell.value for cell in self.column_cells(column) if cell.is_number]

    def numeric_pairs(self, x_column: str, y_column: str) -> List[Tuple[Union[int, float], Union[int, float]]]:
        """Rows where both columns hold finite numbers"""
        pairs = []
        for record in self.records:
            x = record.get(x_column, EMPTY_CELL)
            y = record.get(y_column, EMPTY_CELL)
            if x.is_number and y.is_number:
                pairs.append((x.value, y.value))
        return pairs

    def filled_cell_count(self) -> int:
        return sum(
            1
            for record in self.records
            for column in self.columns
            if not record.get(column, EMPTY_CELL).is_empty
        )

    def to_rows(self, limit: Optional[int] = None,
                columns: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        """Plain dictionaries for serialization, empty cells as None"""
        selected = columns if columns is not None else self.columns
        records = self.records if limit is None else self.records[:limit]
        return [
            {column: record.get(column, EMPTY_CELL).to_python() for column in selected}
            for record in records
        ]
