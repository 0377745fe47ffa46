# core/analysis/statistics_engine.py

import logging
import math
import statistics
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from upload_analytics.core.exceptions import EmptyColumnError
from upload_analytics.core.ingestion.table import Table

logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass(frozen=True)
class StatisticsRecord:
    count: int
    mean: float
    median: float
    std_dev: float
    min_value: Number
    max_value: Number

    def to_dict(self) -> Dict[str, Number]:
        """Stable export field names"""
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "stdDev": self.std_dev,
            "min": self.min_value,
            "max": self.max_value,
        }


class StatisticsEngine:
    """
    Computes descriptive statistics for numeric columns and the
    table-level data quality score
    """

    def compute_statistics(self, values: Sequence[Number]) -> Optional[StatisticsRecord]:
        """
        Mean, median, population standard deviation and extrema.

        Returns None for an empty sequence; callers check before use.
        """
        if not values:
            return None

        # Exact-rounding mean keeps min <= mean <= max for float input
        mean = float(statistics.mean(values))
        median = float(statistics.median(values))
        std_dev = float(statistics.pstdev(values))

        return StatisticsRecord(
            count=len(values),
            mean=mean,
            median=median,
            std_dev=std_dev,
            min_value=min(values),
            max_value=max(values),
        )

    def column_statistics(self, table: Table, column: str) -> StatisticsRecord:
        """
        Statistics over the finite numbers of one column
        """
        values = [v for v in table.numeric_values(column) if math.isfinite(v)]
        record = self.compute_statistics(values)

        if record is None:
            raise EmptyColumnError(column)

        return record

    def compute_column_statistics(self, table: Table, columns: List[str],
                                  limit: Optional[int] = None) -> Dict[str, StatisticsRecord]:
        """
        Statistics per column, skipping columns without valid values.

        An empty column is logged and omitted; it never fails the others.
        """
        selected = columns if limit is None else columns[:limit]
        results: Dict[str, StatisticsRecord] = {}

        for column in selected:
            try:
                results[column] = self.column_statistics(table, column)
            except EmptyColumnError as e:
                logger.warning(f"Skipping statistics for '{column}': {e.message}")
            except ArithmeticError as e:
                logger.warning(f"Skipping statistics for '{column}': {e}")

        return results

    def calculate_data_quality(self, table: Table) -> int:
        """
        Percentage of filled cells across the table (0-100)
        """
        total_cells = table.record_count * table.column_count
        if total_cells == 0:
            return 0

        # Half-up rounding, not banker's: 62.5 reports as 63
        return math.floor(100 * table.filled_cell_count() / total_cells + 0.5)
