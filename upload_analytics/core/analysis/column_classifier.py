# core/analysis/column_classifier.py

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from upload_analytics.core.ingestion.table import Table

logger = logging.getLogger(__name__)


class ColumnType(str, Enum):
    """Type tag assigned to each column once per refresh"""
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class ColumnClassification:
    numeric: List[str] = field(default_factory=list)
    categorical: List[str] = field(default_factory=list)
    other: List[str] = field(default_factory=list)
    types: Dict[str, ColumnType] = field(default_factory=dict)

    def type_of(self, column: str) -> ColumnType:
        return self.types.get(column, ColumnType.UNCLASSIFIED)

    @property
    def has_numeric(self) -> bool:
        return bool(self.numeric)

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "numeric": list(self.numeric),
            "categorical": list(self.categorical),
            "other": list(self.other),
        }


class ColumnClassifier:
    """
    Labels each column Numeric, Categorical or Unclassified.

    Numeric: at least one non-empty value and every non-empty value is a
    finite number. A single stray text value demotes the column.
    Categorical: not numeric, with 2 to 20 distinct non-empty values.
    """

    def __init__(self, min_categories: int = 2, max_categories: int = 20):
        self.min_categories = min_categories
        self.max_categories = max_categories

    def classify(self, table: Table) -> ColumnClassification:
        numeric: List[str] = []
        categorical: List[str] = []
        other: List[str] = []
        types: Dict[str, ColumnType] = {}

        for column in table.columns:
            column_type = self.classify_column(table, column)
            types[column] = column_type

            if column_type == ColumnType.NUMERIC:
                numeric.append(column)
            elif column_type == ColumnType.CATEGORICAL:
                categorical.append(column)
            else:
                other.append(column)

        logger.debug(
            f"Classified {len(table.columns)} columns: "
            f"{len(numeric)} numeric, {len(categorical)} categorical, {len(other)} other"
        )

        return ColumnClassification(
            numeric=numeric,
            categorical=categorical,
            other=other,
            types=types,
        )

    def classify_column(self, table: Table, column: str) -> ColumnType:
        cells = [cell for cell in table.column_cells(column) if not cell.is_empty]

        if not cells:
            return ColumnType.UNCLASSIFIED

        if all(cell.is_number for cell in cells):
            return ColumnType.NUMERIC

        distinct_count = len({cell.value for cell in cells})
        if self.min_categories <= distinct_count <= self.max_categories:
            return ColumnType.CATEGORICAL

        return ColumnType.UNCLASSIFIED
