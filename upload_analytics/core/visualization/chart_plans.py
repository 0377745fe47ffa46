# core/visualization/chart_plans.py

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from upload_analytics.core.analysis.binning import (
    DEFAULT_HISTOGRAM_BINS,
    DEFAULT_PIE_RANGES,
    histogram_bins,
    value_ranges,
)
from upload_analytics.core.exceptions import ConfigurationError, EmptyColumnError
from upload_analytics.core.ingestion.table import Table
from upload_analytics.core.visualization.palettes import get_palette

logger = logging.getLogger(__name__)

Number = Union[int, float]


class ChartMode(str, Enum):
    """Chart type requested by the user"""
    AUTO = "auto"
    BAR = "bar"
    LINE = "line"
    HISTOGRAM = "histogram"
    PIE = "pie"


class ChartVariant(str, Enum):
    """Chart variant a plan describes"""
    BAR = "bar"
    LINE = "line"
    HISTOGRAM = "histogram"
    PIE = "pie"
    SCATTER = "scatter"
    GROUPED_BAR = "grouped_bar"


@dataclass(frozen=True)
class ChartStyle:
    palette_name: str
    colors: Tuple[str, ...]
    animation_duration: int

    @classmethod
    def from_options(cls, palette_name: str, animation_duration: int) -> "ChartStyle":
        if animation_duration < 0:
            raise ConfigurationError(
                "Animation duration cannot be negative",
                {"animation_duration": animation_duration}
            )
        return cls(
            palette_name=palette_name,
            colors=tuple(get_palette(palette_name)),
            animation_duration=animation_duration,
        )

    @property
    def primary_color(self) -> str:
        return self.colors[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "palette": self.palette_name,
            "colors": list(self.colors),
            "animationDuration": self.animation_duration,
        }


@dataclass
class ChartPlan:
    """
    Declarative description of one chart for the rendering collaborator
    """
    chart_id: str
    title: str
    variant: ChartVariant
    target_columns: Tuple[str, ...]
    labels: List[Union[str, int]]
    data_points: List[Any]
    dataset_label: Optional[str]
    style: ChartStyle
    x_axis_title: Optional[str] = None
    y_axis_title: Optional[str] = None
    notice: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.data_points

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chartId": self.chart_id,
            "title": self.title,
            "variant": self.variant.value,
            "targetColumns": list(self.target_columns),
            "labels": list(self.labels),
            "dataPoints": list(self.data_points),
            "datasetLabel": self.dataset_label,
            "xAxisTitle": self.x_axis_title,
            "yAxisTitle": self.y_axis_title,
            "style": self.style.to_dict(),
            "notice": self.notice,
            "metadata": dict(self.metadata),
        }


def make_chart_id(column: str, index: int) -> str:
    return f"chart_{re.sub(r'[^a-zA-Z0-9]', '_', column)}_{index}"


class ChartPlanBuilder:
    """
    Shapes column data into chart plans, one method per chart family
    """

    def __init__(self, histogram_bins: int = DEFAULT_HISTOGRAM_BINS,
                 pie_ranges: int = DEFAULT_PIE_RANGES,
                 bar_max_items: int = 20):
        self.histogram_bins = histogram_bins
        self.pie_ranges = pie_ranges
        self.bar_max_items = bar_max_items

    def build_plan(self, column: str, variant: ChartVariant, values: Sequence[Number],
                   style: ChartStyle, index: int = 0) -> ChartPlan:
        """
        Plan a single-column chart; raises EmptyColumnError without values
        """
        if not values:
            raise EmptyColumnError(column)

        chart_id = make_chart_id(column, index)

        if variant == ChartVariant.BAR:
            return self._bar_plan(chart_id, column, values, style)
        if variant == ChartVariant.LINE:
            return self._line_plan(chart_id, column, values, style)
        if variant == ChartVariant.HISTOGRAM:
            return self._histogram_plan(chart_id, column, values, style)
        if variant == ChartVariant.PIE:
            return self._pie_plan(chart_id, column, values, style)

        raise ConfigurationError(
            f"Chart variant '{variant.value}' needs more than one column",
            {"column": column}
        )

    def _bar_plan(self, chart_id: str, column: str, values: Sequence[Number],
                  style: ChartStyle) -> ChartPlan:
        display_values = list(values[:self.bar_max_items])
        return ChartPlan(
            chart_id=chart_id,
            title=column,
            variant=ChartVariant.BAR,
            target_columns=(column,),
            labels=[f"Item {i + 1}" for i in range(len(display_values))],
            data_points=display_values,
            dataset_label=column,
            style=style,
            metadata={"total_values": len(values), "truncated": len(values) > self.bar_max_items},
        )

    def _line_plan(self, chart_id: str, column: str, values: Sequence[Number],
                   style: ChartStyle) -> ChartPlan:
        return ChartPlan(
            chart_id=chart_id,
            title=column,
            variant=ChartVariant.LINE,
            target_columns=(column,),
            labels=list(range(1, len(values) + 1)),
            data_points=list(values),
            dataset_label=column,
            style=style,
            metadata={"total_values": len(values)},
        )

    def _histogram_plan(self, chart_id: str, column: str, values: Sequence[Number],
                        style: ChartStyle) -> ChartPlan:
        bins = histogram_bins(values, self.histogram_bins, column)
        return ChartPlan(
            chart_id=chart_id,
            title=f"Distribution of {column}",
            variant=ChartVariant.HISTOGRAM,
            target_columns=(column,),
            labels=[bin_.label for bin_ in bins],
            data_points=[bin_.count for bin_ in bins],
            dataset_label="Frequency",
            style=style,
            x_axis_title=column,
            y_axis_title="Frequency",
            metadata={"bins": [bin_.to_dict() for bin_ in bins], "total_values": len(values)},
        )

    def _pie_plan(self, chart_id: str, column: str, values: Sequence[Number],
                  style: ChartStyle) -> ChartPlan:
        ranges = value_ranges(values, self.pie_ranges, column)
        return ChartPlan(
            chart_id=chart_id,
            title=column,
            variant=ChartVariant.PIE,
            target_columns=(column,),
            labels=[range_.label for range_ in ranges],
            data_points=[range_.count for range_ in ranges],
            dataset_label=None,
            style=style,
            metadata={"ranges": [range_.to_dict() for range_ in ranges], "total_values": len(values)},
        )

    def build_correlation_plan(self, table: Table, x_column: str, y_column: str,
                               style: ChartStyle) -> ChartPlan:
        """
        Scatter of two numeric columns over rows where both are finite.

        No valid pair yields an empty plan with a notice, not an error.
        """
        points = [{"x": x, "y": y} for x, y in table.numeric_pairs(x_column, y_column)]

        plan = ChartPlan(
            chart_id="correlation_chart",
            title=f"Correlation: {x_column} vs {y_column}",
            variant=ChartVariant.SCATTER,
            target_columns=(x_column, y_column),
            labels=[],
            data_points=points,
            dataset_label=f"{x_column} vs {y_column}",
            style=style,
            x_axis_title=x_column,
            y_axis_title=y_column,
            metadata={"point_count": len(points)},
        )

        if not points:
            plan.notice = "No valid data for correlation analysis"
            logger.warning(f"No valid pairs for correlation of '{x_column}' and '{y_column}'")

        return plan

    def build_category_plan(self, table: Table, category_column: str, value_column: str,
                            style: ChartStyle) -> ChartPlan:
        """
        Mean of a numeric column per category, one bar per category in
        first-appearance order
        """
        groups: Dict[Any, List[Number]] = {}

        for record_index in range(table.record_count):
            category = table.cell(record_index, category_column)
            value = table.cell(record_index, value_column)
            if category.is_empty or not value.is_number:
                continue
            groups.setdefault(category.value, []).append(value.value)

        categories = [str(name) for name in groups]
        averages = [sum(values) / len(values) for values in groups.values()]

        plan = ChartPlan(
            chart_id="categorical_chart",
            title=f"{value_column} by {category_column}",
            variant=ChartVariant.GROUPED_BAR,
            target_columns=(category_column, value_column),
            labels=categories,
            data_points=averages,
            dataset_label=f"Average {value_column}",
            style=style,
            x_axis_title=category_column,
            y_axis_title=f"Average {value_column}",
            metadata={"group_sizes": {str(name): len(values) for name, values in groups.items()}},
        )

        if not categories:
            plan.notice = "No valid categorical data found"
            logger.warning(f"No valid groups for '{value_column}' by '{category_column}'")

        return plan
