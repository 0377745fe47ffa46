# core/visualization/chart_suggester.py

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from upload_analytics.core.analysis.column_classifier import ColumnClassification
from upload_analytics.core.exceptions import (
    ConfigurationError,
    EmptyColumnError,
    NoNumericColumnsWarning,
)
from upload_analytics.core.ingestion.table import Table
from upload_analytics.core.visualization.chart_plans import (
    ChartMode,
    ChartPlan,
    ChartPlanBuilder,
    ChartStyle,
    ChartVariant,
    make_chart_id,
)

logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass(frozen=True)
class ChartOptions:
    mode: ChartMode
    style: ChartStyle


@dataclass(frozen=True)
class SkippedChart:
    chart_id: str
    columns: List[str]
    reason: str


@dataclass
class ChartLayout:
    """Plans for one refresh plus what was skipped and why"""
    plans: List[ChartPlan] = field(default_factory=list)
    skipped: List[SkippedChart] = field(default_factory=list)
    warnings: List[Warning] = field(default_factory=list)


class ChartSuggester:
    """
    Chooses chart variants and decides which charts a table gets.

    The auto policy looks only at how many values a column has: it is a
    readability heuristic, not a test of distribution shape.
    """

    def __init__(self, plan_builder: Optional[ChartPlanBuilder] = None,
                 max_numeric_charts: int = 4,
                 histogram_threshold: int = 50,
                 line_threshold: int = 20):
        self.plan_builder = plan_builder or ChartPlanBuilder()
        self.max_numeric_charts = max_numeric_charts
        self.histogram_threshold = histogram_threshold
        self.line_threshold = line_threshold

    def select_variant(self, values: Sequence[Number],
                       user_choice: Union[ChartMode, str] = ChartMode.AUTO) -> ChartVariant:
        """
        Variant for a single numeric column
        """
        try:
            mode = ChartMode(user_choice)
        except ValueError:
            raise ConfigurationError(
                f"Unknown chart type '{user_choice}'",
                {"available": [m.value for m in ChartMode]}
            ) from None

        if mode != ChartMode.AUTO:
            return ChartVariant(mode.value)

        if len(values) > self.histogram_threshold:
            return ChartVariant.HISTOGRAM
        if len(values) > self.line_threshold:
            return ChartVariant.LINE
        return ChartVariant.BAR

    def plan_charts(self, table: Table, classification: ColumnClassification,
                    options: ChartOptions) -> ChartLayout:
        """
        Per-column charts for the first numeric columns, then at most one
        correlation chart and one categorical-aggregate chart
        """
        layout = ChartLayout()
        numeric_columns = classification.numeric
        categorical_columns = classification.categorical

        if not numeric_columns:
            layout.warnings.append(NoNumericColumnsWarning("No numeric columns found for visualization"))
            logger.warning("No numeric columns found - skipping numeric charts")
            return layout

        for index, column in enumerate(numeric_columns[:self.max_numeric_charts]):
            values = table.numeric_values(column)
            try:
                variant = self.select_variant(values, options.mode)
                plan = self.plan_builder.build_plan(column, variant, values, options.style, index)
            except EmptyColumnError as e:
                layout.skipped.append(SkippedChart(make_chart_id(column, index), [column], e.message))
                logger.warning(f"Skipping chart for '{column}': {e.message}")
                continue
            layout.plans.append(plan)

        if len(numeric_columns) > 1:
            layout.plans.append(self.plan_builder.build_correlation_plan(
                table, numeric_columns[0], numeric_columns[1], options.style
            ))

        if categorical_columns:
            layout.plans.append(self.plan_builder.build_category_plan(
                table, categorical_columns[0], numeric_columns[0], options.style
            ))

        logger.info(
            f"📊 Planned {len(layout.plans)} charts "
            f"({len(layout.skipped)} skipped, mode={options.mode.value})"
        )

        return layout
