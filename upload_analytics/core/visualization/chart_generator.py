# core/visualization/chart_generator.py

import logging
from typing import Any, Dict

from upload_analytics.core.exceptions import RenderingError
from upload_analytics.core.visualization.chart_plans import ChartPlan, ChartVariant
from upload_analytics.core.visualization.palettes import with_alpha

logger = logging.getLogger(__name__)

GRID_COLOR = "rgba(0, 0, 0, 0.1)"
TICK_COLOR = "#6B7280"


class ChartGenerator:
    """
    Renders chart plans into complete Chart.js configurations for the
    browser. Canvas and chart-instance lifecycle stays on the client.
    """

    def generate_chart_config(self, plan: ChartPlan) -> Dict[str, Any]:
        """
        Chart.js configuration for one plan; failures raise RenderingError
        """
        try:
            if plan.is_empty:
                return self._empty_chart_config(plan)

            builders = {
                ChartVariant.BAR: self._bar_config,
                ChartVariant.LINE: self._line_config,
                ChartVariant.HISTOGRAM: self._histogram_config,
                ChartVariant.PIE: self._pie_config,
                ChartVariant.SCATTER: self._scatter_config,
                ChartVariant.GROUPED_BAR: self._grouped_bar_config,
            }
            config = builders[plan.variant](plan)
            config["options"]["animation"] = {"duration": plan.style.animation_duration}

            logger.debug(f"Generated {plan.variant.value} config for {plan.chart_id}")
            return config

        except RenderingError:
            raise
        except Exception as e:
            logger.error(f"Error generating chart config for {plan.chart_id}: {e}")
            raise RenderingError(plan.chart_id, f"Error creating chart for {plan.title}") from e

    def _bar_config(self, plan: ChartPlan) -> Dict[str, Any]:
        color = plan.style.primary_color
        return {
            "type": "bar",
            "data": {
                "labels": plan.labels,
                "datasets": [{
                    "label": plan.dataset_label,
                    "data": plan.data_points,
                    "backgroundColor": with_alpha(color, "80"),
                    "borderColor": color,
                    "borderWidth": 2,
                    "borderRadius": 4,
                    "borderSkipped": False,
                }]
            },
            "options": self._base_options(
                tooltip=self._tooltip_config(border_color=color),
                scales={
                    "y": self._axis(begin_at_zero=True),
                    "x": self._axis(show_grid=False),
                }
            )
        }

    def _line_config(self, plan: ChartPlan) -> Dict[str, Any]:
        color = plan.style.primary_color
        return {
            "type": "line",
            "data": {
                "labels": plan.labels,
                "datasets": [{
                    "label": plan.dataset_label,
                    "data": plan.data_points,
                    "borderColor": color,
                    "backgroundColor": with_alpha(color, "20"),
                    "fill": True,
                    "tension": 0.4,
                    "pointBackgroundColor": color,
                    "pointBorderColor": "#fff",
                    "pointBorderWidth": 2,
                    "pointRadius": 3,
                    "pointHoverRadius": 5,
                }]
            },
            "options": self._base_options(
                tooltip=self._tooltip_config(),
                scales={
                    "y": self._axis(begin_at_zero=True),
                    "x": self._axis(),
                }
            )
        }

    def _histogram_config(self, plan: ChartPlan) -> Dict[str, Any]:
        color = plan.style.primary_color
        options = self._base_options(
            scales={
                "y": self._axis(begin_at_zero=True, title=plan.y_axis_title),
                "x": self._axis(show_grid=False, title=plan.x_axis_title),
            }
        )
        options["plugins"]["title"] = {
            "display": True,
            "text": plan.title,
            "font": {"size": 14, "weight": "bold"},
        }
        return {
            "type": "bar",
            "data": {
                "labels": plan.labels,
                "datasets": [{
                    "label": plan.dataset_label,
                    "data": plan.data_points,
                    "backgroundColor": with_alpha(color, "80"),
                    "borderColor": color,
                    "borderWidth": 2,
                    "borderRadius": 4,
                }]
            },
            "options": options
        }

    def _pie_config(self, plan: ChartPlan) -> Dict[str, Any]:
        colors = list(plan.style.colors)
        slice_count = len(plan.data_points)
        options = self._base_options(tooltip=self._tooltip_config())
        options["plugins"]["legend"] = {
            "position": "bottom",
            "labels": {"color": TICK_COLOR},
        }
        return {
            "type": "pie",
            "data": {
                "labels": plan.labels,
                "datasets": [{
                    "data": plan.data_points,
                    "backgroundColor": [colors[i % len(colors)] for i in range(slice_count)],
                    "borderColor": "#fff",
                    "borderWidth": 2,
                }]
            },
            "options": options
        }

    def _scatter_config(self, plan: ChartPlan) -> Dict[str, Any]:
        color = plan.style.primary_color
        return {
            "type": "scatter",
            "data": {
                "datasets": [{
                    "label": plan.dataset_label,
                    "data": plan.data_points,
                    "backgroundColor": with_alpha(color, "60"),
                    "borderColor": color,
                    "borderWidth": 2,
                    "pointRadius": 4,
                    "pointHoverRadius": 6,
                }]
            },
            "options": self._base_options(
                tooltip=self._tooltip_config(),
                scales={
                    "x": self._axis(title=plan.x_axis_title),
                    "y": self._axis(title=plan.y_axis_title),
                }
            )
        }

    def _grouped_bar_config(self, plan: ChartPlan) -> Dict[str, Any]:
        colors = list(plan.style.colors)
        bar_colors = [colors[i % len(colors)] for i in range(len(plan.data_points))]
        return {
            "type": "bar",
            "data": {
                "labels": plan.labels,
                "datasets": [{
                    "label": plan.dataset_label,
                    "data": plan.data_points,
                    "backgroundColor": [with_alpha(color, "80") for color in bar_colors],
                    "borderColor": bar_colors,
                    "borderWidth": 2,
                    "borderRadius": 4,
                }]
            },
            "options": self._base_options(
                tooltip=self._tooltip_config(),
                scales={
                    "y": self._axis(begin_at_zero=True, title=plan.y_axis_title),
                    "x": self._axis(show_grid=False, title=plan.x_axis_title),
                }
            )
        }

    def _base_options(self, tooltip: Dict[str, Any] = None,
                      scales: Dict[str, Any] = None) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "responsive": True,
            "maintainAspectRatio": False,
            "plugins": {
                "legend": {"display": False},
            }
        }
        if tooltip:
            options["plugins"]["tooltip"] = tooltip
        if scales:
            options["scales"] = scales
        return options

    def _tooltip_config(self, border_color: str = None) -> Dict[str, Any]:
        tooltip = {
            "backgroundColor": "rgba(0, 0, 0, 0.8)",
            "titleColor": "white",
            "bodyColor": "white",
        }
        if border_color:
            tooltip["borderColor"] = border_color
            tooltip["borderWidth"] = 1
        return tooltip

    def _axis(self, begin_at_zero: bool = False, show_grid: bool = True,
              title: str = None) -> Dict[str, Any]:
        axis: Dict[str, Any] = {
            "grid": {"color": GRID_COLOR} if show_grid else {"display": False},
            "ticks": {"color": TICK_COLOR},
        }
        if begin_at_zero:
            axis["beginAtZero"] = True
        if title:
            axis["title"] = {"display": True, "text": title}
        return axis

    def _empty_chart_config(self, plan: ChartPlan) -> Dict[str, Any]:
        """
        Placeholder config for a plan without data points
        """
        return {
            "type": "bar",
            "data": {
                "labels": ["No Data"],
                "datasets": [{
                    "data": [0],
                    "backgroundColor": ["#E5E7EB"],
                    "borderColor": ["#9CA3AF"],
                    "borderWidth": 1
                }]
            },
            "options": {
                "responsive": True,
                "maintainAspectRatio": False,
                "animation": {"duration": plan.style.animation_duration},
                "plugins": {
                    "legend": {"display": False},
                    "title": {
                        "display": True,
                        "text": plan.notice or "No Data Available"
                    }
                }
            }
        }
