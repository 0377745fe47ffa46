import pytest

from upload_analytics.core.exceptions import RenderingError
from upload_analytics.core.visualization.chart_generator import ChartGenerator
from upload_analytics.core.visualization.chart_plans import ChartPlan, ChartPlanBuilder, ChartStyle, ChartVariant
from upload_analytics.core.ingestion.table import Table


@pytest.fixture
def generator():
    return ChartGenerator()


def test_bar_config_uses_primary_color(generator, default_style):
    plan = ChartPlanBuilder().build_plan("price", ChartVariant.BAR, [1, 2, 3], default_style)
    config = generator.generate_chart_config(plan)

    dataset = config["data"]["datasets"][0]
    assert config["type"] == "bar"
    assert dataset["data"] == [1, 2, 3]
    assert dataset["borderColor"] == "#3B82F6"
    assert dataset["backgroundColor"] == "#3B82F680"
    assert config["options"]["animation"] == {"duration": 750}


def test_histogram_renders_as_titled_bar(generator, default_style):
    plan = ChartPlanBuilder().build_plan("price", ChartVariant.HISTOGRAM, list(range(60)), default_style)
    config = generator.generate_chart_config(plan)

    assert config["type"] == "bar"
    assert config["options"]["plugins"]["title"]["text"] == "Distribution of price"
    assert config["options"]["scales"]["y"]["title"]["text"] == "Frequency"


def test_pie_colors_follow_palette(generator):
    style = ChartStyle.from_options("vibrant", 0)
    plan = ChartPlanBuilder().build_plan("price", ChartVariant.PIE, [0, 0, 10], style)
    config = generator.generate_chart_config(plan)

    assert config["type"] == "pie"
    assert config["data"]["datasets"][0]["backgroundColor"] == ["#FF6B6B", "#4ECDC4"]
    assert config["options"]["plugins"]["legend"]["position"] == "bottom"
    assert config["options"]["animation"] == {"duration": 0}


def test_scatter_config_has_axis_titles(generator, default_style):
    table = Table.from_records([{"x": 1, "y": 2}, {"x": 3, "y": 4}])
    plan = ChartPlanBuilder().build_correlation_plan(table, "x", "y", default_style)
    config = generator.generate_chart_config(plan)

    assert config["type"] == "scatter"
    assert config["data"]["datasets"][0]["data"] == [{"x": 1, "y": 2}, {"x": 3, "y": 4}]
    assert config["options"]["scales"]["x"]["title"]["text"] == "x"


def test_empty_plan_renders_placeholder_with_notice(generator, default_style):
    table = Table.from_records([{"x": 1, "y": ""}])
    plan = ChartPlanBuilder().build_correlation_plan(table, "x", "y", default_style)
    config = generator.generate_chart_config(plan)

    assert config["data"]["labels"] == ["No Data"]
    assert config["options"]["plugins"]["title"]["text"] == "No valid data for correlation analysis"


def test_malformed_plan_raises_rendering_error(generator):
    style = ChartStyle(palette_name="broken", colors=(), animation_duration=0)
    plan = ChartPlan(
        chart_id="chart_broken_0",
        title="broken",
        variant=ChartVariant.BAR,
        target_columns=("broken",),
        labels=["Item 1"],
        data_points=[1],
        dataset_label="broken",
        style=style,
    )

    with pytest.raises(RenderingError) as exc_info:
        generator.generate_chart_config(plan)
    assert exc_info.value.chart_id == "chart_broken_0"
