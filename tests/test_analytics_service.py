import threading

import pytest

from upload_analytics.core.exceptions import RenderingError
from upload_analytics.models.api_models import VisualizationOptions
from upload_analytics.services.analytics_service import AnalyticsService
from upload_analytics.services.session_store import SessionStore


@pytest.fixture
def service():
    return AnalyticsService(session_store=SessionStore(max_sessions=5, ttl=60))


@pytest.fixture
def sales_layout(service, sales_table, auto_options):
    classification = service.classifier.classify(sales_table)
    return service.suggester.plan_charts(sales_table, classification, auto_options)


@pytest.mark.parametrize("failing_chart", [
    "chart_sales_0", "chart_units_1", "correlation_chart", "categorical_chart"
])
def test_render_charts_isolates_a_failing_plan(service, sales_layout, monkeypatch, failing_chart):
    generate = service.chart_generator.generate_chart_config

    def generate_or_fail(plan):
        if plan.chart_id == failing_chart:
            raise RenderingError(plan.chart_id, f"Error creating chart for {plan.title}")
        return generate(plan)

    monkeypatch.setattr(service.chart_generator, "generate_chart_config", generate_or_fail)

    charts, notifications = service.render_charts(sales_layout)

    assert [chart.chart_id for chart in charts] == [plan.chart_id for plan in sales_layout.plans]
    for chart in charts:
        if chart.chart_id == failing_chart:
            assert chart.config is None
            assert chart.error.startswith("Error creating chart for")
        else:
            assert chart.config is not None
            assert chart.error is None

    errors = [n for n in notifications if n.severity == "error"]
    assert len(errors) == 1
    assert service.rendering_failures == 1


async def test_analyze_upload_decodes_off_the_event_loop(service, sales_csv, monkeypatch):
    loop_thread = threading.get_ident()
    ingest_threads = []
    ingest = service.ingestion_service.ingest

    def recording_ingest(filename, content):
        ingest_threads.append(threading.get_ident())
        return ingest(filename, content)

    monkeypatch.setattr(service.ingestion_service, "ingest", recording_ingest)

    response = await service.analyze_upload("sales.csv", sales_csv, VisualizationOptions())

    assert response.success is True
    assert response.summary.total_records == 4
    assert ingest_threads and ingest_threads[0] != loop_thread


async def test_refresh_recomputes_off_the_event_loop(service, sales_records, monkeypatch):
    response = await service.analyze_records(sales_records, VisualizationOptions(), source_name="sales")
    session = await service.session_store.get(response.session_id)

    loop_thread = threading.get_ident()
    refresh_threads = []
    refresh = session.refresh

    def recording_refresh(options):
        refresh_threads.append(threading.get_ident())
        return refresh(options)

    monkeypatch.setattr(session, "refresh", recording_refresh)

    refreshed = await service.refresh(response.session_id, VisualizationOptions(chart_type="pie"))

    assert refreshed.notifications[0].message == "Visualizations refreshed"
    assert refresh_threads and refresh_threads[0] != loop_thread
