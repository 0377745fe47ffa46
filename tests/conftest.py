import os

# Settings are read at import time
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
from fastapi.testclient import TestClient

from upload_analytics.core.analysis.column_classifier import ColumnClassifier
from upload_analytics.core.analysis.statistics_engine import StatisticsEngine
from upload_analytics.core.ingestion.table import Table
from upload_analytics.core.visualization.chart_plans import ChartMode, ChartStyle
from upload_analytics.core.visualization.chart_suggester import ChartOptions, ChartSuggester
from upload_analytics.services.session import AnalysisSession


@pytest.fixture
def sales_records():
    """Small mixed table: two numeric columns, one categorical, one free text."""
    return [
        {"region": "North", "sales": "120", "units": "4", "note": "first"},
        {"region": "South", "sales": "95.5", "units": "3", "note": "second"},
        {"region": "North", "sales": "80", "units": "", "note": "third"},
        {"region": "East", "sales": "150", "units": "6", "note": ""},
    ]


@pytest.fixture
def sales_table(sales_records):
    return Table.from_records(sales_records, source_name="sales.csv")


@pytest.fixture
def default_style():
    return ChartStyle.from_options("blue", 750)


@pytest.fixture
def auto_options(default_style):
    return ChartOptions(mode=ChartMode.AUTO, style=default_style)


@pytest.fixture
def make_session():
    def _make(table):
        return AnalysisSession(table, ColumnClassifier(), StatisticsEngine(), ChartSuggester())
    return _make


@pytest.fixture
def sales_csv():
    return (
        b"region,sales,units,note\n"
        b"North,120,4,first\n"
        b"South,95.5,3,second\n"
        b",,,\n"
        b"North,80,,third\n"
        b"East,150,6,\n"
    )


@pytest.fixture
def test_client():
    """Create a test client with the application lifespan running."""
    from upload_analytics.app import app

    with TestClient(app) as client:
        yield client
