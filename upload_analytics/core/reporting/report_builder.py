# core/reporting/report_builder.py

import logging
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional

from upload_analytics.core.analysis.column_classifier import ColumnClassification
from upload_analytics.core.analysis.statistics_engine import StatisticsEngine, StatisticsRecord
from upload_analytics.core.ingestion.table import Table
from upload_analytics.models.report_models import AnalysisReport, ColumnStatistics, ReportSummary

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 100
REPORT_FILENAME_PREFIX = "analytics_report"


def to_column_statistics(record: StatisticsRecord) -> ColumnStatistics:
    return ColumnStatistics(
        count=record.count,
        mean=record.mean,
        median=record.median,
        std_dev=record.std_dev,
        min=record.min_value,
        max=record.max_value,
    )


def report_filename(created_at: Optional[datetime] = None) -> str:
    """Download name of a report, e.g. analytics_report_2024-01-31.json"""
    created_at = created_at or datetime.now(timezone.utc)
    return f"{REPORT_FILENAME_PREFIX}_{created_at.strftime('%Y-%m-%d')}.json"


class ReportBuilder:
    """
    Assembles the exportable summary of an analyzed table
    """

    def __init__(self, statistics_engine: Optional[StatisticsEngine] = None):
        self.statistics_engine = statistics_engine or StatisticsEngine()

    def build_report(self, table: Table, classification: ColumnClassification,
                     stats_by_column: Optional[Mapping[str, StatisticsRecord]] = None,
                     sample_size: Optional[int] = DEFAULT_SAMPLE_SIZE,
                     timestamp: Optional[str] = None) -> AnalysisReport:
        """
        Build the report for a table and its classification.

        Statistics cover every numeric column with at least one valid value;
        missing entries in stats_by_column are computed here. A sample size of
        0 or None leaves sampleData out.
        """
        if stats_by_column is None:
            stats_by_column = {}

        statistics: Dict[str, ColumnStatistics] = {}
        missing = [c for c in classification.numeric if c not in stats_by_column]
        computed = self.statistics_engine.compute_column_statistics(table, missing) if missing else {}

        for column in classification.numeric:
            record = stats_by_column.get(column) or computed.get(column)
            if record is None:
                continue
            statistics[column] = to_column_statistics(record)

        sample = table.to_rows(limit=sample_size) if sample_size else None

        report = AnalysisReport(
            timestamp=timestamp or datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            summary=ReportSummary(
                total_records=table.record_count,
                total_columns=table.column_count,
                numeric_fields=len(classification.numeric),
                data_quality=self.statistics_engine.calculate_data_quality(table),
            ),
            columns=list(table.columns),
            numeric_columns=list(classification.numeric),
            categorical_columns=list(classification.categorical),
            other_columns=list(classification.other),
            statistics=statistics,
            sample_data=sample,
        )

        logger.info(
            f"📄 Report built: {table.record_count} records, "
            f"{len(statistics)} columns with statistics, "
            f"sample={len(sample) if sample is not None else 0}"
        )

        return report
