"""
Analysis Session - explicit context for one uploaded table
Owns the table and every artifact derived from it
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from upload_analytics.core.analysis.column_classifier import ColumnClassification, ColumnClassifier
from upload_analytics.core.analysis.statistics_engine import StatisticsEngine, StatisticsRecord
from upload_analytics.core.ingestion.table import Table
from upload_analytics.core.visualization.chart_suggester import ChartLayout, ChartOptions, ChartSuggester

logger = logging.getLogger(__name__)


class AnalysisSession:
    """
    One table and its derived artifacts.

    Classification, statistics, chart layout and data quality are only ever
    replaced together by refresh(); nothing else mutates them.
    """

    def __init__(self, table: Table, classifier: ColumnClassifier,
                 statistics_engine: StatisticsEngine, suggester: ChartSuggester,
                 session_id: Optional[str] = None):
        table.ensure_valid()

        self.session_id = session_id or uuid.uuid4().hex
        self.table = table
        self.created_at = datetime.now(timezone.utc)
        self.refreshed_at: Optional[datetime] = None

        self._classifier = classifier
        self._statistics_engine = statistics_engine
        self._suggester = suggester

        self.options: Optional[ChartOptions] = None
        self.classification: Optional[ColumnClassification] = None
        self.statistics: Dict[str, StatisticsRecord] = {}
        self.layout: Optional[ChartLayout] = None
        self.data_quality: int = 0

    @property
    def is_analyzed(self) -> bool:
        return self.classification is not None

    def refresh(self, options: ChartOptions) -> ChartLayout:
        """
        Recompute every derived artifact from the table with new options
        """
        classification = self._classifier.classify(self.table)
        statistics = self._statistics_engine.compute_column_statistics(
            self.table, classification.numeric
        )
        layout = self._suggester.plan_charts(self.table, classification, options)
        data_quality = self._statistics_engine.calculate_data_quality(self.table)

        self.options = options
        self.classification = classification
        self.statistics = statistics
        self.layout = layout
        self.data_quality = data_quality
        self.refreshed_at = datetime.now(timezone.utc)

        logger.debug(
            f"Session {self.session_id} refreshed: {len(layout.plans)} plans, "
            f"quality={data_quality}%"
        )

        return layout
