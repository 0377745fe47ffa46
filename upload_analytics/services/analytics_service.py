"""
Analytics Service - Main orchestrator for upload analytics
Handles the complete flow from an uploaded file to charts, statistics and reports
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Tuple

from upload_analytics.config.settings import settings
from upload_analytics.core.analysis.column_classifier import ColumnClassifier
from upload_analytics.core.analysis.statistics_engine import StatisticsEngine
from upload_analytics.core.exceptions import ConfigurationError, RenderingError
from upload_analytics.core.ingestion.file_reader import FileIngestionService
from upload_analytics.core.ingestion.table import Table
from upload_analytics.core.reporting.report_builder import ReportBuilder, report_filename, to_column_statistics
from upload_analytics.core.visualization.chart_generator import ChartGenerator
from upload_analytics.core.visualization.chart_plans import ChartMode, ChartPlanBuilder, ChartStyle
from upload_analytics.core.visualization.chart_suggester import ChartLayout, ChartOptions, ChartSuggester
from upload_analytics.core.visualization.palettes import COLOR_SCHEMES
from upload_analytics.models.api_models import (
    AnalysisResponse,
    ChartResult,
    Notification,
    PaletteResponse,
    PreviewResponse,
    SkippedChartInfo,
    StatisticsResponse,
    TableSummary,
    VisualizationOptions,
)
from upload_analytics.models.report_models import AnalysisReport, ColumnStatistics
from upload_analytics.services.session import AnalysisSession
from upload_analytics.services.session_store import SessionStore
from upload_analytics.utils.logging_config import log_analysis, monitor_performance

logger = logging.getLogger(__name__)


def build_chart_options(options: VisualizationOptions) -> ChartOptions:
    """
    Validated chart options; unknown chart types or palettes raise ConfigurationError
    """
    try:
        mode = ChartMode(options.chart_type)
    except ValueError:
        raise ConfigurationError(
            f"Unknown chart type '{options.chart_type}'",
            {"available": [m.value for m in ChartMode]}
        ) from None

    style = ChartStyle.from_options(options.color_scheme, options.animation_duration)
    return ChartOptions(mode=mode, style=style)


class AnalyticsService:
    """Main analytics service orchestrating ingestion, analysis and rendering"""

    def __init__(self, session_store: Optional[SessionStore] = None,
                 ingestion_service: Optional[FileIngestionService] = None):
        self.session_store = session_store or SessionStore()
        self.ingestion_service = ingestion_service or FileIngestionService()

        # Analysis components
        self.classifier = ColumnClassifier()
        self.statistics_engine = StatisticsEngine()
        self.suggester = ChartSuggester(
            plan_builder=ChartPlanBuilder(
                histogram_bins=settings.HISTOGRAM_BINS,
                pie_ranges=settings.PIE_RANGES,
                bar_max_items=settings.BAR_CHART_MAX_ITEMS,
            ),
            max_numeric_charts=settings.MAX_NUMERIC_CHARTS,
        )
        self.chart_generator = ChartGenerator()
        self.report_builder = ReportBuilder(self.statistics_engine)

        # Performance tracking
        self.total_analyses = 0
        self.successful_analyses = 0
        self.rendering_failures = 0

    @monitor_performance("ingest_upload")
    async def analyze_upload(self, filename: str, content: bytes,
                             options: VisualizationOptions) -> AnalysisResponse:
        """
        Decode an uploaded file, open a session for it and run the analysis
        """
        chart_options = build_chart_options(options)
        # pandas decoding is blocking; keep it off the event loop
        table = await asyncio.to_thread(self.ingestion_service.ingest, filename, content)
        return await self._open_session(table, chart_options, options)

    @monitor_performance("analyze_records")
    async def analyze_records(self, records: List[Mapping[str, Any]], options: VisualizationOptions,
                              source_name: Optional[str] = None) -> AnalysisResponse:
        """
        Same analysis for a table supplied as records
        """
        chart_options = build_chart_options(options)
        table = await asyncio.to_thread(Table.from_records, records, source_name)
        table.ensure_valid()
        return await self._open_session(table, chart_options, options)

    async def refresh(self, session_id: str, options: VisualizationOptions) -> AnalysisResponse:
        """
        Recompute the charts of an existing session with new options
        """
        chart_options = build_chart_options(options)
        session = await self.session_store.get(session_id)

        notifications = [Notification(severity="success", message="Visualizations refreshed")]
        return await self._run_analysis(session, chart_options, options, notifications)

    async def _open_session(self, table: Table, chart_options: ChartOptions,
                            options: VisualizationOptions) -> AnalysisResponse:
        session = AnalysisSession(table, self.classifier, self.statistics_engine, self.suggester)
        await self.session_store.add(session)

        source = table.source_name or "uploaded data"
        notifications = [Notification(
            severity="success",
            message=f"Successfully loaded {table.record_count} records from {source}"
        )]
        logger.info(f"🚀 Session {session.session_id} opened for {source}")

        return await self._run_analysis(session, chart_options, options, notifications)

    async def _run_analysis(self, session: AnalysisSession, chart_options: ChartOptions,
                            options: VisualizationOptions,
                            notifications: List[Notification]) -> AnalysisResponse:
        start_time = time.perf_counter()
        self.total_analyses += 1

        layout = await asyncio.to_thread(session.refresh, chart_options)

        for warning in layout.warnings:
            notifications.append(Notification(severity="warning", message=str(warning)))

        charts, render_notifications = self.render_charts(layout)
        notifications.extend(render_notifications)

        execution_time = (time.perf_counter() - start_time) * 1000
        self.successful_analyses += 1

        log_analysis(session.session_id, len(session.classification.numeric), len(charts), execution_time)

        return AnalysisResponse(
            success=True,
            session_id=session.session_id,
            summary=self._summary(session),
            classification=session.classification.to_dict(),
            preview=self._preview(session),
            statistics=self._statistics_panel(session),
            charts=charts,
            skipped_charts=[
                SkippedChartInfo(chart_id=s.chart_id, columns=list(s.columns), reason=s.reason)
                for s in layout.skipped
            ],
            notifications=notifications,
            options=options,
            execution_time=execution_time,
        )

    def render_charts(self, layout: ChartLayout) -> Tuple[List[ChartResult], List[Notification]]:
        """
        Render every plan; a failing chart fills its own slot with the error
        """
        charts: List[ChartResult] = []
        notifications: List[Notification] = []

        for plan in layout.plans:
            config = None
            error = None
            try:
                config = self.chart_generator.generate_chart_config(plan)
            except RenderingError as e:
                self.rendering_failures += 1
                error = e.message
                notifications.append(Notification(severity="error", message=e.message))
                logger.error(f"❌ Rendering failed for {e.chart_id}: {e.message}")

            charts.append(ChartResult(
                chart_id=plan.chart_id,
                title=plan.title,
                variant=plan.variant.value,
                plan=plan.to_dict(),
                config=config,
                error=error,
            ))

        for skipped in layout.skipped:
            notifications.append(Notification(severity="warning", message=skipped.reason))

        return charts, notifications

    async def get_preview(self, session_id: str) -> PreviewResponse:
        session = await self.session_store.get(session_id)
        return self._preview(session)

    async def get_statistics(self, session_id: str) -> StatisticsResponse:
        session = await self.session_store.get(session_id)
        return StatisticsResponse(
            session_id=session.session_id,
            statistics=self._statistics_panel(session),
            data_quality=session.data_quality,
            numeric_columns=list(session.classification.numeric),
        )

    @monitor_performance("build_report")
    async def build_report(self, session_id: str, include_sample: bool = True,
                           sample_size: Optional[int] = None) -> Tuple[AnalysisReport, str]:
        """
        Report for a session and its download filename
        """
        session = await self.session_store.get(session_id)

        if sample_size is None:
            sample_size = settings.REPORT_SAMPLE_SIZE

        report = self.report_builder.build_report(
            session.table,
            session.classification,
            session.statistics,
            sample_size=sample_size if include_sample else None,
            timestamp=settings.get_current_timestamp(),
        )
        return report, report_filename()

    async def delete_session(self, session_id: str):
        await self.session_store.delete(session_id)
        logger.info(f"🗑️ Session {session_id} deleted")

    def get_palettes(self) -> PaletteResponse:
        return PaletteResponse(
            palettes={name: list(colors) for name, colors in COLOR_SCHEMES.items()},
            default=settings.DEFAULT_COLOR_SCHEME,
        )

    def _summary(self, session: AnalysisSession) -> TableSummary:
        table = session.table
        return TableSummary(
            source_name=table.source_name,
            total_records=table.record_count,
            total_columns=table.column_count,
            numeric_fields=len(session.classification.numeric),
            data_quality=session.data_quality,
            dropped_rows=table.dropped_rows,
        )

    def _preview(self, session: AnalysisSession) -> PreviewResponse:
        table = session.table
        columns = table.columns[:settings.PREVIEW_COLUMNS]
        return PreviewResponse(
            session_id=session.session_id,
            columns=list(columns),
            rows=table.to_rows(limit=settings.PREVIEW_ROWS, columns=columns),
            total_records=table.record_count,
            total_columns=table.column_count,
            more_rows=table.record_count > settings.PREVIEW_ROWS,
            more_columns=table.column_count > settings.PREVIEW_COLUMNS,
        )

    def _statistics_panel(self, session: AnalysisSession) -> Dict[str, ColumnStatistics]:
        panel_columns = session.classification.numeric[:settings.MAX_STATISTICS_COLUMNS]
        return {
            column: to_column_statistics(session.statistics[column])
            for column in panel_columns
            if column in session.statistics
        }

    def get_stats(self) -> Dict[str, Any]:
        """Get service performance statistics"""
        success_rate = (
            self.successful_analyses / self.total_analyses * 100
            if self.total_analyses > 0 else 0
        )
        return {
            "total_analyses": self.total_analyses,
            "successful_analyses": self.successful_analyses,
            "rendering_failures": self.rendering_failures,
            "success_rate_percent": round(success_rate, 2),
            "sessions": self.session_store.get_stats(),
        }
