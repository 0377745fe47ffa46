"""
Data models for dataset analysis requests and responses
Request/Response models for the upload analytics API
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from upload_analytics.config.settings import settings
from upload_analytics.models.report_models import ColumnStatistics

Severity = Literal["info", "success", "warning", "error"]


class VisualizationOptions(BaseModel):
    """User-selectable chart options"""
    chart_type: str = Field(
        default=settings.DEFAULT_CHART_TYPE,
        description="Chart type: auto, bar, line, histogram or pie"
    )
    color_scheme: str = Field(
        default=settings.DEFAULT_COLOR_SCHEME,
        description="Palette: blue, gradient, vibrant or monochrome"
    )
    animation_duration: int = Field(
        default=settings.DEFAULT_ANIMATION_DURATION,
        description="Chart animation duration in milliseconds (0 disables)"
    )

    @field_validator('chart_type', 'color_scheme')
    @classmethod
    def normalize_choice(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class Notification(BaseModel):
    """User-facing status message"""
    severity: Severity = Field(description="info, success, warning or error")
    message: str = Field(description="Message text")


class AnalyzeRequest(BaseModel):
    """Analysis of a table supplied as JSON records"""
    records: List[Dict[str, Any]] = Field(description="Rows as column -> value mappings")
    source_name: Optional[str] = Field(default=None, description="Name shown in notifications")
    options: VisualizationOptions = Field(default_factory=VisualizationOptions)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "records": [
                {"region": "North", "sales": 120, "units": 4},
                {"region": "South", "sales": 95, "units": 3}
            ],
            "source_name": "sales.csv",
            "options": {"chart_type": "auto", "color_scheme": "blue", "animation_duration": 750}
        }
    })


class TableSummary(BaseModel):
    """Headline counts for an ingested table"""
    source_name: Optional[str] = Field(default=None, description="Uploaded file name")
    total_records: int = Field(description="Number of records")
    total_columns: int = Field(description="Number of columns")
    numeric_fields: int = Field(description="Number of numeric columns")
    data_quality: int = Field(description="Percentage of filled cells (0-100)")
    dropped_rows: int = Field(default=0, description="Fully empty rows removed at ingestion")


class PreviewResponse(BaseModel):
    """First rows and columns of a table"""
    session_id: str
    columns: List[str] = Field(description="Columns shown in the preview")
    rows: List[Dict[str, Any]] = Field(description="Preview rows, empty cells as null")
    total_records: int
    total_columns: int
    more_rows: bool = Field(description="Whether the table has rows beyond the preview")
    more_columns: bool = Field(description="Whether the table has columns beyond the preview")


class StatisticsResponse(BaseModel):
    """Statistics panel for the leading numeric columns"""
    session_id: str
    statistics: Dict[str, ColumnStatistics] = Field(description="Statistics per numeric column")
    data_quality: int = Field(description="Percentage of filled cells (0-100)")
    numeric_columns: List[str] = Field(description="All numeric columns")


class ChartResult(BaseModel):
    """One chart slot: its plan and either a rendered config or an error"""
    chart_id: str
    title: str
    variant: str
    plan: Dict[str, Any] = Field(description="Declarative chart plan")
    config: Optional[Dict[str, Any]] = Field(default=None, description="Complete Chart.js configuration")
    error: Optional[str] = Field(default=None, description="Rendering error for this chart")


class SkippedChartInfo(BaseModel):
    chart_id: str
    columns: List[str]
    reason: str


class AnalysisResponse(BaseModel):
    """Full result of an upload, analysis or refresh"""
    success: bool = Field(description="Whether the analysis ran")
    session_id: str = Field(description="Session id for follow-up requests")
    summary: TableSummary
    classification: Dict[str, List[str]] = Field(description="numeric, categorical and other columns")
    preview: PreviewResponse
    statistics: Dict[str, ColumnStatistics] = Field(description="Statistics panel")
    charts: List[ChartResult] = Field(default_factory=list)
    skipped_charts: List[SkippedChartInfo] = Field(default_factory=list)
    notifications: List[Notification] = Field(default_factory=list)
    options: VisualizationOptions
    execution_time: float = Field(description="Processing time in milliseconds")


class PaletteResponse(BaseModel):
    palettes: Dict[str, List[str]] = Field(description="Palette name -> ordered colors")
    default: str = Field(description="Default palette name")


class ErrorResponse(BaseModel):
    """Error response model"""
    success: bool = Field(default=False)
    error: Dict[str, Any] = Field(description="Error type, message and details")
    timestamp: str = Field(description="Error timestamp")
    request_id: Optional[str] = Field(default=None, description="Request id for debugging")
