# api/routes/datasets.py

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse

from upload_analytics.config.settings import settings
from upload_analytics.models.api_models import (
    AnalysisResponse,
    AnalyzeRequest,
    ErrorResponse,
    PreviewResponse,
    StatisticsResponse,
    VisualizationOptions,
)
from upload_analytics.services.analytics_service import AnalyticsService
from upload_analytics.utils.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter(
    prefix="/api/datasets",
    tags=["datasets"],
    responses={
        400: {"model": ErrorResponse, "description": "Unreadable file or invalid options"},
        404: {"model": ErrorResponse, "description": "Unknown or expired session"},
        413: {"model": ErrorResponse, "description": "File too large"},
        415: {"model": ErrorResponse, "description": "Unsupported file type"},
        422: {"model": ErrorResponse, "description": "Empty table or invalid request"},
    }
)


# Dependency injection
async def get_analytics_service() -> AnalyticsService:
    """Get analytics service instance"""
    from upload_analytics.app import get_analytics_service as _get_analytics_service
    return await _get_analytics_service()


@router.post("/upload", response_model=AnalysisResponse)
async def upload_dataset(
    file: UploadFile = File(..., description="CSV or Excel file"),
    chart_type: str = Form(settings.DEFAULT_CHART_TYPE),
    color_scheme: str = Form(settings.DEFAULT_COLOR_SCHEME),
    animation_duration: int = Form(settings.DEFAULT_ANIMATION_DURATION),
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> AnalysisResponse:
    """
    Upload a file, open an analysis session and return charts and statistics
    """
    filename = file.filename or ""
    logger.info(f"📤 Upload received: {filename}")

    # One byte past the limit is enough to reject oversized files
    content = await file.read(settings.max_upload_bytes + 1)

    options = VisualizationOptions(
        chart_type=chart_type,
        color_scheme=color_scheme,
        animation_duration=animation_duration
    )
    return await analytics_service.analyze_upload(filename, content, options)


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_records(
    request: AnalyzeRequest,
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> AnalysisResponse:
    """
    Analyze a table supplied as JSON records
    """
    logger.info(f"📊 Analyzing {len(request.records)} records")
    return await analytics_service.analyze_records(
        request.records, request.options, source_name=request.source_name
    )


@router.post("/{session_id}/refresh", response_model=AnalysisResponse)
async def refresh_visualizations(
    session_id: str,
    options: VisualizationOptions,
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> AnalysisResponse:
    """
    Recompute the charts of a session with new options
    """
    return await analytics_service.refresh(session_id, options)


@router.get("/{session_id}/preview", response_model=PreviewResponse)
async def get_preview(
    session_id: str,
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> PreviewResponse:
    return await analytics_service.get_preview(session_id)


@router.get("/{session_id}/statistics", response_model=StatisticsResponse)
async def get_statistics(
    session_id: str,
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> StatisticsResponse:
    return await analytics_service.get_statistics(session_id)


@router.get("/{session_id}/report")
async def export_report(
    session_id: str,
    include_sample: bool = Query(True, description="Include the first rows of the table"),
    sample_size: int = Query(settings.REPORT_SAMPLE_SIZE, ge=0, le=10000, description="Number of sample rows"),
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> JSONResponse:
    """
    Export the analysis report as a downloadable JSON document
    """
    report, filename = await analytics_service.build_report(
        session_id, include_sample=include_sample, sample_size=sample_size
    )

    logger.info(f"📄 Report exported for session {session_id}")

    return JSONResponse(
        content=report.to_dict(),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> dict:
    await analytics_service.delete_session(session_id)
    return {"success": True, "session_id": session_id}
