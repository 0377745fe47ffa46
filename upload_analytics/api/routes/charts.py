# api/routes/charts.py

from fastapi import APIRouter, Depends

from upload_analytics.core.visualization.chart_plans import ChartMode
from upload_analytics.models.api_models import PaletteResponse
from upload_analytics.services.analytics_service import AnalyticsService
from upload_analytics.utils.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api/charts", tags=["charts"])


# Dependency injection
async def get_analytics_service() -> AnalyticsService:
    """Get analytics service instance"""
    from upload_analytics.app import get_analytics_service as _get_analytics_service
    return await _get_analytics_service()


@router.get("/palettes", response_model=PaletteResponse)
async def get_palettes(
    analytics_service: AnalyticsService = Depends(get_analytics_service)
) -> PaletteResponse:
    """
    Available color palettes and the default one
    """
    return analytics_service.get_palettes()


@router.get("/types")
async def get_chart_types() -> dict:
    """
    Chart types a user can choose from
    """
    return {
        "chart_types": [mode.value for mode in ChartMode],
        "auto_rule": {
            "histogram": "more than 50 values",
            "line": "more than 20 values",
            "bar": "20 values or fewer (first 20 shown)"
        }
    }
