# =============================================================================
# app/routers/analytics.py - Analytics Endpoints
# =============================================================================
# Read-only aggregations for charts and reports.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query

from app.dependencies import CurrentUser
from core.services.analytics_service import AnalyticsService

router = APIRouter()

FromDate = Annotated[str | None, Query(alias="fromDate", description="Window start (defaults to 90 days ago)")]
ToDate = Annotated[str | None, Query(alias="toDate", description="Window end (defaults to now)")]


@router.get("/business-overview")
async def business_overview(user: CurrentUser):
    return {"success": True, "data": AnalyticsService.business_overview()}


@router.get("/project-performance")
async def project_performance(user: CurrentUser, from_date: FromDate = None, to_date: ToDate = None):
    return {"success": True, "data": AnalyticsService.project_performance(from_date, to_date)}


@router.get("/inventory")
async def inventory_analytics(user: CurrentUser):
    return {"success": True, "data": AnalyticsService.inventory()}


@router.get("/shipments")
async def shipment_analytics(user: CurrentUser, from_date: FromDate = None, to_date: ToDate = None):
    return {"success": True, "data": AnalyticsService.shipments(from_date, to_date)}


@router.get("/customers")
async def customer_analytics(user: CurrentUser):
    return {"success": True, "data": AnalyticsService.customers()}


@router.get("/time-series")
async def time_series(
    user: CurrentUser,
    metric: Annotated[
        str | None,
        Query(description="projects, inventory, shipments, customers, orders, activities or tasks"),
    ] = None,
    period: Annotated[str, Query(description="day, week, month, quarter or year")] = "week",
    count: Annotated[int, Query(ge=1, le=366, description="Number of periods")] = 12,
):
    """Documents created per period, oldest first."""
    return {"success": True, "data": AnalyticsService.time_series(metric, period, count)}


@router.get("/project-completion")
async def project_completion(user: CurrentUser):
    return {"success": True, "data": AnalyticsService.project_completion()}
