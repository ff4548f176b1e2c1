"""Scheduling router - calendar, dashboard and analytics endpoints"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from google.cloud.firestore import Client

from ...auth import get_current_identity
from ...database import get_db
from ..settings.schemas import Identity
from .schemas import AnalyticsResponse, CalendarResponse, DashboardResponse
from .service import SchedulingService

router = APIRouter(tags=["Scheduling"])


def get_scheduling_service(db: Client = Depends(get_db)) -> SchedulingService:
    """Dependency injection for SchedulingService"""
    return SchedulingService(db)


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(
    day: Optional[date] = Query(None, alias="date"),
    identity: Identity = Depends(get_current_identity),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Appointments grouped by day in the user's timezone"""
    return service.calendar(identity.uid, day)


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    identity: Identity = Depends(get_current_identity),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.dashboard(identity.uid)


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    identity: Identity = Depends(get_current_identity),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.analytics(identity.uid)
