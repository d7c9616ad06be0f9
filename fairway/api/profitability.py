from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from fairway.api.dependencies import get_profitability_service
from fairway.schemas.profitability import (
    BookingProfitabilityDetail,
    ProfitabilityReport,
    ProfitabilityReportFilters,
)
from fairway.services.profitability_service import ProfitabilityService
from fairway.shared.response import Meta, ResponseEnvelope


router = APIRouter(prefix="/profitability", tags=["profitability"])

REPORT_SOURCE = "booking_requests,golf_courses,course_rate_periods,course_add_ons"
CALCULATION_VERSION = "v1"


def get_profitability_report_filters(
    start_date: Optional[date] = Query(default=None, alias="start_date"),
    end_date: Optional[date] = Query(default=None, alias="end_date"),
    time_window: Optional[str] = Query(default=None, alias="time_window", pattern=r"^\d+[dm]$"),
) -> ProfitabilityReportFilters:
    return ProfitabilityReportFilters(
        start_date=start_date,
        end_date=end_date,
        time_window=time_window,
    )


@router.get("/report")
def profitability_report(
    filters: ProfitabilityReportFilters = Depends(get_profitability_report_filters),
    service: ProfitabilityService = Depends(get_profitability_service),
) -> ResponseEnvelope[ProfitabilityReport]:
    start_date, end_date = service.resolve_window(
        filters.start_date, filters.end_date, filters.time_window
    )
    data = service.get_report(start_date, end_date)
    meta = Meta(
        as_of_date=date.today().isoformat(),
        source=REPORT_SOURCE,
        time_window=f"{start_date.isoformat()}..{end_date.isoformat()}",
        calculation_version=CALCULATION_VERSION,
        currency="EUR",
        generated_at=datetime.now(timezone.utc).isoformat(),
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/bookings/{booking_id}")
def booking_profitability(
    booking_id: str,
    service: ProfitabilityService = Depends(get_profitability_service),
) -> ResponseEnvelope[BookingProfitabilityDetail]:
    data = service.get_booking_profitability(booking_id)
    meta = Meta(
        as_of_date=date.today().isoformat(),
        source=REPORT_SOURCE,
        time_window="na",
        calculation_version=CALCULATION_VERSION,
        currency="EUR",
    )
    return ResponseEnvelope(data=data, meta=meta)
