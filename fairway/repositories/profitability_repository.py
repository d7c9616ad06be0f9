from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from fairway.core.config import get_settings
from fairway.core.supabase import SupabaseClient
from fairway.models.profitability import (
    BOOKING_STATUS_CANCELLED,
    AddOnCatalogRecord,
    BookingRecord,
    CourseRecord,
    RatePeriodRecord,
)

logger = logging.getLogger(__name__)

BOOKING_COLUMNS = (
    "id,course_id,user_id,tee_time,players,customer_name,status,total_amount_cents,"
    "estimated_price,package_type,add_ons_json,created_at,cancelled_at,cancellation_reason,"
    "utm_source,utm_medium,utm_campaign"
)
COURSE_COLUMNS = "id,name,city,province,country,kickback_percent"
# Catalog order decides which period wins, so the oldest row comes first.
CATALOG_ORDER = "created_at.asc,id.asc"

RecordT = TypeVar("RecordT", bound=BaseModel)


def _validate_catalog_rows(
    model: Type[RecordT], rows: Iterable[Dict[str, Any]], table: str
) -> List[RecordT]:
    records: List[RecordT] = []
    for row in rows:
        try:
            records.append(model.model_validate(row))
        except ValidationError as exc:
            logger.warning(
                "Skipping invalid %s row %s: %s", table, row.get("id"), exc.errors()
            )
    return records


class ProfitabilityRepository:
    def __init__(self, client: Optional[SupabaseClient] = None) -> None:
        self.client = client or SupabaseClient()
        self.page_size = get_settings().profitability_page_size

    def list_bookings(self, start_date: date, end_date: date) -> List[BookingRecord]:
        end_exclusive = end_date + timedelta(days=1)
        rows = self.client.select_all(
            table="booking_requests",
            select=BOOKING_COLUMNS,
            filters=[
                ("tee_time", f"gte.{start_date.isoformat()}"),
                ("tee_time", f"lt.{end_exclusive.isoformat()}"),
                ("status", f"neq.{BOOKING_STATUS_CANCELLED}"),
            ],
            order="tee_time.asc,id.asc",
            page_size=self.page_size,
        )
        return [BookingRecord.model_validate(row) for row in rows]

    def get_booking_by_id(self, booking_id: str) -> Optional[BookingRecord]:
        rows = self.client.select(
            table="booking_requests",
            select=BOOKING_COLUMNS,
            filters=[("id", f"eq.{booking_id}")],
            limit=1,
        )
        if not rows:
            return None
        return BookingRecord.model_validate(rows[0])

    def list_courses(self) -> List[CourseRecord]:
        rows = self.client.select_all(
            table="golf_courses",
            select=COURSE_COLUMNS,
            order="name.asc,id.asc",
            page_size=self.page_size,
        )
        return _validate_catalog_rows(CourseRecord, rows, "golf_courses")

    def get_course(self, course_id: str) -> Optional[CourseRecord]:
        rows = self.client.select(
            table="golf_courses",
            select=COURSE_COLUMNS,
            filters=[("id", f"eq.{course_id}")],
            limit=1,
        )
        courses = _validate_catalog_rows(CourseRecord, rows, "golf_courses")
        return courses[0] if courses else None

    def list_rate_periods(self, course_id: Optional[str] = None) -> List[RatePeriodRecord]:
        filters = [("course_id", f"eq.{course_id}")] if course_id else None
        rows = self.client.select_all(
            table="course_rate_periods",
            select="*",
            filters=filters,
            order=CATALOG_ORDER,
            page_size=self.page_size,
        )
        return _validate_catalog_rows(RatePeriodRecord, rows, "course_rate_periods")

    def list_add_ons(self, course_id: Optional[str] = None) -> List[AddOnCatalogRecord]:
        filters = [("course_id", f"eq.{course_id}")] if course_id else None
        rows = self.client.select_all(
            table="course_add_ons",
            select="*",
            filters=filters,
            order=CATALOG_ORDER,
            page_size=self.page_size,
        )
        return _validate_catalog_rows(AddOnCatalogRecord, rows, "course_add_ons")
