from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from fairway.analytics.aggregation import (
    build_by_course,
    build_by_product_type,
    build_loss_transactions,
    build_summary,
)
from fairway.analytics.alerts import generate_alerts
from fairway.analytics.booking_profitability import calculate_booking_profitabilities
from fairway.analytics.policy import ProfitabilityPolicy
from fairway.analytics.recommendations import build_recommendations
from fairway.core.errors import BadRequestError
from fairway.models.profitability import (
    AddOnCatalogRecord,
    BookingRecord,
    CourseRecord,
    RatePeriodRecord,
)
from fairway.schemas.profitability import ProfitabilityReport, ReportPeriod


def validate_window(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise BadRequestError(
            "end_date must not be before start_date",
            details={"startDate": start_date.isoformat(), "endDate": end_date.isoformat()},
        )


def select_reportable_bookings(
    bookings: Iterable[BookingRecord], start_date: date, end_date: date
) -> List[BookingRecord]:
    selected: List[BookingRecord] = []
    for booking in bookings:
        if booking.is_cancelled or booking.tee_time is None:
            continue
        if start_date <= booking.tee_time.date() <= end_date:
            selected.append(booking)
    return selected


def build_profitability_report(
    start_date: date,
    end_date: date,
    bookings: Iterable[BookingRecord],
    courses: Iterable[CourseRecord],
    rate_periods: Iterable[RatePeriodRecord],
    add_ons: Iterable[AddOnCatalogRecord],
    policy: Optional[ProfitabilityPolicy] = None,
) -> ProfitabilityReport:
    """Attribute revenue and cost to every reportable booking in the window and roll up.

    Inputs are the complete, pre-loaded collections; grouping by course happens here.
    The result depends only on the inputs, so identical snapshots serialize identically.
    """
    validate_window(start_date, end_date)
    policy = policy or ProfitabilityPolicy()

    reportable = select_reportable_bookings(bookings, start_date, end_date)
    records = calculate_booking_profitabilities(reportable, courses, rate_periods, add_ons, policy)

    summary = build_summary(records)
    by_product_type = build_by_product_type(records)
    by_course = build_by_course(records)
    loss_transactions = build_loss_transactions(records)

    return ProfitabilityReport(
        period=ReportPeriod(start=start_date, end=end_date),
        summary=summary,
        by_product_type=by_product_type,
        by_course=by_course,
        loss_making_transactions=loss_transactions,
        recommendations=build_recommendations(by_product_type, by_course),
        alerts=generate_alerts(summary, by_product_type, loss_transactions),
    )
