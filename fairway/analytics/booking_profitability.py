from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from fairway.analytics.add_ons import AddOnLine, decompose_add_ons
from fairway.analytics.policy import ProfitabilityPolicy
from fairway.analytics.tee_time_cost import (
    MonthDay,
    attribute_tee_time_cost,
    get_booking_revenue,
    match_rate_period,
    resolve_cost_source,
)
from fairway.models.profitability import (
    AddOnCatalogRecord,
    BookingRecord,
    CourseRecord,
    RatePeriodRecord,
)

logger = logging.getLogger(__name__)

UNKNOWN_COURSE_NAME = "Unknown course"

CourseScoped = TypeVar("CourseScoped", RatePeriodRecord, AddOnCatalogRecord)


@dataclass
class BookingProfitability:
    booking_id: str
    course_id: str
    course_name: str
    date: str
    tee_time_revenue: float = 0.0
    tee_time_cost: float = 0.0
    cost_source: str = "none"
    rate_period_id: Optional[str] = None
    add_on_revenue: float = 0.0
    add_on_cost: float = 0.0
    add_on_breakdown: List[AddOnLine] = field(default_factory=list)

    @property
    def total_revenue(self) -> float:
        return self.tee_time_revenue + self.add_on_revenue

    @property
    def total_cost(self) -> float:
        return self.tee_time_cost + self.add_on_cost

    @property
    def profit(self) -> float:
        return self.total_revenue - self.total_cost


def calculate_booking_profitability(
    booking: BookingRecord,
    course: Optional[CourseRecord],
    rate_periods: Sequence[RatePeriodRecord],
    catalog: Iterable[AddOnCatalogRecord],
    policy: ProfitabilityPolicy,
) -> BookingProfitability:
    course_name = course.name if course else UNKNOWN_COURSE_NAME
    tee_date = booking.tee_time.date() if booking.tee_time else None
    record = BookingProfitability(
        booking_id=booking.id,
        course_id=booking.course_id,
        course_name=course_name,
        date=tee_date.isoformat() if tee_date else "",
    )
    try:
        if tee_date is None:
            raise ValueError("booking has no resolvable tee time")
        booking_date = MonthDay.from_date(tee_date)
        package_type = booking.package_type or policy.default_package_type
        period = match_rate_period(rate_periods, package_type, booking_date)
        add_ons = decompose_add_ons(booking, catalog, policy)

        record.tee_time_revenue = get_booking_revenue(booking)
        record.tee_time_cost = attribute_tee_time_cost(booking, period, course, policy)
        record.cost_source = resolve_cost_source(period, course, policy).label
        record.rate_period_id = period.id if period else None
        record.add_on_revenue = add_ons.revenue
        record.add_on_cost = add_ons.cost
        record.add_on_breakdown = add_ons.breakdown
    except Exception:
        logger.warning(
            "Profitability degraded to zero for booking %s", booking.id, exc_info=True
        )
        return BookingProfitability(
            booking_id=booking.id,
            course_id=booking.course_id,
            course_name=course_name,
            date=record.date,
        )
    return record


def group_by_course(items: Iterable[CourseScoped]) -> Dict[str, List[CourseScoped]]:
    grouped: Dict[str, List[CourseScoped]] = {}
    for item in items:
        grouped.setdefault(item.course_id, []).append(item)
    return grouped


def calculate_booking_profitabilities(
    bookings: Iterable[BookingRecord],
    courses: Iterable[CourseRecord],
    rate_periods: Iterable[RatePeriodRecord],
    add_ons: Iterable[AddOnCatalogRecord],
    policy: ProfitabilityPolicy,
) -> List[BookingProfitability]:
    course_map = {course.id: course for course in courses}
    periods_by_course = group_by_course(rate_periods)
    add_ons_by_course = group_by_course(add_ons)

    results: List[BookingProfitability] = []
    for booking in bookings:
        course = course_map.get(booking.course_id)
        if course is None:
            logger.warning(
                "Booking %s references unknown course %s", booking.id, booking.course_id
            )
        results.append(
            calculate_booking_profitability(
                booking,
                course,
                periods_by_course.get(booking.course_id, []),
                add_ons_by_course.get(booking.course_id, []),
                policy,
            )
        )
    return results
