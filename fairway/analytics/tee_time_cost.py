from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, List, NamedTuple, Optional, Sequence, Union

from fairway.analytics.policy import ProfitabilityPolicy
from fairway.models.profitability import BookingRecord, CourseRecord, RatePeriodRecord


class MonthDay(NamedTuple):
    month: int
    day: int

    @property
    def ordinal(self) -> int:
        return self.month * 100 + self.day

    @classmethod
    def from_date(cls, value: date) -> "MonthDay":
        return cls(value.month, value.day)


# Known fragility: anything that is not "MM-DD" reads as Jan 1. A period with a malformed
# bound therefore still takes part in matching with that bound, and stays eligible as the
# first-period fallback.
MALFORMED_MONTH_DAY = MonthDay(1, 1)


def parse_month_day(value: Optional[str]) -> MonthDay:
    if not value:
        return MALFORMED_MONTH_DAY
    parts = value.strip().split("-")
    if len(parts) != 2:
        return MALFORMED_MONTH_DAY
    try:
        return MonthDay(int(parts[0]), int(parts[1]))
    except ValueError:
        return MALFORMED_MONTH_DAY


def is_date_in_range(value: MonthDay, start: MonthDay, end: MonthDay) -> bool:
    if start.ordinal <= end.ordinal:
        return start.ordinal <= value.ordinal <= end.ordinal
    # Season wraps the year boundary, e.g. Nov 1 - Mar 31.
    return value.ordinal >= start.ordinal or value.ordinal <= end.ordinal


def _applies_to_package(period: RatePeriodRecord, package_type: str) -> bool:
    if not period.package_type:
        return True
    return period.package_type.strip().lower() == package_type.strip().lower()


def match_rate_period(
    periods: Sequence[RatePeriodRecord], package_type: str, booking_date: MonthDay
) -> Optional[RatePeriodRecord]:
    """Return the contract rate period for a booking, in catalog order.

    The first period whose package filter and season window both fit wins. When no
    season fits, the first package-compatible period is used, or the first period at
    all when none is compatible. Returns None only when the course has no periods.
    """
    candidates = [period for period in periods if _applies_to_package(period, package_type)]
    for period in candidates:
        start = parse_month_day(period.start_date)
        end = parse_month_day(period.end_date)
        if is_date_in_range(booking_date, start, end):
            return period
    fallback_pool = candidates or list(periods)
    return fallback_pool[0] if fallback_pool else None


def get_booking_revenue(booking: BookingRecord) -> float:
    if booking.total_amount_cents:
        return booking.total_amount_cents / 100
    if booking.estimated_price:
        return float(booking.estimated_price)
    return 0.0


@dataclass(frozen=True)
class NetRate:
    amount: float
    label: str = "net_rate"

    def cost(self, booking_revenue: float) -> float:
        # Contract net rates already cover every player in the package.
        return self.amount


@dataclass(frozen=True)
class RackKickback:
    rack_rate: float
    kickback_percent: float
    label: str = "rack_kickback"

    def cost(self, booking_revenue: float) -> float:
        return self.rack_rate * (1 - self.kickback_percent / 100)


@dataclass(frozen=True)
class CourseKickback:
    kickback_percent: float
    label: str = "course_kickback"

    def cost(self, booking_revenue: float) -> float:
        return booking_revenue * (1 - self.kickback_percent / 100)


@dataclass(frozen=True)
class DefaultMargin:
    cost_ratio: float
    label: str = "default_margin"

    def cost(self, booking_revenue: float) -> float:
        return booking_revenue * self.cost_ratio


CostSource = Union[NetRate, RackKickback, CourseKickback, DefaultMargin]
CostSourceBuilder = Callable[[Optional[RatePeriodRecord], Optional[CourseRecord]], Optional[CostSource]]


def _positive(value: object) -> Optional[float]:
    if value is None:
        return None
    amount = float(value)
    return amount if amount > 0 else None


def _net_rate_source(
    period: Optional[RatePeriodRecord], _: Optional[CourseRecord]
) -> Optional[CostSource]:
    if period is None:
        return None
    net_rate = _positive(period.net_rate)
    return NetRate(amount=net_rate) if net_rate is not None else None


def _rack_kickback_source(
    period: Optional[RatePeriodRecord], _: Optional[CourseRecord]
) -> Optional[CostSource]:
    if period is None:
        return None
    rack_rate = _positive(period.rack_rate)
    kickback = _positive(period.kickback_percent)
    if rack_rate is None or kickback is None:
        return None
    return RackKickback(rack_rate=rack_rate, kickback_percent=kickback)


def _course_kickback_source(
    _: Optional[RatePeriodRecord], course: Optional[CourseRecord]
) -> Optional[CostSource]:
    if course is None:
        return None
    kickback = _positive(course.kickback_percent)
    return CourseKickback(kickback_percent=kickback) if kickback is not None else None


COST_SOURCE_PRIORITY: List[CostSourceBuilder] = [
    _net_rate_source,
    _rack_kickback_source,
    _course_kickback_source,
]


def resolve_cost_source(
    period: Optional[RatePeriodRecord],
    course: Optional[CourseRecord],
    policy: ProfitabilityPolicy,
    builders: Iterable[CostSourceBuilder] = COST_SOURCE_PRIORITY,
) -> CostSource:
    for build in builders:
        source = build(period, course)
        if source is not None:
            return source
    return DefaultMargin(cost_ratio=policy.tee_time_cost_ratio)


def attribute_tee_time_cost(
    booking: BookingRecord,
    period: Optional[RatePeriodRecord],
    course: Optional[CourseRecord],
    policy: ProfitabilityPolicy,
) -> float:
    source = resolve_cost_source(period, course, policy)
    return source.cost(get_booking_revenue(booking))
