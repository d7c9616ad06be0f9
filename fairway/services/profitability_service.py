from __future__ import annotations

import logging
import time
from datetime import date, timedelta
from typing import Optional, Tuple

from pydantic import ValidationError

from fairway.analytics.aggregation import margin_percent, round_money
from fairway.analytics.booking_profitability import calculate_booking_profitability
from fairway.analytics.policy import ProfitabilityPolicy
from fairway.analytics.report import build_profitability_report, validate_window
from fairway.core.config import get_settings
from fairway.core.errors import BadRequestError, NotFoundError, jsonable_errors
from fairway.repositories.profitability_repository import ProfitabilityRepository
from fairway.schemas.profitability import (
    AddOnProfitabilityLine,
    BookingProfitabilityDetail,
    ProfitabilityReport,
)
from fairway.shared.time import parse_time_window

logger = logging.getLogger(__name__)


class ProfitabilityService:
    def __init__(self, repository: ProfitabilityRepository) -> None:
        self.repository = repository
        self.settings = get_settings()

    def _policy(self) -> ProfitabilityPolicy:
        return ProfitabilityPolicy(
            tee_time_cost_ratio=self.settings.profitability_default_tee_time_cost_ratio,
            add_on_cost_ratio=self.settings.profitability_default_add_on_cost_ratio,
            default_package_type=self.settings.profitability_default_package_type,
        )

    def resolve_window(
        self,
        start_date: Optional[date],
        end_date: Optional[date],
        time_window: Optional[str] = None,
    ) -> Tuple[date, date]:
        if start_date is None and end_date is None and time_window:
            return parse_time_window(time_window)
        resolved_end = end_date or date.today()
        resolved_start = start_date or resolved_end - timedelta(
            days=self.settings.profitability_default_window_days
        )
        validate_window(resolved_start, resolved_end)
        return resolved_start, resolved_end

    def get_report(self, start_date: date, end_date: date) -> ProfitabilityReport:
        validate_window(start_date, end_date)
        started = time.perf_counter()
        try:
            bookings = self.repository.list_bookings(start_date, end_date)
        except ValidationError as exc:
            raise BadRequestError(
                "Booking records are missing mandatory fields",
                details={"errors": jsonable_errors(exc.errors())},
            ) from exc
        courses = self.repository.list_courses()
        rate_periods = self.repository.list_rate_periods()
        add_ons = self.repository.list_add_ons()

        report = build_profitability_report(
            start_date,
            end_date,
            bookings=bookings,
            courses=courses,
            rate_periods=rate_periods,
            add_ons=add_ons,
            policy=self._policy(),
        )
        logger.info(
            "Built profitability report %s..%s for %d bookings in %.1fms",
            start_date.isoformat(),
            end_date.isoformat(),
            report.summary.total_transactions,
            (time.perf_counter() - started) * 1000,
        )
        return report

    def get_booking_profitability(self, booking_id: str) -> BookingProfitabilityDetail:
        try:
            booking = self.repository.get_booking_by_id(booking_id)
        except ValidationError as exc:
            raise BadRequestError(
                "Booking record is missing mandatory fields",
                details={"errors": jsonable_errors(exc.errors())},
            ) from exc
        if not booking or booking.is_cancelled:
            raise NotFoundError("Booking not found")
        if booking.tee_time is None:
            raise BadRequestError("Booking has no resolvable tee time")

        record = calculate_booking_profitability(
            booking,
            self.repository.get_course(booking.course_id),
            self.repository.list_rate_periods(booking.course_id),
            self.repository.list_add_ons(booking.course_id),
            self._policy(),
        )
        return BookingProfitabilityDetail(
            booking_id=record.booking_id,
            course_id=record.course_id,
            course_name=record.course_name,
            date=record.date,
            cost_source=record.cost_source,
            rate_period_id=record.rate_period_id,
            tee_time_revenue=round_money(record.tee_time_revenue),
            tee_time_cost=round_money(record.tee_time_cost),
            add_on_revenue=round_money(record.add_on_revenue),
            add_on_cost=round_money(record.add_on_cost),
            total_revenue=round_money(record.total_revenue),
            total_cost=round_money(record.total_cost),
            profit=round_money(record.profit),
            margin_percent=round(margin_percent(record.profit, record.total_revenue), 2),
            add_on_breakdown=[
                AddOnProfitabilityLine(
                    type=line.type,
                    revenue=round_money(line.revenue),
                    cost=round_money(line.cost),
                    profit=round_money(line.revenue - line.cost),
                )
                for line in record.add_on_breakdown
            ],
        )
