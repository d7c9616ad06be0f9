from __future__ import annotations

import os
from datetime import date

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

import pytest
from fastapi.testclient import TestClient

from factories import StubProfitabilityRepository
from fairway.api.dependencies import get_profitability_service
from fairway.core.errors import NotFoundError
from fairway.main import create_app
from fairway.schemas.profitability import (
    AddOnProfitabilityLine,
    BookingProfitabilityDetail,
    ProductTypeProfitability,
    ProfitabilityRecommendations,
    ProfitabilityReport,
    ProfitabilitySummary,
    ReportPeriod,
)
from fairway.services.profitability_service import ProfitabilityService


class FakeProfitabilityService(ProfitabilityService):
    def __init__(self) -> None:
        super().__init__(repository=StubProfitabilityRepository())

    def get_report(self, start_date: date, end_date: date) -> ProfitabilityReport:
        return ProfitabilityReport(
            period=ReportPeriod(start=start_date, end=end_date),
            summary=ProfitabilitySummary(
                total_revenue=60,
                total_cost=40,
                gross_profit=20,
                profit_margin_percent=33.33,
                total_transactions=1,
                loss_making_transactions=0,
            ),
            by_product_type=[
                ProductTypeProfitability(
                    product_type="tee_time",
                    revenue=60,
                    cost=40,
                    profit=20,
                    margin_percent=33.33,
                    transaction_count=1,
                    recommendation="High performer - maintain or expand offerings",
                )
            ],
            by_course=[],
            loss_making_transactions=[],
            recommendations=ProfitabilityRecommendations(),
            alerts=[],
        )

    def get_booking_profitability(self, booking_id: str) -> BookingProfitabilityDetail:
        if booking_id != "booking-1":
            raise NotFoundError("Booking not found")
        return BookingProfitabilityDetail(
            booking_id="booking-1",
            course_id="course-1",
            course_name="Los Naranjos",
            date="2026-07-15",
            cost_source="net_rate",
            rate_period_id="period-1",
            tee_time_revenue=60,
            tee_time_cost=40,
            add_on_revenue=20,
            add_on_cost=14,
            total_revenue=80,
            total_cost=54,
            profit=26,
            margin_percent=32.5,
            add_on_breakdown=[AddOnProfitabilityLine(type="buggy", revenue=20, cost=14, profit=6)],
        )


@pytest.fixture()
def client() -> TestClient:
    app = create_app()
    app.dependency_overrides[get_profitability_service] = FakeProfitabilityService
    return TestClient(app)
