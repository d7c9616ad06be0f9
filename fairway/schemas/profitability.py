from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import ConfigDict, Field

from fairway.shared.base import BaseSchema


class ProfitabilityReportFilters(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    time_window: Optional[str] = Field(default=None, pattern=r"^\d+[dm]$")


class ReportPeriod(BaseSchema):
    start: date
    end: date


class ProfitabilitySummary(BaseSchema):
    total_revenue: float
    total_cost: float
    gross_profit: float
    profit_margin_percent: float
    total_transactions: int
    loss_making_transactions: int


class ProductTypeProfitability(BaseSchema):
    product_type: str
    revenue: float
    cost: float
    profit: float
    margin_percent: float
    transaction_count: int
    recommendation: str


class CourseProfitability(BaseSchema):
    course_id: str
    course_name: str
    revenue: float
    cost: float
    profit: float
    margin_percent: float
    booking_count: int
    avg_profit_per_booking: float


class LossMakingTransaction(BaseSchema):
    booking_id: str
    course_name: str
    date: str
    revenue: float
    cost: float
    loss: float
    reason: str


class PriceAdjustment(BaseSchema):
    item: str
    current_margin: float
    suggested_action: str


class ProfitabilityRecommendations(BaseSchema):
    focus_areas: List[str] = Field(default_factory=list)
    reduce_focus: List[str] = Field(default_factory=list)
    price_adjustments: List[PriceAdjustment] = Field(default_factory=list)


class ProfitabilityAlert(BaseSchema):
    type: str
    severity: str = Field(..., pattern="^(warning|critical)$")
    message: str


class ProfitabilityReport(BaseSchema):
    period: ReportPeriod
    summary: ProfitabilitySummary
    by_product_type: List[ProductTypeProfitability]
    by_course: List[CourseProfitability]
    loss_making_transactions: List[LossMakingTransaction]
    recommendations: ProfitabilityRecommendations
    alerts: List[ProfitabilityAlert]


class AddOnProfitabilityLine(BaseSchema):
    type: str
    revenue: float
    cost: float
    profit: float


class BookingProfitabilityDetail(BaseSchema):
    booking_id: str
    course_id: str
    course_name: str
    date: str
    cost_source: str
    rate_period_id: Optional[str] = None
    tee_time_revenue: float
    tee_time_cost: float
    add_on_revenue: float
    add_on_cost: float
    total_revenue: float
    total_cost: float
    profit: float
    margin_percent: float
    add_on_breakdown: List[AddOnProfitabilityLine]
