from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from fairway.analytics.booking_profitability import BookingProfitability
from fairway.schemas.profitability import (
    CourseProfitability,
    LossMakingTransaction,
    ProductTypeProfitability,
    ProfitabilitySummary,
)

TEE_TIME_PRODUCT = "tee_time"
SEEDED_PRODUCT_TYPES = (TEE_TIME_PRODUCT, "buggy", "clubs", "trolley", "other")

PRODUCT_RECOMMENDATION_BANDS: Tuple[Tuple[float, str], ...] = (
    (25.0, "High performer - maintain or expand offerings"),
    (15.0, "Good margin - continue current strategy"),
    (5.0, "Consider price optimization or cost reduction"),
    (0.0, "Low margin - review pricing structure"),
)
LOSS_MAKING_RECOMMENDATION = "Loss-making - urgent review needed"

LOSS_REASON_TEE_TIME = "Tee time sold below cost"
LOSS_REASON_ADD_ONS = "Add-ons sold below cost"
LOSS_REASON_COMBINED = "Combined revenue below total costs"


@dataclass
class _Bucket:
    revenue: float = 0.0
    cost: float = 0.0
    count: int = 0

    @property
    def profit(self) -> float:
        return self.revenue - self.cost


def round_money(value: float) -> float:
    return round(float(value), 2)


def margin_percent(profit: float, revenue: float) -> float:
    return (profit / revenue) * 100 if revenue > 0 else 0.0


def product_recommendation(margin: float) -> str:
    for threshold, recommendation in PRODUCT_RECOMMENDATION_BANDS:
        if margin >= threshold:
            return recommendation
    return LOSS_MAKING_RECOMMENDATION


def build_summary(records: Sequence[BookingProfitability]) -> ProfitabilitySummary:
    total_revenue = sum(record.total_revenue for record in records)
    total_cost = sum(record.total_cost for record in records)
    gross_profit = total_revenue - total_cost
    return ProfitabilitySummary(
        total_revenue=round_money(total_revenue),
        total_cost=round_money(total_cost),
        gross_profit=round_money(gross_profit),
        profit_margin_percent=round(margin_percent(gross_profit, total_revenue), 2),
        total_transactions=len(records),
        loss_making_transactions=sum(1 for record in records if record.profit < 0),
    )


def build_by_product_type(
    records: Iterable[BookingProfitability],
) -> List[ProductTypeProfitability]:
    buckets: Dict[str, _Bucket] = {product: _Bucket() for product in SEEDED_PRODUCT_TYPES}
    for record in records:
        tee_time = buckets[TEE_TIME_PRODUCT]
        tee_time.revenue += record.tee_time_revenue
        tee_time.cost += record.tee_time_cost
        tee_time.count += 1
        for line in record.add_on_breakdown:
            bucket = buckets.setdefault(line.type, _Bucket())
            bucket.revenue += line.revenue
            bucket.cost += line.cost
            bucket.count += 1

    active = [
        (product, bucket)
        for product, bucket in buckets.items()
        if bucket.count > 0 or bucket.revenue != 0
    ]
    active.sort(key=lambda item: (-item[1].profit, item[0]))
    results: List[ProductTypeProfitability] = []
    for product, bucket in active:
        margin = margin_percent(bucket.profit, bucket.revenue)
        results.append(
            ProductTypeProfitability(
                product_type=product,
                revenue=round_money(bucket.revenue),
                cost=round_money(bucket.cost),
                profit=round_money(bucket.profit),
                margin_percent=round(margin, 2),
                transaction_count=bucket.count,
                recommendation=product_recommendation(margin),
            )
        )
    return results


def build_by_course(records: Iterable[BookingProfitability]) -> List[CourseProfitability]:
    names: Dict[str, str] = {}
    buckets: Dict[str, _Bucket] = {}
    for record in records:
        names.setdefault(record.course_id, record.course_name)
        bucket = buckets.setdefault(record.course_id, _Bucket())
        bucket.revenue += record.total_revenue
        bucket.cost += record.total_cost
        bucket.count += 1

    ranked = sorted(
        buckets.items(),
        key=lambda item: (-item[1].profit, names[item[0]], item[0]),
    )
    return [
        CourseProfitability(
            course_id=course_id,
            course_name=names[course_id],
            revenue=round_money(bucket.revenue),
            cost=round_money(bucket.cost),
            profit=round_money(bucket.profit),
            margin_percent=round(margin_percent(bucket.profit, bucket.revenue), 2),
            booking_count=bucket.count,
            avg_profit_per_booking=round_money(bucket.profit / bucket.count if bucket.count else 0.0),
        )
        for course_id, bucket in ranked
    ]


def loss_reason(record: BookingProfitability) -> str:
    if record.tee_time_cost > record.tee_time_revenue:
        return LOSS_REASON_TEE_TIME
    if record.add_on_cost > record.add_on_revenue:
        return LOSS_REASON_ADD_ONS
    return LOSS_REASON_COMBINED


def build_loss_transactions(
    records: Iterable[BookingProfitability],
) -> List[LossMakingTransaction]:
    losses = sorted(
        (record for record in records if record.profit < 0),
        key=lambda record: (record.profit, record.booking_id),
    )
    return [
        LossMakingTransaction(
            booking_id=record.booking_id,
            course_name=record.course_name,
            date=record.date,
            revenue=round_money(record.total_revenue),
            cost=round_money(record.total_cost),
            loss=round_money(abs(record.profit)),
            reason=loss_reason(record),
        )
        for record in losses
    ]
