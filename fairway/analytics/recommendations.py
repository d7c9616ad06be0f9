from __future__ import annotations

from typing import List, Sequence

from fairway.schemas.profitability import (
    CourseProfitability,
    PriceAdjustment,
    ProductTypeProfitability,
    ProfitabilityRecommendations,
)

FOCUS_MIN_MARGIN = 20.0
FOCUS_MIN_TRANSACTIONS = 5
REDUCE_FOCUS_MAX_MARGIN = 5.0
PRICE_ADJUSTMENT_MAX_MARGIN = 10.0
PARTNER_MIN_AVG_PROFIT = 20.0
PARTNER_COURSE_LIMIT = 3
RENEGOTIATE_MAX_MARGIN = 10.0
RENEGOTIATE_MIN_BOOKINGS = 3
RENEGOTIATE_COURSE_LIMIT = 3

MAX_FOCUS_AREAS = 5
MAX_REDUCE_FOCUS = 5
MAX_PRICE_ADJUSTMENTS = 10

ACTION_RAISE_SHARPLY = "Increase price by 15-20% or reduce supplier costs"
ACTION_RAISE_MODESTLY = "Consider 5-10% price increase"
ACTION_RENEGOTIATE = "Renegotiate rates or adjust customer pricing"


def _product_label(product: ProductTypeProfitability) -> str:
    return f"{product.product_type} ({product.margin_percent:.1f}% margin)"


def build_recommendations(
    by_product_type: Sequence[ProductTypeProfitability],
    by_course: Sequence[CourseProfitability],
) -> ProfitabilityRecommendations:
    focus_areas: List[str] = []
    reduce_focus: List[str] = []
    price_adjustments: List[PriceAdjustment] = []

    products = sorted(by_product_type, key=lambda item: (-item.margin_percent, item.product_type))
    for product in products:
        if (
            product.margin_percent >= FOCUS_MIN_MARGIN
            and product.transaction_count >= FOCUS_MIN_TRANSACTIONS
        ):
            focus_areas.append(_product_label(product))
        elif product.margin_percent < REDUCE_FOCUS_MAX_MARGIN:
            reduce_focus.append(_product_label(product))
            if product.margin_percent < PRICE_ADJUSTMENT_MAX_MARGIN:
                price_adjustments.append(
                    PriceAdjustment(
                        item=product.product_type,
                        current_margin=product.margin_percent,
                        suggested_action=ACTION_RAISE_SHARPLY
                        if product.margin_percent < 0
                        else ACTION_RAISE_MODESTLY,
                    )
                )

    partner_courses = sorted(
        (course for course in by_course if course.avg_profit_per_booking > PARTNER_MIN_AVG_PROFIT),
        key=lambda course: (-course.avg_profit_per_booking, course.course_name, course.course_id),
    )[:PARTNER_COURSE_LIMIT]
    if partner_courses:
        labels = ", ".join(
            f"{course.course_name} (€{course.avg_profit_per_booking:.0f}/booking avg)"
            for course in partner_courses
        )
        focus_areas.append(f"Prioritize partnerships: {labels}")

    low_margin_courses = [
        course
        for course in by_course
        if course.margin_percent < RENEGOTIATE_MAX_MARGIN
        and course.booking_count >= RENEGOTIATE_MIN_BOOKINGS
    ][:RENEGOTIATE_COURSE_LIMIT]
    for course in low_margin_courses:
        price_adjustments.append(
            PriceAdjustment(
                item=course.course_name,
                current_margin=course.margin_percent,
                suggested_action=ACTION_RENEGOTIATE,
            )
        )

    return ProfitabilityRecommendations(
        focus_areas=focus_areas[:MAX_FOCUS_AREAS],
        reduce_focus=reduce_focus[:MAX_REDUCE_FOCUS],
        price_adjustments=price_adjustments[:MAX_PRICE_ADJUSTMENTS],
    )
