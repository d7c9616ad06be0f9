from __future__ import annotations

from fairway.analytics.alerts import generate_alerts
from fairway.analytics.recommendations import build_recommendations
from fairway.schemas.profitability import (
    CourseProfitability,
    LossMakingTransaction,
    ProductTypeProfitability,
    ProfitabilitySummary,
)


def _product(product_type: str, margin: float, count: int) -> ProductTypeProfitability:
    return ProductTypeProfitability(
        product_type=product_type,
        revenue=100,
        cost=100 - margin,
        profit=margin,
        margin_percent=margin,
        transaction_count=count,
        recommendation="",
    )


def _course(
    course_id: str, name: str, margin: float, bookings: int, avg_profit: float
) -> CourseProfitability:
    return CourseProfitability(
        course_id=course_id,
        course_name=name,
        revenue=1000,
        cost=1000 - margin * 10,
        profit=avg_profit * bookings,
        margin_percent=margin,
        booking_count=bookings,
        avg_profit_per_booking=avg_profit,
    )


def _summary(margin: float, total: int = 20, losses: int = 0) -> ProfitabilitySummary:
    return ProfitabilitySummary(
        total_revenue=1000,
        total_cost=1000 - margin * 10,
        gross_profit=margin * 10,
        profit_margin_percent=margin,
        total_transactions=total,
        loss_making_transactions=losses,
    )


def _loss(booking_id: str, loss: float) -> LossMakingTransaction:
    return LossMakingTransaction(
        booking_id=booking_id,
        course_name="Los Naranjos",
        date="2026-07-15",
        revenue=60,
        cost=60 + loss,
        loss=loss,
        reason="Tee time sold below cost",
    )


def test_recommendations_split_products_by_margin() -> None:
    products = [
        _product("tee_time", 33.3, 12),
        _product("buggy", 22.0, 3),
        _product("trolley", 3.0, 8),
        _product("clubs", -4.0, 6),
    ]
    result = build_recommendations(products, [])

    assert result.focus_areas == ["tee_time (33.3% margin)"]
    assert result.reduce_focus == ["trolley (3.0% margin)", "clubs (-4.0% margin)"]
    assert [(item.item, item.suggested_action) for item in result.price_adjustments] == [
        ("trolley", "Consider 5-10% price increase"),
        ("clubs", "Increase price by 15-20% or reduce supplier costs"),
    ]


def test_recommendations_prioritize_top_courses_by_average_profit() -> None:
    courses = [
        _course("c1", "Alpha", 30.0, 10, 25.0),
        _course("c2", "Bravo", 30.0, 2, 60.0),
        _course("c3", "Charlie", 30.0, 4, 40.0),
        _course("c4", "Delta", 30.0, 4, 21.0),
        _course("c5", "Echo", 30.0, 4, 19.0),
    ]
    result = build_recommendations([], courses)

    assert result.focus_areas == [
        "Prioritize partnerships: Bravo (€60/booking avg), Charlie (€40/booking avg), Alpha (€25/booking avg)"
    ]


def test_recommendations_flag_low_margin_courses_for_renegotiation() -> None:
    courses = [
        _course("c1", "Alpha", 8.0, 5, 5.0),
        _course("c2", "Bravo", 4.0, 2, 2.0),
        _course("c3", "Charlie", 9.5, 3, 4.0),
    ]
    result = build_recommendations([], courses)

    assert [item.item for item in result.price_adjustments] == ["Alpha", "Charlie"]
    assert {item.suggested_action for item in result.price_adjustments} == {
        "Renegotiate rates or adjust customer pricing"
    }


def test_recommendation_lists_are_capped() -> None:
    products = [_product(f"product_{index}", -1.0 - index, 1) for index in range(12)]
    courses = [_course(f"c{index}", f"Course {index}", 2.0, 5, 1.0) for index in range(6)]
    result = build_recommendations(products, courses)

    assert len(result.reduce_focus) == 5
    assert len(result.price_adjustments) == 10


def test_alerts_for_healthy_report_are_empty() -> None:
    assert generate_alerts(_summary(25.0), [_product("tee_time", 25.0, 20)], []) == []


def test_margin_alert_severity() -> None:
    warning = generate_alerts(_summary(8.0), [], [])
    critical = generate_alerts(_summary(4.0), [], [])
    assert [(alert.type, alert.severity) for alert in warning] == [("margin_warning", "warning")]
    assert [(alert.type, alert.severity) for alert in critical] == [("margin_warning", "critical")]


def test_empty_report_has_no_margin_alert() -> None:
    assert generate_alerts(_summary(0.0, total=0), [], []) == []


def test_loss_ratio_alert_thresholds() -> None:
    at_threshold = generate_alerts(_summary(30.0, total=20, losses=1), [], [])
    warning = generate_alerts(_summary(30.0, total=100, losses=8), [], [])
    critical = generate_alerts(_summary(30.0, total=20, losses=3), [], [])

    assert at_threshold == []
    assert [(alert.type, alert.severity) for alert in warning] == [("loss_ratio", "warning")]
    assert [(alert.type, alert.severity) for alert in critical] == [("loss_ratio", "critical")]
    assert "3 out of 20" in critical[0].message


def test_negative_margin_products_need_three_transactions() -> None:
    products = [_product("clubs", -12.0, 3), _product("trolley", -30.0, 2)]
    alerts = generate_alerts(_summary(30.0), products, [])

    assert [(alert.type, alert.severity) for alert in alerts] == [("negative_margin", "critical")]
    assert alerts[0].message.startswith("clubs has negative margin of -12.0%")


def test_large_losses_are_aggregated_into_one_alert() -> None:
    losses = [_loss("a", 75.0), _loss("b", 50.0), _loss("c", 120.0)]
    alerts = generate_alerts(_summary(30.0, total=100, losses=3), [], losses)

    assert [(alert.type, alert.severity) for alert in alerts] == [("large_loss", "warning")]
    assert alerts[0].message == "2 transactions with losses over €50 detected"


def test_alert_checks_are_independent() -> None:
    alerts = generate_alerts(
        _summary(2.0, total=10, losses=3),
        [_product("tee_time", -5.0, 10)],
        [_loss("a", 80.0)],
    )
    assert [alert.type for alert in alerts] == [
        "margin_warning",
        "loss_ratio",
        "negative_margin",
        "large_loss",
    ]


def test_focus_areas_are_capped_at_five() -> None:
    products = [_product(f"product_{index}", 30.0 + index, 6) for index in range(6)]
    courses = [_course("c1", "Alpha", 30.0, 4, 45.0)]
    result = build_recommendations(products, courses)

    assert len(result.focus_areas) == 5
    assert result.focus_areas[0] == "product_5 (35.0% margin)"
    assert not any(area.startswith("Prioritize partnerships") for area in result.focus_areas)
