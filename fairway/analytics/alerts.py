from __future__ import annotations

from typing import List, Sequence

from fairway.schemas.profitability import (
    LossMakingTransaction,
    ProductTypeProfitability,
    ProfitabilityAlert,
    ProfitabilitySummary,
)

MARGIN_WARNING_THRESHOLD = 10.0
MARGIN_CRITICAL_THRESHOLD = 5.0
LOSS_RATIO_WARNING_THRESHOLD = 5.0
LOSS_RATIO_CRITICAL_THRESHOLD = 10.0
NEGATIVE_MARGIN_MIN_TRANSACTIONS = 3
LARGE_LOSS_THRESHOLD = 50.0


def _margin_alerts(summary: ProfitabilitySummary) -> List[ProfitabilityAlert]:
    # An empty window has a 0% margin by definition, which is not a pricing signal.
    if summary.total_transactions == 0:
        return []
    margin = summary.profit_margin_percent
    if margin >= MARGIN_WARNING_THRESHOLD:
        return []
    return [
        ProfitabilityAlert(
            type="margin_warning",
            severity="critical" if margin < MARGIN_CRITICAL_THRESHOLD else "warning",
            message=(
                f"Overall profit margin is {margin:.1f}% - below healthy threshold of "
                f"{MARGIN_WARNING_THRESHOLD:.0f}%"
            ),
        )
    ]


def _loss_ratio_alerts(summary: ProfitabilitySummary) -> List[ProfitabilityAlert]:
    if summary.total_transactions == 0:
        return []
    ratio = summary.loss_making_transactions / summary.total_transactions * 100
    if ratio <= LOSS_RATIO_WARNING_THRESHOLD:
        return []
    return [
        ProfitabilityAlert(
            type="loss_ratio",
            severity="critical" if ratio > LOSS_RATIO_CRITICAL_THRESHOLD else "warning",
            message=(
                f"{ratio:.1f}% of transactions are loss-making "
                f"({summary.loss_making_transactions} out of {summary.total_transactions})"
            ),
        )
    ]


def _negative_margin_alerts(
    by_product_type: Sequence[ProductTypeProfitability],
) -> List[ProfitabilityAlert]:
    return [
        ProfitabilityAlert(
            type="negative_margin",
            severity="critical",
            message=(
                f"{product.product_type} has negative margin of {product.margin_percent:.1f}% "
                f"across {product.transaction_count} transactions"
            ),
        )
        for product in by_product_type
        if product.margin_percent < 0
        and product.transaction_count >= NEGATIVE_MARGIN_MIN_TRANSACTIONS
    ]


def _large_loss_alerts(
    loss_transactions: Sequence[LossMakingTransaction],
) -> List[ProfitabilityAlert]:
    large_losses = [item for item in loss_transactions if item.loss > LARGE_LOSS_THRESHOLD]
    if not large_losses:
        return []
    return [
        ProfitabilityAlert(
            type="large_loss",
            severity="warning",
            message=(
                f"{len(large_losses)} transactions with losses over "
                f"€{LARGE_LOSS_THRESHOLD:.0f} detected"
            ),
        )
    ]


def generate_alerts(
    summary: ProfitabilitySummary,
    by_product_type: Sequence[ProductTypeProfitability],
    loss_transactions: Sequence[LossMakingTransaction],
) -> List[ProfitabilityAlert]:
    return [
        *_margin_alerts(summary),
        *_loss_ratio_alerts(summary),
        *_negative_margin_alerts(by_product_type),
        *_large_loss_alerts(loss_transactions),
    ]
