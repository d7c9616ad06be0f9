from __future__ import annotations

from dataclasses import dataclass

DEFAULT_TEE_TIME_COST_RATIO = 0.80
DEFAULT_ADD_ON_COST_RATIO = 0.70
DEFAULT_PACKAGE_TYPE = "GREEN_FEE_BUGGY"


@dataclass(frozen=True)
class ProfitabilityPolicy:
    """Business assumptions used when contract or catalog data is missing.

    tee_time_cost_ratio: share of booking revenue assumed to be course cost when neither
        a rate period nor a course kickback explains the cost (80% cost / 20% margin).
    add_on_cost_ratio: share of add-on revenue assumed to be cost when the catalog has
        no unit cost.
    default_package_type: package matched against rate periods for bookings without one.
    """

    tee_time_cost_ratio: float = DEFAULT_TEE_TIME_COST_RATIO
    add_on_cost_ratio: float = DEFAULT_ADD_ON_COST_RATIO
    default_package_type: str = DEFAULT_PACKAGE_TYPE
