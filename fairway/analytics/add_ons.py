from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError, field_validator

from fairway.analytics.policy import ProfitabilityPolicy
from fairway.models.profitability import AddOnCatalogRecord, BookingRecord
from fairway.shared.base import BaseSchema

logger = logging.getLogger(__name__)

ADD_ON_TYPE_KEYWORDS = (
    ("buggy", "buggy"),
    ("club", "clubs"),
    ("trolley", "trolley"),
)
OTHER_ADD_ON_TYPE = "other"


class AddOnSelection(BaseSchema):
    """One item of a booking's serialized add-on list (camelCase keys from checkout)."""

    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    price_cents: Optional[float] = None
    quantity: float = 1

    @field_validator("quantity", mode="before")
    @classmethod
    def _default_quantity(cls, value: Any) -> Any:
        # Missing, zero or non-finite quantities fall back to 1; fractions and negatives are kept.
        try:
            quantity = float(value)
        except (TypeError, ValueError):
            return 1
        return quantity if quantity and math.isfinite(quantity) else 1


@dataclass(frozen=True)
class ResolvedAddOn:
    selection: AddOnSelection
    entry: AddOnCatalogRecord


@dataclass(frozen=True)
class UnresolvedAddOn:
    selection: AddOnSelection


ParsedAddOn = Union[ResolvedAddOn, UnresolvedAddOn]


@dataclass
class AddOnLine:
    type: str
    revenue: float = 0.0
    cost: float = 0.0


@dataclass
class AddOnDecomposition:
    revenue: float = 0.0
    cost: float = 0.0
    breakdown: List[AddOnLine] = field(default_factory=list)


def normalize_add_on_type(value: Optional[str]) -> str:
    lowered = (value or "").lower()
    for keyword, canonical in ADD_ON_TYPE_KEYWORDS:
        if keyword in lowered:
            return canonical
    return OTHER_ADD_ON_TYPE


def parse_add_on_selections(raw: Union[str, List[Any], None]) -> List[AddOnSelection]:
    if not raw:
        return []
    payload: Any = raw
    if isinstance(raw, str):
        try:
            payload = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring unparseable add-on payload")
            return []
    if not isinstance(payload, list):
        return []

    selections: List[AddOnSelection] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        try:
            selections.append(AddOnSelection.model_validate(item))
        except ValidationError:
            continue
    return selections


def resolve_add_ons(
    selections: Iterable[AddOnSelection], catalog_by_id: Mapping[str, AddOnCatalogRecord]
) -> List[ParsedAddOn]:
    resolved: List[ParsedAddOn] = []
    for selection in selections:
        entry = catalog_by_id.get(selection.id) if selection.id else None
        if entry is not None:
            resolved.append(ResolvedAddOn(selection=selection, entry=entry))
        else:
            resolved.append(UnresolvedAddOn(selection=selection))
    return resolved


def _price_add_on(
    add_on: ParsedAddOn, players: int, policy: ProfitabilityPolicy
) -> Optional[AddOnLine]:
    quantity = add_on.selection.quantity
    if isinstance(add_on, ResolvedAddOn):
        entry = add_on.entry
        multiplier = quantity * players if entry.per_player else quantity
        revenue = (entry.price_cents / 100) * multiplier
        if entry.cost_cents:
            cost = (entry.cost_cents / 100) * multiplier
        else:
            cost = revenue * policy.add_on_cost_ratio
        return AddOnLine(type=normalize_add_on_type(entry.type), revenue=revenue, cost=cost)

    price_cents = add_on.selection.price_cents
    if not price_cents:
        return None
    revenue = (price_cents / 100) * quantity
    return AddOnLine(
        type=normalize_add_on_type(add_on.selection.type),
        revenue=revenue,
        cost=revenue * policy.add_on_cost_ratio,
    )


def decompose_add_ons(
    booking: BookingRecord,
    catalog: Iterable[AddOnCatalogRecord],
    policy: ProfitabilityPolicy,
) -> AddOnDecomposition:
    result = AddOnDecomposition()
    selections = parse_add_on_selections(booking.add_ons_json)
    if not selections:
        return result

    catalog_by_id: Dict[str, AddOnCatalogRecord] = {entry.id: entry for entry in catalog}
    lines_by_type: Dict[str, AddOnLine] = {}
    for add_on in resolve_add_ons(selections, catalog_by_id):
        line = _price_add_on(add_on, booking.players, policy)
        if line is None:
            continue
        result.revenue += line.revenue
        result.cost += line.cost
        existing = lines_by_type.get(line.type)
        if existing is None:
            existing = AddOnLine(type=line.type)
            lines_by_type[line.type] = existing
            result.breakdown.append(existing)
        existing.revenue += line.revenue
        existing.cost += line.cost
    return result
