from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional, Union

from pydantic import BaseModel, field_validator

BOOKING_STATUS_PENDING = "PENDING"
BOOKING_STATUS_SENT_TO_COURSE = "SENT_TO_COURSE"
BOOKING_STATUS_CONFIRMED = "CONFIRMED"
BOOKING_STATUS_CANCELLED = "CANCELLED"


class BookingRecord(BaseModel):
    id: str
    course_id: str
    user_id: Optional[str] = None
    tee_time: Optional[datetime] = None
    players: int = 1
    customer_name: Optional[str] = None
    status: str = BOOKING_STATUS_PENDING
    total_amount_cents: Optional[int] = None
    estimated_price: Optional[Decimal] = None
    package_type: Optional[str] = None
    add_ons_json: Optional[Union[str, List[Any]]] = None
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None

    @field_validator("tee_time", mode="before")
    @classmethod
    def _parse_tee_time(cls, value: Any) -> Any:
        if value is None or isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                return None
        return None

    @field_validator("players", mode="before")
    @classmethod
    def _default_players(cls, value: Any) -> Any:
        try:
            players = int(value)
        except (TypeError, ValueError):
            return 1
        return players if players >= 1 else 1

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        if value is None:
            return BOOKING_STATUS_PENDING
        return str(value).strip().upper()

    @property
    def is_cancelled(self) -> bool:
        return self.status == BOOKING_STATUS_CANCELLED


class CourseRecord(BaseModel):
    id: str
    name: str
    city: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None
    kickback_percent: Optional[Decimal] = None

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> Any:
        return "" if value is None else value


class RatePeriodRecord(BaseModel):
    id: Optional[str] = None
    course_id: str
    package_type: Optional[str] = None
    season_label: Optional[str] = None
    start_date: str = ""
    end_date: str = ""
    rack_rate: Optional[Decimal] = None
    net_rate: Optional[Decimal] = None
    kickback_percent: Optional[Decimal] = None
    currency: Optional[str] = "EUR"
    notes: Optional[str] = None
    year: Optional[int] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _default_month_day(cls, value: Any) -> Any:
        # A missing bound is read like any other malformed month-day string.
        return "" if value is None else str(value)


class AddOnCatalogRecord(BaseModel):
    id: str
    course_id: str
    name: Optional[str] = None
    type: str = "other"
    price_cents: float = 0
    cost_cents: Optional[float] = None
    per_player: bool = False

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value: Any) -> Any:
        return "other" if value is None else value

    @field_validator("price_cents", mode="before")
    @classmethod
    def _default_price(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("per_player", mode="before")
    @classmethod
    def _parse_per_player(cls, value: Any) -> bool:
        # Stored as the text "true"/"false" by the booking app.
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in {"true", "t", "1", "yes", "y"}
        return False
