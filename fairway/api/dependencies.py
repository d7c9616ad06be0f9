from __future__ import annotations

from functools import lru_cache

from fairway.repositories.profitability_repository import ProfitabilityRepository
from fairway.services.profitability_service import ProfitabilityService


@lru_cache
def get_profitability_repository() -> ProfitabilityRepository:
    return ProfitabilityRepository()


def get_profitability_service() -> ProfitabilityService:
    return ProfitabilityService(repository=get_profitability_repository())
