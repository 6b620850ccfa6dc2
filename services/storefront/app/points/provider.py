from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from packages.shared.schemas.points_v1 import BenefitV1, PointsBalanceV1, RedemptionConfigV1
from services.storefront.app.errors import (
    StorefrontAuthError,
    StorefrontNetworkError,
    StorefrontServerRejection,
)
from services.storefront.app.services.storefront_base import StorefrontApi

logger = logging.getLogger(__name__)


def _disabled_config() -> RedemptionConfigV1:
    return RedemptionConfigV1(enabled=False)


@dataclass(frozen=True, slots=True)
class PointsSnapshot:
    redemption_config: RedemptionConfigV1 = field(default_factory=_disabled_config)
    balance: PointsBalanceV1 = field(default_factory=PointsBalanceV1)
    benefits: list[BenefitV1] = field(default_factory=list)


class PointsProvider:
    def __init__(self, api: StorefrontApi) -> None:
        self._api = api

    async def fetch_redemption_config(self) -> RedemptionConfigV1:
        config = await self._api.get_redemption_config()
        if config.enabled and config.points_per_currency_unit < 1:
            logger.warning(
                "Redemption rate %s is below 1; disabling points redemption",
                config.points_per_currency_unit,
            )
            return config.model_copy(update={"enabled": False})
        return config

    async def fetch_balance(self) -> PointsBalanceV1:
        return await self._api.get_points_balance()

    async def fetch_benefits(self, total_earned: Decimal | None = None) -> list[BenefitV1]:
        benefits = await self._api.get_benefits()
        if total_earned is None:
            return benefits
        return [b for b in benefits if b.qualifies(total_earned)]

    async def load(self) -> PointsSnapshot:
        """Fetch everything checkout needs about points in one round.

        Users without points data still check out, so anything short of an expired
        session falls back to "no points" instead of failing.
        """

        try:
            config, balance, benefits = await asyncio.gather(
                self.fetch_redemption_config(),
                self.fetch_balance(),
                self._api.get_benefits(),
            )
        except StorefrontAuthError:
            raise
        except (StorefrontNetworkError, StorefrontServerRejection) as e:
            logger.warning("Points data unavailable, continuing without points: %s", e)
            return PointsSnapshot()

        if balance.total_points_earned is not None:
            benefits = [b for b in benefits if b.qualifies(balance.total_points_earned)]
        return PointsSnapshot(redemption_config=config, balance=balance, benefits=benefits)
