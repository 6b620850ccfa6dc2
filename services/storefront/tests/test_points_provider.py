import asyncio
from decimal import Decimal

import pytest

from packages.shared.schemas.points_v1 import (
    BenefitKindV1,
    BenefitV1,
    PointsBalanceV1,
    RedemptionConfigV1,
)
from services.storefront.app.errors import (
    StorefrontAuthError,
    StorefrontNetworkError,
    StorefrontServerRejection,
)
from services.storefront.app.points.provider import PointsProvider


def test_zero_rate_disables_redemption(fake_api) -> None:
    fake_api.config = RedemptionConfigV1(points_per_currency_unit=0, enabled=True)
    config = asyncio.run(PointsProvider(fake_api).fetch_redemption_config())
    assert config.enabled is False
    assert config.is_usable is False


def test_load_keeps_server_benefit_order(fake_api) -> None:
    fake_api.balance = PointsBalanceV1(current_balance=Decimal("250"))
    fake_api.benefits = [
        BenefitV1(threshold_points=Decimal("5000"), kind=BenefitKindV1.FIXED_AMOUNT_OFF, value=Decimal("100")),
        BenefitV1(threshold_points=Decimal("1000"), kind=BenefitKindV1.PERCENT_OFF, value=Decimal("5")),
    ]

    snapshot = asyncio.run(PointsProvider(fake_api).load())

    assert snapshot.balance.current_balance == Decimal("250")
    assert [b.kind for b in snapshot.benefits] == [
        BenefitKindV1.FIXED_AMOUNT_OFF,
        BenefitKindV1.PERCENT_OFF,
    ]
    assert snapshot.redemption_config.points_per_currency_unit == 10


def test_load_drops_benefits_above_known_earned_total(fake_api) -> None:
    fake_api.balance = PointsBalanceV1(
        current_balance=Decimal("100"), total_points_earned=Decimal("1500")
    )
    fake_api.benefits = [
        BenefitV1(threshold_points=Decimal("5000"), kind=BenefitKindV1.FIXED_AMOUNT_OFF, value=Decimal("100")),
        BenefitV1(threshold_points=Decimal("1500"), kind=BenefitKindV1.PERCENT_OFF, value=Decimal("5")),
    ]

    snapshot = asyncio.run(PointsProvider(fake_api).load())
    assert [b.threshold_points for b in snapshot.benefits] == [Decimal("1500")]


@pytest.mark.parametrize(
    "error", [StorefrontNetworkError("down"), StorefrontServerRejection(500)]
)
def test_load_degrades_to_no_points(fake_api, error) -> None:
    fake_api.fail_with = error
    snapshot = asyncio.run(PointsProvider(fake_api).load())

    assert snapshot.benefits == []
    assert snapshot.balance.current_balance == 0
    assert snapshot.redemption_config.is_usable is False


def test_load_propagates_expired_session(fake_api) -> None:
    fake_api.fail_with = StorefrontAuthError()
    with pytest.raises(StorefrontAuthError):
        asyncio.run(PointsProvider(fake_api).load())
