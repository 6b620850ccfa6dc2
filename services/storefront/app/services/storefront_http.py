from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from packages.shared.schemas.cart_v1 import (
    AddCartItemRequestV1,
    LineItemV1,
    UpdateCartItemRequestV1,
)
from packages.shared.schemas.order_v1 import OrderCreatedV1, OrderRequestV1, PaymentMethodV1
from packages.shared.schemas.points_v1 import BenefitV1, PointsBalanceV1, RedemptionConfigV1
from services.storefront.app.errors import (
    StorefrontAuthError,
    StorefrontNetworkError,
    StorefrontServerRejection,
)
from services.storefront.app.session import SessionContext

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class _HttpConfig:
    base_url: str
    timeout_s: float

    @classmethod
    def from_env(cls) -> "_HttpConfig":
        base_url = os.getenv("STOREFRONT_API_BASE_URL", "https://localhost:7193/api").rstrip("/")
        timeout_s = float(os.getenv("STOREFRONT_API_TIMEOUT_S", "15"))
        return cls(base_url=base_url, timeout_s=timeout_s)


class HttpStorefrontApi:
    """Storefront backend over REST.

    Timeouts come from the httpx client; nothing here retries. A failed call is
    reported once and the caller decides whether the user retries.
    """

    vendor = "STOREFRONT_HTTP"

    def __init__(
        self,
        session: SessionContext,
        *,
        base_url: str,
        timeout_s: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_s,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_env(cls, session: SessionContext) -> "HttpStorefrontApi":
        config = _HttpConfig.from_env()
        return cls(session, base_url=config.base_url, timeout_s=config.timeout_s)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_cart(self) -> list[LineItemV1]:
        payload = await self._request("GET", "/cart")
        return [_parse(LineItemV1, row) for row in _unwrap_list(payload)]

    async def add_cart_item(self, item: LineItemV1, quantity: int) -> LineItemV1 | None:
        body = AddCartItemRequestV1.from_line_item(item, quantity)
        payload = await self._request("POST", "/cart/items", json=_dump(body))
        if not isinstance(payload, dict):
            return None
        return _parse(LineItemV1, payload)

    async def update_cart_item(self, product_id: int, quantity: int) -> None:
        body = UpdateCartItemRequestV1(quantity=quantity)
        await self._request("PUT", f"/cart/items/{product_id}", json=_dump(body))

    async def remove_cart_item(self, product_id: int) -> None:
        await self._request("DELETE", f"/cart/items/{product_id}")

    async def clear_cart(self) -> None:
        await self._request("DELETE", "/cart")

    async def get_redemption_config(self) -> RedemptionConfigV1:
        payload = await self._request("GET", "/points/redemption-config", authenticated=False)
        return _parse(RedemptionConfigV1, payload or {})

    async def get_points_balance(self) -> PointsBalanceV1:
        payload = await self._request("GET", "/points/my-balance")
        return _parse(PointsBalanceV1, payload or {})

    async def get_benefits(self) -> list[BenefitV1]:
        payload = await self._request("GET", "/points/my-benefits")
        benefits: list[BenefitV1] = []
        for row in _unwrap_list(payload, key="benefits"):
            try:
                benefits.append(BenefitV1.model_validate(row))
            except ValidationError as e:
                logger.warning("Skipping unreadable benefit %r: %s", row, e)
        return benefits

    async def get_payment_methods(self) -> list[PaymentMethodV1]:
        payload = await self._request("GET", "/payment-methods", authenticated=False)
        return [_parse(PaymentMethodV1, row) for row in _unwrap_list(payload)]

    async def create_order(self, order: OrderRequestV1) -> OrderCreatedV1:
        payload = await self._request("POST", "/orders", json=_dump(order))
        return _parse(OrderCreatedV1, payload)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        authenticated: bool = True,
    ) -> Any:
        headers = self._session.auth_headers() if authenticated else {}
        if authenticated and not headers:
            raise StorefrontAuthError()

        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise StorefrontNetworkError(f"Could not reach the storefront: {e}") from e

        if response.status_code == 401:
            raise StorefrontAuthError()

        if response.is_error:
            logger.info("%s %s rejected with HTTP %s", method, path, response.status_code)
            raise StorefrontServerRejection(response.status_code, _plain_message(response))

        if response.status_code == 204 or not response.content:
            return None
        return response.json()


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _parse(model: type[_ModelT], payload: Any) -> _ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.warning("Unexpected %s response shape: %r", model.__name__, payload)
        raise StorefrontServerRejection(502) from e


def _unwrap_list(payload: Any, key: str | None = None) -> list[Any]:
    # ASP.NET reference-preserving serialisation wraps arrays as {"$values": [...]}.
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        if "$values" in payload:
            return _unwrap_list(payload["$values"])
        if key is not None and key in payload:
            return _unwrap_list(payload[key])
    return []


def _plain_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        if response.headers.get("content-type", "").startswith("text/plain"):
            return response.text.strip() or None
        return None

    if isinstance(body, str):
        return body.strip() or None
    return None
