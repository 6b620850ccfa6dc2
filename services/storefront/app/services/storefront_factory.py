from __future__ import annotations

import os

from services.storefront.app.services.storefront_base import StorefrontApi
from services.storefront.app.services.storefront_mock import MockStorefrontApi
from services.storefront.app.session import SessionContext


def get_storefront_api(session: SessionContext) -> StorefrontApi:
    """Select the storefront backend based on env vars.

    Defaults to the mock backend so tests and local dev are deterministic unless
    STOREFRONT_API_ADAPTER=http is set.
    """

    mode = os.getenv("STOREFRONT_API_ADAPTER", "mock").strip().lower()

    if mode == "mock":
        return MockStorefrontApi(session)

    if mode == "http":
        from services.storefront.app.services.storefront_http import HttpStorefrontApi

        return HttpStorefrontApi.from_env(session)

    raise ValueError(f"Unknown STOREFRONT_API_ADAPTER={mode!r}. Expected mock or http.")
