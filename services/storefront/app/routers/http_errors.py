from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException

from services.storefront.app.errors import (
    StorefrontAuthError,
    StorefrontNetworkError,
    StorefrontServerRejection,
    StorefrontValidationError,
)


def raise_storefront_http_error(e: Exception, fallback: str = "Request failed") -> NoReturn:
    if isinstance(e, StorefrontValidationError):
        raise HTTPException(status_code=422, detail=str(e)) from e

    if isinstance(e, StorefrontAuthError):
        raise HTTPException(status_code=401, detail=str(e)) from e

    if isinstance(e, StorefrontNetworkError):
        raise HTTPException(status_code=503, detail=str(e)) from e

    if isinstance(e, StorefrontServerRejection):
        raise HTTPException(status_code=502, detail=e.server_message or fallback) from e

    raise HTTPException(status_code=500, detail="Internal Server Error") from e
