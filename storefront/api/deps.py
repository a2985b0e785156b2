# storefront/api/deps.py
"""
Collaborator handles for the routers.

Each is built once per process (lru_cache) and handed to services through
Depends, tests swap them with app.dependency_overrides.
"""
from functools import lru_cache

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.domain.errors import UnauthorizedError
from storefront.services.identity import Identity, IdentityVerifier
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import PaymentGateway, StripeGateway

_bearer = HTTPBearer(auto_error=False)


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    return StripeGateway()


@lru_cache
def get_notification_service() -> NotificationService:
    return NotificationService()


@lru_cache
def get_identity_verifier() -> IdentityVerifier:
    return IdentityVerifier()


def get_current_customer(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Identity:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Token is missing from header")
    try:
        return verifier.verify(credentials.credentials)
    except UnauthorizedError as e:
        raise HTTPException(status_code=401, detail=e.message)
