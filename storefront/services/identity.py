# storefront/services/identity.py
from dataclasses import dataclass

import jwt

from storefront.domain.errors import UnauthorizedError
from storefront.utils.settings import JWT_KEY, JWT_ALGORITHM


@dataclass(frozen=True)
class Identity:
    customer_id: int
    name: str
    email: str


class IdentityVerifier:
    """
    Bearer token -> customer. Tokens are issued by the customer service,
    here they are only verified.
    """

    def __init__(self, key: str | None = None, algorithm: str | None = None):
        self.key = key or JWT_KEY
        self.algorithm = algorithm or JWT_ALGORITHM

    def verify(self, token: str) -> Identity:
        try:
            claims = jwt.decode(token, self.key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise UnauthorizedError("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise UnauthorizedError("Token either missing or incorrect") from e

        if "customer_id" not in claims:
            raise UnauthorizedError("Token has no customer")

        return Identity(
            customer_id=int(claims["customer_id"]),
            name=claims.get("name", ""),
            email=claims.get("email", ""),
        )
