# storefront/domain/errors.py
"""
Exception taxonomy of the checkout core.

Each error also derives from the builtin the routers already dispatch on
(LookupError, PermissionError, ValueError, RuntimeError), so callers that
only know the builtins still get sensible behaviour.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StorefrontError, LookupError):
    status_code = 404


class UnauthorizedError(StorefrontError, PermissionError):
    status_code = 401


class ValidationFailure(StorefrontError, ValueError):
    status_code = 400


class ConflictError(StorefrontError, RuntimeError):
    status_code = 409


class PaymentFailedError(StorefrontError, RuntimeError):
    """Gateway declined or could not be reached. The order stays unpaid."""

    status_code = 402

    def __init__(self, order_id: int, reason: str):
        super().__init__(f"Payment for order {order_id} failed: {reason}")
        self.order_id = order_id
        self.reason = reason


class InternalFailure(StorefrontError, RuntimeError):
    status_code = 500
