# storefront/services/payment_gateway.py
"""
Payment gateway port and adapters.

PaymentGateway is what the settlement flow talks to. StripeGateway charges a
card token through Stripe, FakeGateway records calls and answers from its
configuration (dev and tests).
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import uuid4

import stripe

from storefront.utils.settings import STRIPE_SECRET_KEY, STRIPE_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChargeResult:
    success: bool
    gateway_transaction_id: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None
    # money may have moved, the outcome is not known yet
    pending: bool = False


class PaymentGateway(ABC):
    @abstractmethod
    def charge(
        self,
        amount_minor_units: int,
        currency: str,
        description: str,
        source_token: str,
        idempotency_key: str,
    ) -> ChargeResult:
        """Charge amount (cents) against a card token. Never raises for declines."""
        ...


class StripeGateway(PaymentGateway):
    def __init__(self, api_key: str | None = None, timeout: int | None = None):
        # no silent network retries, a timeout is reported as a failed charge
        self.client = stripe.StripeClient(
            api_key or STRIPE_SECRET_KEY,
            http_client=stripe.RequestsClient(timeout=timeout or STRIPE_TIMEOUT_SECONDS),
            max_network_retries=0,
        )

    def charge(
        self,
        amount_minor_units: int,
        currency: str,
        description: str,
        source_token: str,
        idempotency_key: str,
    ) -> ChargeResult:
        logger.info(f"Stripe charge {amount_minor_units} {currency} key={idempotency_key}")
        try:
            charge = self.client.v1.charges.create(
                params={
                    "amount": amount_minor_units,
                    "currency": currency,
                    "description": description,
                    "source": source_token,
                },
                options={"idempotency_key": idempotency_key},
            )
        except stripe.IdempotencyError as e:
            # the key was used before with other parameters, that charge stands
            logger.error(f"Stripe idempotency conflict for {idempotency_key}: {e}")
            return ChargeResult(
                success=False,
                gateway_status="idempotency_conflict",
                failure_reason=str(e),
                pending=True,
            )
        except stripe.CardError as e:
            logger.warning(f"Card declined: {e.user_message}")
            return ChargeResult(
                success=False,
                gateway_status="declined",
                failure_reason=e.user_message or str(e),
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe unavailable: {e}")
            return ChargeResult(
                success=False,
                gateway_status="error",
                failure_reason=str(e),
            )

        if charge.status == "pending":
            return ChargeResult(
                success=False,
                gateway_transaction_id=charge.id,
                gateway_status=charge.status,
                failure_reason="Charge pending",
                pending=True,
            )

        if charge.status != "succeeded":
            return ChargeResult(
                success=False,
                gateway_transaction_id=charge.id,
                gateway_status=charge.status,
                failure_reason=charge.failure_message or f"Charge {charge.status}",
            )

        return ChargeResult(
            success=True,
            gateway_transaction_id=charge.id,
            gateway_status=charge.status,
        )


class FakeGateway(PaymentGateway):
    """
    Succeeds, declines or leaves the charge pending, as configured. A known
    idempotency key returns the first result again, like Stripe does, and a
    known key with another card token is an idempotency conflict.
    """

    def __init__(self):
        self.should_succeed = True
        self.pending = False
        self.failure_reason = "Your card was declined."
        self.calls: list[dict] = []
        self._by_key: dict[str, tuple[str, ChargeResult]] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Your card was declined.", pending: bool = False):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.pending = pending

    @property
    def successful_charges(self) -> int:
        return len({k for k, (_, r) in self._by_key.items() if r.success})

    def charge(
        self,
        amount_minor_units: int,
        currency: str,
        description: str,
        source_token: str,
        idempotency_key: str,
    ) -> ChargeResult:
        self.calls.append(
            {
                "amount_minor_units": amount_minor_units,
                "currency": currency,
                "description": description,
                "source_token": source_token,
                "idempotency_key": idempotency_key,
            }
        )

        if idempotency_key in self._by_key:
            source, result = self._by_key[idempotency_key]
            if source != source_token:
                return ChargeResult(
                    success=False,
                    gateway_status="idempotency_conflict",
                    failure_reason="Keys for idempotent requests can only be used with the same parameters",
                    pending=True,
                )
            return result

        if self.pending:
            result = ChargeResult(
                success=False,
                gateway_transaction_id=f"ch_fake_{uuid4().hex[:12]}",
                gateway_status="pending",
                failure_reason="Charge pending",
                pending=True,
            )
        elif self.should_succeed:
            result = ChargeResult(
                success=True,
                gateway_transaction_id=f"ch_fake_{uuid4().hex[:12]}",
                gateway_status="succeeded",
            )
        else:
            result = ChargeResult(
                success=False,
                gateway_status="declined",
                failure_reason=self.failure_reason,
            )

        self._by_key[idempotency_key] = (source_token, result)
        return result
