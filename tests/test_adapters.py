from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import redis
import stripe

from storefront.domain.errors import UnauthorizedError
from storefront.services import notification_service
from storefront.services.identity import IdentityVerifier
from storefront.services.lock_service import LockService, release_quietly
from storefront.services.mail_service import MailService
from storefront.services.payment_gateway import StripeGateway
from conftest import JWT_TEST_KEY, make_token


# ---------- lock service ----------

@pytest.fixture
def redis_client():
    client = MagicMock()
    with patch("storefront.services.lock_service.redis.Redis.from_url", return_value=client):
        yield client


def test_acquire_uses_set_nx_ex(redis_client):
    redis_client.set.return_value = True

    assert LockService("redis://x").acquire("order:7:settle", "owner-1", 60) is True
    redis_client.set.assert_called_once_with(name="order:7:settle", value="owner-1", nx=True, ex=60)


def test_acquire_taken(redis_client):
    redis_client.set.return_value = None
    assert LockService("redis://x").acquire("order:7:settle", "owner-2", 60) is False


def test_release_is_compare_and_delete(redis_client):
    redis_client.eval.return_value = 1

    assert LockService("redis://x").release("order:7:settle", "owner-1") is True
    script, numkeys, key, owner = redis_client.eval.call_args.args
    assert "DEL" in script and numkeys == 1
    assert (key, owner) == ("order:7:settle", "owner-1")


def test_transient_redis_errors_are_retried(redis_client):
    redis_client.set.side_effect = [redis.ConnectionError("reset"), True]

    with patch("tenacity.nap.time.sleep"):
        assert LockService("redis://x").acquire("cart:c:checkout", "o", 60) is True
    assert redis_client.set.call_count == 2


def test_release_quietly_swallows_redis_outage(redis_client):
    redis_client.eval.side_effect = redis.ConnectionError("down")

    with patch("tenacity.nap.time.sleep"):
        release_quietly(LockService("redis://x"), "cart:c:checkout", "o")

    assert redis_client.eval.call_count == 3


# ---------- identity ----------

def test_verify_token():
    identity = IdentityVerifier(key=JWT_TEST_KEY, algorithm="HS256").verify(make_token(5, name="Kim", email="kim@x.io"))

    assert (identity.customer_id, identity.name, identity.email) == (5, "Kim", "kim@x.io")


def test_verify_wrong_key():
    with pytest.raises(UnauthorizedError):
        IdentityVerifier(key="other", algorithm="HS256").verify(make_token())


def test_verify_expired():
    with pytest.raises(UnauthorizedError, match="expired"):
        IdentityVerifier(key=JWT_TEST_KEY, algorithm="HS256").verify(make_token(expires_in=-5))


# ---------- mail ----------

def test_receipt_mail():
    with patch("storefront.services.mail_service.smtplib.SMTP") as smtp:
        server = smtp.return_value.__enter__.return_value
        MailService(server="smtp.test", port=2525, sender="shop@test", password="pw").send("ada@example.com", "Ada")

    smtp.assert_called_once_with("smtp.test", 2525, timeout=10)
    server.login.assert_called_once_with("shop@test", "pw")
    sender, recipients, body = server.sendmail.call_args.args
    assert recipients == ["ada@example.com"]
    assert "Hey Ada" in body


def test_receipt_mail_errors_propagate():
    with patch("storefront.services.mail_service.smtplib.SMTP", side_effect=OSError("no route")):
        with pytest.raises(OSError):
            MailService(server="smtp.test", port=25, sender="shop@test").send("ada@example.com", "Ada")


# ---------- notifications ----------

def test_receipt_is_queued():
    with patch.object(notification_service, "send_payment_receipt_task") as task:
        notification_service.NotificationService().send_payment_receipt("ada@example.com", "Ada", 7)

    task.delay.assert_called_once_with("ada@example.com", "Ada", 7)


def test_receipt_task_sends_mail():
    with patch.object(notification_service.MailService, "send") as send:
        result = notification_service.send_payment_receipt_task.run("ada@example.com", "Ada", 7)

    send.assert_called_once_with("ada@example.com", "Ada")
    assert result["status"] == "sent"


# ---------- stripe ----------

@pytest.fixture
def stripe_gateway():
    gateway = StripeGateway(api_key="sk_test_123", timeout=5)
    gateway.client = MagicMock()
    return gateway


def charge_with(gateway):
    return gateway.charge(2530, "usd", "Order 7", "tok_visa", "order-7-5f2b9c")


def test_stripe_charge_success(stripe_gateway):
    stripe_gateway.client.v1.charges.create.return_value = SimpleNamespace(
        id="ch_1", status="succeeded", failure_message=None
    )

    result = charge_with(stripe_gateway)

    assert result.success and result.gateway_transaction_id == "ch_1"
    kwargs = stripe_gateway.client.v1.charges.create.call_args.kwargs
    assert kwargs["params"] == {"amount": 2530, "currency": "usd", "description": "Order 7", "source": "tok_visa"}
    assert kwargs["options"] == {"idempotency_key": "order-7-5f2b9c"}


def test_stripe_card_declined(stripe_gateway):
    stripe_gateway.client.v1.charges.create.side_effect = stripe.CardError(
        "Your card was declined.", param=None, code="card_declined"
    )

    result = charge_with(stripe_gateway)

    assert not result.success
    assert result.gateway_status == "declined"


def test_stripe_unreachable(stripe_gateway):
    stripe_gateway.client.v1.charges.create.side_effect = stripe.APIConnectionError("timed out")

    result = charge_with(stripe_gateway)

    assert not result.success
    assert result.gateway_status == "error"


def test_stripe_pending_charge_is_not_a_decline(stripe_gateway):
    stripe_gateway.client.v1.charges.create.return_value = SimpleNamespace(
        id="ch_2", status="pending", failure_message=None
    )

    result = charge_with(stripe_gateway)

    assert not result.success
    assert result.pending
    assert result.gateway_transaction_id == "ch_2"


def test_stripe_reused_key_with_other_card_is_pending(stripe_gateway):
    stripe_gateway.client.v1.charges.create.side_effect = stripe.IdempotencyError(
        "Keys for idempotent requests can only be used with the same parameters"
    )

    result = charge_with(stripe_gateway)

    assert result.pending
    assert result.gateway_status == "idempotency_conflict"
