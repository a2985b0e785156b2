from decimal import Decimal

from storefront.data.models import OrderModel, OrderStatus


def place_order(client, headers, cart_id):
    res = client.post("/orders", json={"cart_id": cart_id, "shipping_id": 1, "tax_id": 1}, headers=headers)
    return res.json()["order_id"]


def charge(client, headers, order_id, token="tok_visa"):
    return client.post(
        "/stripe/charge",
        json={"order_id": order_id, "stripeToken": token, "email": "ada@example.com"},
        headers=headers,
    )


def test_charge_settles_order(client, db, sample_cart, auth_headers, gateway, notifications):
    order_id = place_order(client, auth_headers, sample_cart)

    res = charge(client, auth_headers, order_id)

    assert res.status_code == 200
    body = res.json()
    assert body["outcome"] == "paid"
    assert Decimal(body["amount"]) == Decimal("25.30")
    assert gateway.calls[0]["amount_minor_units"] == 2530
    assert notifications.sent == [("ada@example.com", "Ada Obi", order_id)]
    assert db.get(OrderModel, order_id).status == OrderStatus.PAID


def test_client_amount_is_ignored(client, sample_cart, auth_headers, gateway):
    order_id = place_order(client, auth_headers, sample_cart)

    client.post(
        "/stripe/charge",
        json={"order_id": order_id, "stripeToken": "tok_visa", "email": "ada@example.com", "amount": 1},
        headers=auth_headers,
    )

    assert gateway.calls[0]["amount_minor_units"] == 2530


def test_declined_charge(client, db, sample_cart, auth_headers, gateway):
    order_id = place_order(client, auth_headers, sample_cart)
    gateway.configure(should_succeed=False, failure_reason="Your card was declined.")

    res = charge(client, auth_headers, order_id)

    assert res.status_code == 402
    assert "declined" in res.json()["detail"]
    assert db.get(OrderModel, order_id).status == OrderStatus.UNPAID


def test_second_charge_is_a_conflict(client, sample_cart, auth_headers, gateway):
    order_id = place_order(client, auth_headers, sample_cart)

    assert charge(client, auth_headers, order_id).status_code == 200
    assert charge(client, auth_headers, order_id, token="tok_again").status_code == 409
    assert gateway.successful_charges == 1


def test_cannot_pay_for_someone_elses_order(client, sample_cart, auth_headers, token_for, gateway):
    order_id = place_order(client, auth_headers, sample_cart)

    res = charge(client, token_for(2), order_id)

    assert res.status_code == 404
    assert gateway.calls == []


def test_notification_failure_is_reported_as_warning(client, sample_cart, auth_headers, notifications):
    order_id = place_order(client, auth_headers, sample_cart)
    notifications.fail = True

    res = charge(client, auth_headers, order_id)

    assert res.status_code == 200
    assert res.json()["outcome"] == "notification_failed"


def test_unrecorded_charge_returns_accepted(client, sample_cart, auth_headers, monkeypatch):
    from storefront.domain.errors import InternalFailure
    from storefront.services.payment_service import PaymentService

    def store_down(self, *args, **kwargs):
        raise InternalFailure("Store write failed")

    order_id = place_order(client, auth_headers, sample_cart)
    monkeypatch.setattr(PaymentService, "_mark_paid", store_down)

    res = charge(client, auth_headers, order_id)

    assert res.status_code == 202
    assert res.json()["outcome"] == "charged_unrecorded"
    assert res.json()["charge_id"]


def test_pending_charge_returns_accepted(client, db, sample_cart, auth_headers, gateway):
    order_id = place_order(client, auth_headers, sample_cart)
    gateway.configure(should_succeed=True, pending=True)

    res = charge(client, auth_headers, order_id)

    assert res.status_code == 202
    assert res.json()["outcome"] == "charge_pending"
    assert res.json()["charge_id"]
    assert db.get(OrderModel, order_id).status == OrderStatus.CHARGING
