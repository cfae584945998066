import base64
import hashlib
import json
from decimal import Decimal
from urllib.parse import unquote

import httpx
import pytest

from cloud_kitchen.services.notifications import FcmClient, get_fcm_client
from cloud_kitchen.services.phonepe import PhonePeClient, get_phonepe_client

SALT_KEY = "test-salt-key"


@pytest.fixture()
def pushes(app):
    """Перехват запросов к FCM."""
    sent = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(json.loads(request.content)["message"])
        return httpx.Response(200, json={"name": "projects/kitchen-test/messages/1"})

    app.dependency_overrides[get_fcm_client] = lambda: FcmClient(
        "kitchen-test", lambda: "access-token", transport=httpx.MockTransport(handler)
    )
    return sent


@pytest.fixture()
def gateway(app):
    """PhonePe: pay отдаёт ссылку, status отвечает state["code"]."""
    state = {"code": "PAYMENT_SUCCESS", "requests": []}

    def handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        if request.url.path.endswith("/pg/v1/pay"):
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "data": {"instrumentResponse": {"redirectInfo": {"url": "https://pay.example/checkout"}}},
                },
            )
        success = state["code"] == "PAYMENT_SUCCESS"
        return httpx.Response(200, json={"success": success, "code": state["code"], "message": "done"})

    app.dependency_overrides[get_phonepe_client] = lambda: PhonePeClient(
        "MERCHANTUAT", SALT_KEY, "1", transport=httpx.MockTransport(handler)
    )
    return state


def _line(dish, **overrides):
    line = {
        "dish_id": dish["id"],
        "variant_id": "regular",
        "quantity": 2,
        "customizations": [{"group_id": "toppings", "option_id": "cheese"}],
    }
    line.update(overrides)
    return line


def _checkout(dish, **overrides):
    body = {
        "items": [_line(dish)],
        "customer_name": "Asha",
        "customer_phone": "9876543210",
        "customer_address": "12 MG Road, Indore",
    }
    body.update(overrides)
    return body


def test_quote_uses_database_prices(client, restaurant, dish):
    r = client.post("/api/cart/quote", json={"items": [_line(dish, price="1.00")]})
    assert r.status_code == 200
    quote = r.json()

    assert quote["item_count"] == 2
    assert Decimal(quote["items"][0]["price"]) == Decimal("210")
    assert Decimal(quote["subtotal"]) == Decimal("420")
    assert Decimal(quote["tax"]) == Decimal("21")
    assert Decimal(quote["total"]) == Decimal("441")


def test_quote_with_coupon(client, restaurant, dish):
    client.post(
        "/api/section-items/",
        json={
            "section_type": "offers",
            "title": "10% off",
            "coupon_code": "SAVE10",
            "discount_type": "percentage",
            "discount_value": "10",
        },
    )
    r = client.post("/api/cart/quote", json={"items": [_line(dish)], "coupon_code": "save10"})
    assert r.status_code == 200
    quote = r.json()
    assert Decimal(quote["discount"]) == Decimal("42")
    assert Decimal(quote["tax"]) == Decimal("18.90")
    assert Decimal(quote["total"]) == Decimal("396.90")
    assert quote["coupon_code"] == "SAVE10"


def test_quote_errors(client, dish):
    r = client.post("/api/cart/quote", json={"items": []})
    assert r.status_code == 400
    assert r.json()["detail"] == "Cart is empty"

    r = client.post("/api/cart/quote", json={"items": [{"dish_id": 999}]})
    assert r.status_code == 400
    assert r.json()["detail"] == "Dish 999 not found"

    r = client.post("/api/cart/quote", json={"items": [{"dish_id": dish["id"]}], "coupon_code": "NOPE"})
    assert r.status_code == 400
    assert "not valid" in r.json()["detail"]


def test_quote_rejects_too_many_options(client, dish):
    options = [{"group_id": "toppings", "option_id": o} for o in ("cheese", "olives", "jalapeno")]
    r = client.post("/api/cart/quote", json={"items": [_line(dish, customizations=options)]})
    assert r.status_code == 400
    assert "at most 2" in r.json()["detail"]


def test_whatsapp_checkout(client, restaurant, dish, pushes):
    client.post("/api/notifications/tokens", json={"token": "admin-device-1"})

    r = client.post("/api/checkout", json=_checkout(dish))
    assert r.status_code == 201
    data = r.json()
    order = data["order"]

    assert order["status"] == "pending"
    assert order["payment_method"] == "cash"
    assert order["order_type"] == "delivery"
    assert order["created_by"] == "customer"
    assert order["customer_phone"] == "9876543210"
    assert Decimal(order["total"]) == Decimal("441")
    assert order["items"][0]["variant_name"] == "Regular"
    assert Decimal(order["items"][0]["original_price"]) == Decimal("230")

    assert data["payment_url"] is None
    assert data["whatsapp_url"].startswith("https://web.whatsapp.com/send?phone=917440440128&text=")
    text = unquote(data["whatsapp_url"].split("text=", 1)[1])
    assert f"Order ID: {order['order_number']}" in text
    assert "*Total Amount: Rs.441.00*" in text

    assert len(pushes) == 1
    assert pushes[0]["token"] == "admin-device-1"
    assert pushes[0]["data"]["orderNumber"] == order["order_number"]


def test_whatsapp_checkout_on_mobile(client, restaurant, dish):
    r = client.post("/api/checkout", json=_checkout(dish), headers={"User-Agent": "Mozilla/5.0 (Linux; Android 14)"})
    assert r.json()["whatsapp_url"].startswith("whatsapp://send?phone=917440440128")


@pytest.mark.parametrize("phone", ["", "12345", "5876543210", "98765432101", "98765abcde"])
def test_checkout_rejects_bad_phone(client, dish, phone):
    r = client.post("/api/checkout", json=_checkout(dish, customer_phone=phone))
    assert r.status_code == 400
    assert client.get("/api/orders/").json() == []


def test_checkout_requires_whatsapp_number(client, dish):
    client.put("/api/restaurant/", json={"name": "No Phone Kitchen"})
    r = client.post("/api/checkout", json=_checkout(dish))
    assert r.status_code == 400
    assert "WhatsApp" in r.json()["detail"]


def test_online_checkout_and_successful_payment(client, restaurant, dish, gateway):
    r = client.post("/api/checkout", json=_checkout(dish, payment_mode="online"))
    assert r.status_code == 201
    data = r.json()
    order = data["order"]

    assert order["status"] == "payment_pending"
    assert order["payment_method"] == "online"
    assert data["payment_url"] == "https://pay.example/checkout"
    assert data["whatsapp_url"] is None

    pay_request = gateway["requests"][0]
    payload = json.loads(base64.b64decode(json.loads(pay_request.content)["request"]))
    assert payload["amount"] == 44100
    assert payload["redirectUrl"].endswith(f"/api/payment/status?order_id={order['id']}")

    r = client.post(
        f"/api/payment/status?order_id={order['id']}",
        data={"merchantId": "MERCHANTUAT", "transactionId": data["transaction_id"], "code": "PAYMENT_SUCCESS"},
        follow_redirects=False,
    )
    assert r.status_code == 303
    assert r.headers["location"] == f"/order-success/{order['id']}"

    paid = client.get(f"/api/orders/{order['id']}").json()
    assert paid["status"] == "pending"
    assert paid["is_paid"] is True
    assert paid["payment_details"]["provider"] == "phonepe"
    assert paid["payment_details"]["transaction_id"] == data["transaction_id"]


def test_failed_payment(client, restaurant, dish, gateway):
    data = client.post("/api/checkout", json=_checkout(dish, payment_mode="online")).json()
    order = data["order"]
    gateway["code"] = "PAYMENT_ERROR"

    r = client.post(
        f"/api/payment/status?order_id={order['id']}",
        data={"transactionId": data["transaction_id"], "code": "PAYMENT_ERROR"},
        follow_redirects=False,
    )
    assert r.status_code == 303
    assert r.headers["location"] == f"/cart?error=payment_failed&orderId={order['id']}"

    failed = client.get(f"/api/orders/{order['id']}").json()
    assert failed["status"] == "payment_failed"
    assert failed["is_paid"] is False
    assert failed["payment_details"]["code"] == "PAYMENT_ERROR"


def test_payment_status_without_transaction(client, gateway):
    r = client.post("/api/payment/status?order_id=1", data={}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/cart"


def test_payment_status_unknown_order(client, gateway):
    r = client.post("/api/payment/status?order_id=999", data={"transactionId": "T1"}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/cart?error=internal_error"


def test_payment_status_keeps_paid_order(client, restaurant, dish, gateway):
    data = client.post("/api/checkout", json=_checkout(dish, payment_mode="online")).json()
    order_id = data["order"]["id"]
    url = f"/api/payment/status?order_id={order_id}"
    client.post(url, data={"transactionId": data["transaction_id"]}, follow_redirects=False)

    gateway["code"] = "PAYMENT_ERROR"
    r = client.post(url, data={"transactionId": "T-other"}, follow_redirects=False)
    assert r.headers["location"] == "/cart?error=internal_error"

    r = client.post(url, data={"transactionId": data["transaction_id"]}, follow_redirects=False)
    assert r.headers["location"] == f"/order-success/{order_id}"

    order = client.get(f"/api/orders/{order_id}").json()
    assert order["status"] == "pending"
    assert order["is_paid"] is True
    assert order["payment_details"]["transaction_id"] == data["transaction_id"]
    # статус у шлюза запрашивался только один раз, до оплаты
    assert sum("/pg/v1/status/" in str(req.url) for req in gateway["requests"]) == 1


def test_payment_status_rejects_foreign_transaction(client, restaurant, dish, gateway):
    data = client.post("/api/checkout", json=_checkout(dish, payment_mode="online")).json()
    order_id = data["order"]["id"]
    gateway["code"] = "PAYMENT_ERROR"

    r = client.post(
        f"/api/payment/status?order_id={order_id}", data={"transactionId": "T-other"}, follow_redirects=False
    )
    assert r.headers["location"] == "/cart?error=internal_error"
    assert client.get(f"/api/orders/{order_id}").json()["status"] == "payment_pending"


def test_initiate_payment(client, gateway):
    order = client.post(
        "/api/orders/", json={"items": [{"dish_id": 1, "dish_name": "Thali", "price": "150"}]}
    ).json()

    r = client.post(
        "/api/payment/initiate",
        json={"amount": "150", "order_id": order["id"], "user_id": "u1", "phone": "9876543210"},
    )
    assert r.status_code == 200
    assert r.json()["url"] == "https://pay.example/checkout"
    assert r.json()["transaction_id"].startswith("T")

    r = client.post("/api/payment/initiate", json={"amount": "150", "order_id": 999, "user_id": "u1"})
    assert r.status_code == 404
    r = client.post("/api/payment/initiate", json={"amount": "0", "order_id": order["id"], "user_id": "u1"})
    assert r.status_code == 422


def test_gateway_failure_is_502(client, restaurant, dish, app):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "message": "Merchant not active"})

    app.dependency_overrides[get_phonepe_client] = lambda: PhonePeClient(
        "MERCHANTUAT", SALT_KEY, "1", transport=httpx.MockTransport(handler)
    )
    r = client.post("/api/checkout", json=_checkout(dish, payment_mode="online"))
    assert r.status_code == 502
    assert r.json()["detail"] == "Merchant not active"


def _signed_callback(payload):
    encoded = base64.b64encode(json.dumps(payload).encode()).decode()
    return encoded, hashlib.sha256((encoded + SALT_KEY).encode()).hexdigest() + "###1"


def test_payment_callback_marks_order_paid(client, restaurant, dish, gateway):
    data = client.post("/api/checkout", json=_checkout(dish, payment_mode="online")).json()
    encoded, x_verify = _signed_callback(
        {"success": True, "code": "PAYMENT_SUCCESS", "data": {"merchantTransactionId": data["transaction_id"]}}
    )

    r = client.post("/api/payment/callback", json={"response": encoded}, headers={"X-VERIFY": x_verify})
    assert r.status_code == 200
    assert r.json() == {"success": True}

    order = client.get(f"/api/orders/{data['order']['id']}").json()
    assert order["is_paid"] is True
    assert order["status"] == "pending"


def test_payment_callback_rejects_bad_signature(client):
    encoded, _ = _signed_callback({"success": True, "code": "PAYMENT_SUCCESS", "data": {}})
    r = client.post("/api/payment/callback", json={"response": encoded}, headers={"X-VERIFY": "bad###1"})
    assert r.status_code == 400
