import json

from sqlalchemy import select

from conftest import auth_headers, fetch_all
from services.order_service.models import Order, OrderItem
from services.order_service.schemas import LineItem
from services.order_service.service import compute_total

SHIPPING = {
    "first_name": "Asha",
    "last_name": "Rao",
    "address": "12 Park Street",
    "city": "Pune",
    "state": "MH",
    "zip": "411001",
}

PRODUCTS = [
    {"name": "Whey Protein", "price": 2499.0, "quantity": 2},
    {"name": "Shaker", "price": 199.5, "quantity": 1},
    {"name": "Resistance Band", "price": 349.0, "quantity": 3},
]


def _order(**overrides):
    body = dict(SHIPPING, payment_method="cod", products=PRODUCTS)
    body.update(overrides)
    return body


class TestComputeTotal:

    def test_sum_of_price_times_quantity(self):
        items = [LineItem(**p) for p in PRODUCTS]
        assert compute_total(items) == 2499.0 * 2 + 199.5 * 1 + 349.0 * 3

    def test_free_items_count_as_zero(self):
        items = [LineItem(name="Sticker", price=0, quantity=5)]
        assert compute_total(items) == 0


class TestCreateOrder:

    def test_creates_pending_order(self, client):
        response = client.post("/api/orders", json=_order(), headers=auth_headers(1))

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Order created successfully"

        [order] = fetch_all(select(Order).where(Order.id == body["order_id"]))
        assert order.status == "pending"
        assert order.user_id == 1
        assert order.city == "Pune"

        items = fetch_all(select(OrderItem).where(OrderItem.order_id == order.id).order_by(OrderItem.id))
        assert [(i.name, i.quantity) for i in items] == [(p["name"], p["quantity"]) for p in PRODUCTS]

    def test_client_total_is_ignored(self, client):
        response = client.post("/api/orders", json=_order(total_price=1, totalPrice=1))

        assert response.status_code == 201
        [order] = fetch_all(select(Order).where(Order.id == response.json()["order_id"]))
        assert order.total_price == sum(p["price"] * p["quantity"] for p in PRODUCTS)

    def test_anonymous_checkout_is_allowed(self, client):
        response = client.post("/api/orders", json=_order())

        assert response.status_code == 201
        [order] = fetch_all(select(Order).where(Order.id == response.json()["order_id"]))
        assert order.user_id is None

    def test_empty_products_rejected(self, client):
        response = client.post("/api/orders", json=_order(products=[]))

        assert response.status_code == 400
        assert response.json()["message"] == "Products required"
        assert fetch_all(select(Order)) == []

    def test_missing_products_rejected(self, client):
        body = _order()
        del body["products"]

        response = client.post("/api/orders", json=body)

        assert response.status_code == 400
        assert response.json()["message"] == "Products required"

    def test_invalid_line_item_rejected(self, client):
        response = client.post(
            "/api/orders",
            json=_order(products=[{"name": "Mat", "price": 10, "quantity": 0}]),
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "products.0.quantity"


class TestCardPayments:

    def test_only_last_four_digits_are_kept(self, client):
        card = {"number": "4111 1111 1111 1234", "expiry": "12/29", "brand": "visa", "cvv": "987"}
        response = client.post(
            "/api/orders",
            json=_order(payment_method="Card", card=card),
            headers=auth_headers(5),
        )

        assert response.status_code == 201
        [order] = fetch_all(select(Order).where(Order.id == response.json()["order_id"]))
        assert order.payment_method == "card"
        assert order.card_last4 == "1234"
        assert order.card_expiry == "12/29"
        assert order.card_brand == "visa"

        stored = json.dumps({c.name: getattr(order, c.name) for c in Order.__table__.columns}, default=str)
        assert "4111111111111234" not in stored
        assert "4111 1111 1111 1234" not in stored
        assert "987" not in stored

    def test_card_payment_requires_card_details(self, client):
        response = client.post("/api/orders", json=_order(payment_method="card"))

        assert response.status_code == 400
        assert response.json()["message"] == "Card details required for card payments"

    def test_card_number_must_be_digits(self, client):
        card = {"number": "not-a-card", "expiry": "01/30", "brand": "visa"}
        response = client.post("/api/orders", json=_order(payment_method="card", card=card))

        assert response.status_code == 400

    def test_card_details_ignored_for_other_methods(self, client):
        card = {"number": "5500000000000004", "expiry": "01/30", "brand": "mastercard"}
        response = client.post("/api/orders", json=_order(payment_method="cod", card=card))

        assert response.status_code == 201
        [order] = fetch_all(select(Order).where(Order.id == response.json()["order_id"]))
        assert order.card_last4 is None

    def test_malformed_card_ignored_for_other_methods(self, client):
        card = {"number": "junk", "expiry": "whenever-soon"}
        response = client.post("/api/orders", json=_order(payment_method="cod", card=card))

        assert response.status_code == 201
        [order] = fetch_all(select(Order).where(Order.id == response.json()["order_id"]))
        assert order.card_last4 is None
        assert order.card_expiry is None


class TestMyOrders:

    def test_requires_authentication(self, client):
        response = client.get("/api/orders/mine")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_invalid_token_is_unauthorized(self, client):
        response = client.get("/api/orders/mine", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_lists_only_own_orders_newest_first(self, client):
        first = client.post("/api/orders", json=_order(city="Pune"), headers=auth_headers(1)).json()
        second = client.post("/api/orders", json=_order(city="Goa"), headers=auth_headers(1)).json()
        client.post("/api/orders", json=_order(city="Delhi"), headers=auth_headers(2))

        response = client.get("/api/orders/mine", headers=auth_headers(1))

        assert response.status_code == 200
        orders = response.json()["orders"]
        assert [o["id"] for o in orders] == [second["order_id"], first["order_id"]]
        assert orders[0]["products"][0]["name"] == "Whey Protein"

    def test_new_order_invalidates_cached_list(self, cached_client, redis_store):
        headers = auth_headers(9)
        cached_client.post("/api/orders", json=_order(), headers=headers)

        assert len(cached_client.get("/api/orders/mine", headers=headers).json()["orders"]) == 1
        assert "user:9:orders" in redis_store.store

        cached_client.post("/api/orders", json=_order(), headers=headers)
        assert "user:9:orders" not in redis_store.store

        assert len(cached_client.get("/api/orders/mine", headers=headers).json()["orders"]) == 2

    def test_cached_list_is_served_from_cache(self, cached_client, redis_store):
        redis_store.store["user:4:orders"] = json.dumps([])
        cached_client.post("/api/orders", json=_order(), headers=auth_headers(8))

        response = cached_client.get("/api/orders/mine", headers=auth_headers(4))
        assert response.json() == {"orders": []}

    def test_unreachable_cache_falls_back_to_database(self, cached_client, redis_store):
        headers = auth_headers(3)
        cached_client.post("/api/orders", json=_order(), headers=headers)
        redis_store.fail = True

        response = cached_client.get("/api/orders/mine", headers=headers)

        assert response.status_code == 200
        assert len(response.json()["orders"]) == 1

        assert cached_client.post("/api/orders", json=_order(), headers=headers).status_code == 201

    def test_write_after_cache_outage_still_invalidates(self, cached_client, redis_store):
        headers = auth_headers(12)
        cached_client.post("/api/orders", json=_order(), headers=headers)
        assert len(cached_client.get("/api/orders/mine", headers=headers).json()["orders"]) == 1
        assert "user:12:orders" in redis_store.store

        redis_store.fail = True
        assert cached_client.get("/api/redis/status").status_code == 500
        redis_store.fail = False

        cached_client.post("/api/orders", json=_order(), headers=headers)
        assert "user:12:orders" not in redis_store.store

        assert cached_client.get("/api/redis/status").status_code == 200
        assert len(cached_client.get("/api/orders/mine", headers=headers).json()["orders"]) == 2

    def test_malformed_cached_value_is_treated_as_a_miss(self, cached_client, redis_store):
        headers = auth_headers(13)
        cached_client.post("/api/orders", json=_order(), headers=headers)
        redis_store.store["user:13:orders"] = "not json"

        response = cached_client.get("/api/orders/mine", headers=headers)

        assert response.status_code == 200
        assert len(response.json()["orders"]) == 1
        assert json.loads(redis_store.store["user:13:orders"])[0]["city"] == "Pune"


class TestGetOrder:

    def test_owner_can_read_order(self, client):
        order_id = client.post("/api/orders", json=_order(), headers=auth_headers(1)).json()["order_id"]

        response = client.get(f"/api/orders/{order_id}", headers=auth_headers(1))

        assert response.status_code == 200
        assert response.json()["total_price"] == sum(p["price"] * p["quantity"] for p in PRODUCTS)

    def test_other_users_order_is_not_found(self, client):
        order_id = client.post("/api/orders", json=_order(), headers=auth_headers(1)).json()["order_id"]

        response = client.get(f"/api/orders/{order_id}", headers=auth_headers(2))

        assert response.status_code == 404
        assert response.json()["message"] == "Order not found"
