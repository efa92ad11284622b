"""Admin API load test scenarios.

Stateful SequentialTaskSet journeys that mirror what the store admin does
during a working day. Steps execute in order; each depends on the previous
one succeeding.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    checkout_payload,
    contact_data,
    coupon_data,
    product_data,
    special_data,
    stock_adjustment,
)
from loadtests.helpers.state import OrderState, ProductState, PromotionState


class StockRestockJourney(SequentialTaskSet):
    """Create product -> activate -> restock -> read the ledger."""

    def on_start(self):
        self.state = ProductState()

    @task
    def create_product(self):
        with self.client.post("/products", json=product_data(), catch_response=True, name="POST /products") as resp:
            if resp.status_code == 201:
                self.state.product_id = resp.json()["product_id"]
            else:
                resp.failure(f"Create product failed: {resp.status_code}")
                self.interrupt()

    @task
    def activate(self):
        with self.client.put(
            f"/products/{self.state.product_id}/activate",
            catch_response=True,
            name="PUT /products/{id}/activate",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Activate failed: {resp.status_code}")

    @task
    def restock(self):
        with self.client.post(
            f"/products/{self.state.product_id}/stock",
            json=stock_adjustment(),
            catch_response=True,
            name="POST /products/{id}/stock",
        ) as resp:
            if resp.status_code == 200:
                self.state.stock_qty = resp.json()["product"]["stock_qty"]
            else:
                resp.failure(f"Restock failed: {resp.status_code}")

    @task
    def read_ledger(self):
        self.client.get(
            f"/stock-movements?filter=manual&product_id={self.state.product_id}",
            name="GET /stock-movements",
        )
        self.interrupt()


class OrderFulfillmentJourney(SequentialTaskSet):
    """Record an order from checkout and walk it to completion."""

    def on_start(self):
        self.state = OrderState(fulfillment_type=random.choice(["delivery", "collection"]))

    @task
    def create_product(self):
        with self.client.post("/products", json=product_data(), catch_response=True, name="POST /products") as resp:
            if resp.status_code == 201:
                self.state.product_ids.append(resp.json()["product_id"])
            else:
                resp.failure(f"Create product failed: {resp.status_code}")
                self.interrupt()

    @task
    def record_order(self):
        payload = checkout_payload(self.state.product_ids, self.state.fulfillment_type)
        with self.client.post("/orders", json=payload, catch_response=True, name="POST /orders") as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["order_id"]
            else:
                resp.failure(f"Record order failed: {resp.status_code}")
                self.interrupt()

    @task
    def advance_to_completion(self):
        for _ in range(4):
            with self.client.put(
                f"/orders/{self.state.order_id}/advance",
                catch_response=True,
                name="PUT /orders/{id}/advance",
            ) as resp:
                if resp.status_code == 200:
                    self.state.status = resp.json()["order"]["status"]
                elif resp.status_code == 400:
                    # Terminal state reached
                    resp.success()
                    break
                else:
                    resp.failure(f"Advance failed: {resp.status_code}")
                    break

    @task
    def archive(self):
        self.client.put(
            f"/orders/{self.state.order_id}/archive",
            json={"archived": True},
            name="PUT /orders/{id}/archive",
        )
        self.interrupt()


class PromotionsJourney(SequentialTaskSet):
    """Create a coupon and a special, then validate and quote against them."""

    def on_start(self):
        self.state = PromotionState()
        self.product_id = None

    @task
    def create_product(self):
        with self.client.post("/products", json=product_data(), catch_response=True, name="POST /products") as resp:
            if resp.status_code == 201:
                self.product_id = resp.json()["product_id"]
            else:
                resp.failure(f"Create product failed: {resp.status_code}")
                self.interrupt()

    @task
    def create_coupon(self):
        payload = coupon_data()
        with self.client.post("/coupons", json=payload, catch_response=True, name="POST /coupons") as resp:
            if resp.status_code == 201:
                self.state.coupon_id = resp.json()["coupon_id"]
                self.state.coupon_code = payload["code"]
            else:
                resp.failure(f"Create coupon failed: {resp.status_code}")
                self.interrupt()

    @task
    def validate_coupon(self):
        self.client.post(
            "/coupons/validate",
            json={
                "code": self.state.coupon_code,
                "lines": [{"product_id": self.product_id, "line_total_cents": random.randint(10000, 90000)}],
            },
            name="POST /coupons/validate",
        )

    @task
    def create_special(self):
        with self.client.post(
            "/specials",
            json=special_data(self.product_id),
            catch_response=True,
            name="POST /specials",
        ) as resp:
            if resp.status_code == 201:
                self.state.special_id = resp.json()["special_id"]
            else:
                resp.failure(f"Create special failed: {resp.status_code}")

    @task
    def quote(self):
        self.client.get(
            f"/specials/quote?base_price_cents=19999&target_id={self.product_id}&kind=product",
            name="GET /specials/quote",
        )
        self.interrupt()


class AdminUser(HttpUser):
    """A store admin mixing catalogue, order and promotion work."""

    wait_time = between(0.5, 2.0)
    tasks = {
        OrderFulfillmentJourney: 5,
        StockRestockJourney: 3,
        PromotionsJourney: 2,
    }

    @task(1)
    def save_contact(self):
        self.client.post("/contacts", json=contact_data(), name="POST /contacts")

    @task(2)
    def browse_orders(self):
        self.client.get("/orders?status=paid", name="GET /orders")
