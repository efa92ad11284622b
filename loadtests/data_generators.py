"""Faker-based data generators for Locust load test scenarios.

Each generator produces a payload that passes the admin API's validation
rules and uses the field names of its request schema (or, for orders, the
raw checkout payload the normaliser accepts).
"""

import random
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

fake = Faker("en_US")

SHADES = ["Rosewood", "Berry", "Nude", "Coral", "Plum", "Ivory", "Sand", "Mocha"]
CATEGORIES = ["lips", "eyes", "face", "skincare", "nails"]


def product_data(with_variants: bool = False) -> dict:
    name = f"{fake.word().title()} {random.choice(['Lipstick', 'Serum', 'Palette', 'Primer', 'Gloss'])}"
    price_cents = random.randint(50, 900) * 100 - 1
    payload = {
        "name": f"{name} {uuid.uuid4().hex[:4]}",
        "sku": f"LT-{uuid.uuid4().hex[:8].upper()}",
        "category": random.choice(CATEGORIES),
        "description": fake.sentence(nb_words=12),
        "price_cents": price_cents,
        "cost_price_cents": price_cents // 3,
        "stock_qty": random.randint(5, 80),
        "image_urls": [f"https://cdn.example.com/{uuid.uuid4().hex[:10]}.jpg"],
    }
    if with_variants:
        payload["variants"] = [
            {"label": shade, "stock_qty": random.randint(0, 30)} for shade in random.sample(SHADES, 3)
        ]
    return payload


def stock_adjustment() -> dict:
    return {
        "delta": random.randint(1, 24),
        "reason": "manual_restock",
        "note": f"Delivery {fake.bothify('INV-####')}",
    }


def checkout_payload(product_ids: list[str], fulfillment_type: str = "delivery") -> dict:
    """A raw checkout payload, mixing Rand and cents keys like the storefront does."""
    items = [
        {
            "product_id": product_id,
            "name": fake.word().title(),
            "quantity": random.randint(1, 3),
            "unit_price": round(random.uniform(50, 600), 2),
        }
        for product_id in product_ids
    ]
    payload = {
        "order_number": f"BL-LT{uuid.uuid4().hex[:8].upper()}",
        "fulfillment_type": fulfillment_type,
        "status": "unpaid",
        "buyer_name": fake.name(),
        "buyer_email": fake.email(),
        "buyer_phone": fake.msisdn()[:12],
        "items": items,
        "shipping": 0 if fulfillment_type == "collection" else 99.0,
    }
    if fulfillment_type == "delivery":
        payload["shipping_address"] = {
            "street_address": fake.street_address(),
            "local_area": fake.city_suffix(),
            "city": fake.city(),
            "zone": random.choice(["Gauteng", "Western Cape", "KwaZulu-Natal"]),
            "country": "ZA",
        }
    return payload


def coupon_data() -> dict:
    now = datetime.now(UTC)
    if random.random() < 0.5:
        kind = {"type": "percentage", "value": random.choice([5, 10, 15, 20]), "max_discount": 150.0}
    else:
        kind = {"type": "fixed", "value": random.choice([25, 50, 100])}
    return {
        "code": f"LT{uuid.uuid4().hex[:6].upper()}",
        **kind,
        "min_spend": random.choice([0, 200, 500]),
        "max_uses": random.randint(5, 50),
        "valid_from": (now - timedelta(days=1)).isoformat(),
        "valid_until": (now + timedelta(days=30)).isoformat(),
    }


def special_data(product_id: str) -> dict:
    now = datetime.now(UTC)
    return {
        "title": f"{fake.word().title()} week",
        "scope": "product",
        "target_ids": [product_id],
        "discount_type": random.choice(["percent", "amount_off"]),
        "discount_value": random.choice([10, 15, 25]),
        "starts_at": (now - timedelta(hours=1)).isoformat(),
        "ends_at": (now + timedelta(days=7)).isoformat(),
    }


def contact_data() -> dict:
    return {
        "name": fake.name(),
        "email": f"{fake.user_name()}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}",
        "phone": fake.msisdn()[:12],
        "source": random.choice(["manual", "contact_form", "newsletter", "checkout"]),
        "notes": fake.sentence(),
    }
