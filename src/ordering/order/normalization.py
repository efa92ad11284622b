"""Normalise raw checkout payloads into the canonical order shape.

Checkout sources disagree on field names: some send ``total_cents``, others
``total`` in Rand, others only ``price``. This module is the one place that
knows about those variants. Keys ending in ``_cents`` are already integer
cents; bare money keys are Rand and go through ``to_cents``.
"""

from uuid import uuid4

from protean.exceptions import ValidationError
from shared.money import parse_number, to_cents

from ordering.order.workflow import FulfillmentType, OrderStatus

_FULFILLMENT_ALIASES = {
    "delivery": FulfillmentType.DELIVERY,
    "shipping": FulfillmentType.DELIVERY,
    "courier": FulfillmentType.DELIVERY,
    "collection": FulfillmentType.COLLECTION,
    "collect": FulfillmentType.COLLECTION,
    "pickup": FulfillmentType.COLLECTION,
    "pick_up": FulfillmentType.COLLECTION,
}

_STATUS_ALIASES = {
    "pending": OrderStatus.UNPAID,
    "placed": OrderStatus.CREATED,
    "complete": OrderStatus.PAID,
}

_STRUCTURED_KEYS = {
    "street": ("street", "street_address", "line1", "address_line_1"),
    "area": ("area", "local_area", "suburb"),
    "city": ("city", "town"),
    "zone": ("zone", "province", "region"),
    "country": ("country",),
}


def _first(raw: dict, *keys):
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def _text(raw: dict, field: str, *keys: str) -> str | None:
    """First populated scalar among ``keys`` as stripped text."""
    value = _first(raw, *keys)
    if value is None:
        return None
    if isinstance(value, dict | list | bool):
        raise ValidationError({field: [f"Expected text, got {type(value).__name__}"]})
    return str(value).strip() or None


def money_cents(raw: dict, *keys: str) -> int | None:
    """Read the first populated money field among ``keys`` as cents."""
    for key in keys:
        cents = raw.get(f"{key}_cents")
        if cents not in (None, ""):
            return int(round(parse_number(cents, f"{key}_cents")))
        rand = raw.get(key)
        if rand not in (None, ""):
            return to_cents(rand, field=key)
    return None


def _fulfillment_type(raw: dict) -> str:
    value = _first(raw, "fulfillment_type", "delivery_method", "shipping_method")
    if value is None:
        return FulfillmentType.DELIVERY.value
    kind = _FULFILLMENT_ALIASES.get(str(value).strip().lower().replace("-", "_").replace(" ", "_"))
    if kind is None:
        raise ValidationError({"fulfillment_type": [f"Unknown fulfillment type '{value}'"]})
    return kind.value


def _status(raw: dict) -> str:
    value = _first(raw, "status", "payment_status")
    if value is None:
        return OrderStatus.UNPAID.value
    value = str(value).strip().lower()
    if value in _STATUS_ALIASES:
        return _STATUS_ALIASES[value].value
    return value


def _address(raw: dict) -> dict | None:
    value = _first(raw, "address", "shipping_address", "delivery_address", "collection_address")
    if value is None:
        return None
    if isinstance(value, str):
        return {"kind": "freeform", "text": value.strip()}
    if isinstance(value, dict):
        parts = {part: _first(value, *aliases) for part, aliases in _STRUCTURED_KEYS.items()}
        return {"kind": "structured", **parts}
    raise ValidationError({"address": ["Address must be text or an object"]})


def _item(raw_item: dict, index: int) -> dict:
    if not isinstance(raw_item, dict):
        raise ValidationError({"items": [f"Line {index + 1} must be an object, got {raw_item!r}"]})

    product_id = _text(raw_item, "items", "product_id", "id")
    if product_id is None:
        raise ValidationError({"items": [f"Line {index + 1} has no product id"]})

    quantity = _first(raw_item, "quantity", "qty")
    unit_price = money_cents(raw_item, "unit_price", "price")
    variant_index = _first(raw_item, "variant_index")
    return {
        "product_id": product_id,
        "variant_index": int(parse_number(variant_index, "variant_index")) if variant_index is not None else None,
        "name": _text(raw_item, "items", "name", "product_name", "title") or product_id,
        "quantity": int(parse_number(quantity, "quantity")) if quantity is not None else 1,
        "unit_price_cents": unit_price or 0,
    }


def _items(raw: dict) -> list[dict]:
    raw_items = _first(raw, "items", "order_items") or []
    if not isinstance(raw_items, list):
        raise ValidationError({"items": ["Items must be a list of line objects"]})
    return [_item(raw_item, index) for index, raw_item in enumerate(raw_items)]


def normalize_order_payload(raw: dict) -> dict:
    """Return the canonical, cents-denominated order dictionary."""
    if not isinstance(raw, dict):
        raise ValidationError({"order": ["Order payload must be an object"]})

    items = _items(raw)
    line_total = sum(item["quantity"] * item["unit_price_cents"] for item in items)

    subtotal = money_cents(raw, "subtotal")
    if subtotal is None:
        subtotal = line_total
    shipping = money_cents(raw, "shipping", "shipping_fee") or 0
    discount = money_cents(raw, "discount") or 0

    total = money_cents(raw, "total", "price")
    if total is None:
        total = max(0, subtotal + shipping - discount)

    email = _text(raw, "buyer_email", "buyer_email", "customer_email", "email")
    coupon = _text(raw, "coupon_code", "coupon_code", "coupon")

    return {
        "order_number": _text(raw, "order_number", "order_number", "m_payment_id") or f"BL-{uuid4().hex[:8].upper()}",
        "fulfillment_type": _fulfillment_type(raw),
        "status": _status(raw),
        "subtotal_cents": subtotal,
        "shipping_cents": shipping,
        "discount_cents": discount,
        "total_cents": total,
        "buyer_name": _text(raw, "buyer_name", "buyer_name", "customer_name", "name"),
        "buyer_email": email.lower() if email else None,
        "buyer_phone": _text(raw, "buyer_phone", "buyer_phone", "customer_phone", "phone"),
        "address": _address(raw),
        "coupon_code": coupon.upper() if coupon else None,
        "notes": _text(raw, "notes", "notes"),
        "items": items,
    }
