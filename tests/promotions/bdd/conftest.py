"""Shared BDD fixtures and step definitions for the Promotions domain."""

from datetime import UTC, datetime, timedelta

import pytest
from promotions.coupon.coupon import CartLine, Coupon
from pytest_bdd import given, parsers, then


@pytest.fixture()
def cart():
    """Cart lines collected by Given steps."""
    return []


@given(parsers.cfparse('a {value:g}% coupon "{code}" excluding "{product_id}"'), target_fixture="coupon")
def percent_coupon_with_exclusion(value, code, product_id):
    return Coupon.create(
        code=code,
        type="percentage",
        value=value,
        max_uses=10,
        excluded_product_ids=[product_id],
        valid_from=datetime.now(UTC) - timedelta(days=1),
    )


@given(
    parsers.cfparse('a R{value:g} coupon "{code}" with a minimum spend of {min_cents:d} cents'),
    target_fixture="coupon",
)
def fixed_coupon_with_minimum(value, code, min_cents):
    return Coupon.create(
        code=code,
        type="fixed",
        value=value,
        max_uses=10,
        min_order_cents=min_cents,
        valid_from=datetime.now(UTC) - timedelta(days=1),
    )


@given(parsers.cfparse('the cart holds "{product_id}" worth {cents:d} cents'))
def cart_line(cart, product_id, cents):
    cart.append(CartLine(product_id=product_id, line_total_cents=cents))


@then(parsers.cfparse("the discount is {cents:d} cents"))
def discount_is(quote, cents):
    assert quote.discount_cents == cents


@then(parsers.cfparse('the coupon is refused with "{reason}"'))
def refused(quote, reason):
    assert quote.applicable is False
    assert quote.reason == reason
