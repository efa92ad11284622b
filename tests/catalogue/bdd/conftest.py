"""Shared BDD fixtures and step definitions for the Catalogue domain."""

import pytest
from catalogue.product.events import ProductPriceChanged, ProductSaved, ProductStatusChanged
from catalogue.product.product import Product
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup
_PRODUCT_EVENT_CLASSES = {
    "ProductSaved": ProductSaved,
    "ProductPriceChanged": ProductPriceChanged,
    "ProductStatusChanged": ProductStatusChanged,
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a product with {stock:d} in stock"), target_fixture="product")
def stocked_product(stock):
    product = Product.create(name="Tinted Moisturiser", price_cents=27900, stock_qty=stock)
    product._events.clear()
    return product


@given(parsers.cfparse("a product priced at {price:d} cents"), target_fixture="product")
def priced_product(price):
    product = Product.create(name="Tinted Moisturiser", price_cents=price)
    product._events.clear()
    return product


@given("a draft product without images", target_fixture="product")
def imageless_product():
    product = Product.create(name="Tinted Moisturiser", price_cents=27900)
    product._events.clear()
    return product


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the product has {stock:d} in stock"))
def stock_is(product, stock):
    assert product.stock_qty == stock


@then(parsers.cfparse("the product price is {price:d} cents"))
def price_is(product, price):
    assert product.price_cents == price


@then(parsers.cfparse('the product status is "{status}"'))
def status_is(product, status):
    assert product.status == status


@then("the action fails with a validation error")
def action_failed(error):
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} product event is raised"))
def event_raised(product, event_type):
    event_cls = _PRODUCT_EVENT_CLASSES[event_type]
    assert any(isinstance(event, event_cls) for event in product._events)
