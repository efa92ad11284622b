"""Application tests for bulk price updates."""

import json

import pytest
from catalogue.product.price_updates import BulkUpdatePrices
from catalogue.product.product import Product
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


@pytest.fixture()
def products():
    repo = current_domain.repository_for(Product)
    created = [
        Product.create(name="Cleanser", price_cents=10000),
        Product.create(name="Toner", price_cents=100),
    ]
    for product in created:
        repo.add(product)
    return created


def _bulk(product_ids, adjustment_type, value, preview=False):
    command = BulkUpdatePrices(
        product_ids=json.dumps(product_ids),
        adjustment_type=adjustment_type,
        value=value,
        preview=preview,
    )
    return current_domain.process(command, asynchronous=False)


def _price(product):
    return current_domain.repository_for(Product).get(str(product.id)).price_cents


class TestBulkUpdatePrices:
    def test_preview_does_not_persist(self, products):
        plan = _bulk([str(product.id) for product in products], "percent", 10, preview=True)

        assert [(change.old_price_cents, change.new_price_cents) for change in plan] == [(10000, 11000), (100, 110)]
        assert [_price(product) for product in products] == [10000, 100]

    def test_apply_persists(self, products):
        _bulk([str(product.id) for product in products], "decrease", 50.0)

        assert [_price(product) for product in products] == [5000, 1]

    def test_duplicate_ids_are_planned_once(self, products):
        product_id = str(products[0].id)
        plan = _bulk([product_id, product_id], "set", 99.99, preview=True)
        assert len(plan) == 1

    def test_unchanged_prices_are_flagged(self, products):
        plan = _bulk([str(products[0].id)], "set", 100, preview=True)
        assert plan[0].changed is False

    def test_empty_selection_is_rejected(self):
        with pytest.raises(ValidationError):
            _bulk([], "percent", 5)

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            _bulk(["missing"], "percent", 5)
