"""Tests for the Bundle aggregate."""

import pytest
from catalogue.bundle.bundle import Bundle, BundleSaved
from catalogue.product.product import ProductStatus
from protean.exceptions import ValidationError


class TestBundle:
    def test_duplicate_products_are_merged(self):
        bundle = Bundle.create(
            name="Glow Kit",
            price_cents=49900,
            items=[{"product_id": "p1", "quantity": 1}, {"product_id": "p2"}, {"product_id": "p1", "quantity": 2}],
        )
        assert sorted(bundle.components) == [("p1", 3), ("p2", 1)]
        assert bundle.slug == "glow-kit"
        assert isinstance(bundle._events[-1], BundleSaved)

    def test_needs_at_least_one_item(self):
        with pytest.raises(ValidationError) as exc:
            Bundle.create(name="Empty", price_cents=100, items=[])
        assert "items" in exc.value.messages

    def test_revise_replaces_items(self):
        bundle = Bundle.create(name="Glow Kit", price_cents=49900, items=[{"product_id": "p1"}])
        bundle.revise(items=[{"product_id": "p3", "quantity": 2}], price_cents=45000)
        assert bundle.components == [("p3", 2)]
        assert bundle.price_cents == 45000

    def test_change_status(self):
        bundle = Bundle.create(name="Glow Kit", price_cents=49900, items=[{"product_id": "p1"}])
        bundle.change_status(ProductStatus.ARCHIVED)
        assert bundle.status == "archived"
