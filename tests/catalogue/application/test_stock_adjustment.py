"""Application tests for manual stock adjustments and the movement ledger."""

import pytest
from catalogue.product.product import Product
from catalogue.stock.adjustment import AdjustStock
from catalogue.stock.movement import StockMovement
from catalogue.stock.queries import list_movements
from protean import current_domain
from protean.exceptions import ValidationError


@pytest.fixture()
def product():
    product = Product.create(name="Hydrating Primer", price_cents=25900, stock_qty=3, cost_price_cents=9000)
    current_domain.repository_for(Product).add(product)
    return product


@pytest.fixture()
def variant_product():
    product = Product.create(
        name="Liquid Foundation",
        price_cents=32900,
        variants=[{"label": "Ivory", "stock_qty": 2}, {"label": "Sand", "stock_qty": 5}],
    )
    current_domain.repository_for(Product).add(product)
    return product


def _adjust(product_id, delta, reason="manual_restock", **kwargs):
    command = AdjustStock(product_id=product_id, delta=delta, reason=reason, **kwargs)
    return current_domain.process(command, asynchronous=False)


def _reload(product):
    return current_domain.repository_for(Product).get(str(product.id))


class TestAdjustStock:
    def test_restock_writes_product_and_movement(self, product):
        movement_id = _adjust(str(product.id), 10, note="  Supplier delivery  ")

        movement = current_domain.repository_for(StockMovement).get(movement_id)
        assert _reload(product).stock_qty == 13
        assert (movement.stock_before, movement.stock_after, movement.delta) == (3, 13, 10)
        assert movement.note == "Supplier delivery"
        assert movement.movement_type == "manual"

    def test_going_below_zero_changes_nothing(self, product):
        with pytest.raises(ValidationError):
            _adjust(str(product.id), -5, reason="manual_damage")

        assert _reload(product).stock_qty == 3
        assert list_movements(product_id=str(product.id)) == []

    def test_negative_stock_when_allowed(self, product):
        movement_id = _adjust(str(product.id), -5, reason="manual_correction", allow_negative=True)

        assert _reload(product).stock_qty == -2
        assert current_domain.repository_for(StockMovement).get(movement_id).stock_after == -2

    def test_variant_adjustment(self, variant_product):
        _adjust(str(variant_product.id), -2, reason="manual_damage", variant_index=1)

        reloaded = _reload(variant_product)
        assert [variant.stock_qty for variant in reloaded.sorted_variants] == [2, 3]
        assert reloaded.stock_qty == 5

    def test_zero_delta_is_rejected(self, product):
        with pytest.raises(ValidationError) as exc:
            _adjust(str(product.id), 0)
        assert "delta" in exc.value.messages

    def test_cost_only_change_writes_no_movement(self, product):
        result = _adjust(str(product.id), 0, cost_price_cents=9500)

        assert result is None
        assert _reload(product).cost_price_cents == 9500
        assert list_movements(product_id=str(product.id)) == []

    def test_order_sale_cannot_be_entered_by_hand(self, product):
        with pytest.raises(ValidationError) as exc:
            _adjust(str(product.id), -1, reason="order_sale")
        assert "reason" in exc.value.messages


class TestListMovements:
    def test_filters_by_type(self, product):
        _adjust(str(product.id), 2)

        assert len(list_movements(kind="manual", product_id=str(product.id))) == 1
        assert list_movements(kind="order", product_id=str(product.id)) == []

    def test_limit(self, product):
        for _ in range(3):
            _adjust(str(product.id), 1)

        assert len(list_movements(product_id=str(product.id), limit=2)) == 2

    def test_unknown_filter(self):
        with pytest.raises(ValidationError):
            list_movements(kind="returns")
