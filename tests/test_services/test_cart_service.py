"""
Unit tests for cart tools

Author: TM3
Date: 2026-10-17
"""
from unittest.mock import patch

import pytest

from shopassist.services.cart_service import add_to_cart, clear_cart, remove_from_cart
from shopassist.state.cart_store import CART_KEY


class TestAddToCart:
    """Test add_to_cart"""

    @pytest.mark.asyncio
    async def test_adds_new_line(self, ctx, storage):
        result = await add_to_cart(ctx, product_id="p1", quantity=2)

        assert result.success is True
        assert result.message == (
            'Successfully added "Airpods Wireless Bluetooth Headphones" to cart. Quantity: 2. Total items in cart: 1'
        )
        assert result.cart_items_count == 1
        assert result.cart_total == "206.98"
        assert storage.get_json(CART_KEY)["cartItems"][0]["qty"] == 2

    @pytest.mark.asyncio
    async def test_existing_line_accumulates(self, ctx):
        await add_to_cart(ctx, product_id="p1", quantity=2)

        result = await add_to_cart(ctx, product_id="p1", quantity=3)

        assert result.success is True
        assert result.product.qty == 5
        assert result.cart_items_count == 1
        assert result.message.startswith('Successfully updated "Airpods Wireless Bluetooth Headphones"')

    @pytest.mark.asyncio
    async def test_user_id_is_recorded(self, ctx):
        result = await add_to_cart(ctx, product_id="p2", user_id="u1")

        assert result.to_dict()["product"]["userId"] == "u1"

    @pytest.mark.asyncio
    async def test_insufficient_stock(self, ctx):
        result = await add_to_cart(ctx, product_id="p2", quantity=8)

        assert result.success is False
        assert result.message == "Error adding to cart: Insufficient stock. Only 7 items available"
        assert result.error_kind == "validation"
        assert ctx.cart_store.get_state().items_count == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True, "2"])
    async def test_rejects_bad_quantity_before_fetch(self, ctx, storefront, quantity):
        result = await add_to_cart(ctx, product_id="p1", quantity=quantity)

        assert result.success is False
        assert result.error_kind == "validation"
        assert storefront.requests == []

    @pytest.mark.asyncio
    async def test_missing_product_id(self, ctx):
        result = await add_to_cart(ctx)

        assert result.message == "Error adding to cart: Product ID is required"

    @pytest.mark.asyncio
    async def test_unknown_product(self, ctx):
        result = await add_to_cart(ctx, product_id="nope")

        assert result.success is False
        assert result.error_kind == "not_found"
        assert result.cart_items_count == 0
        assert result.cart_total == "0.00"


class TestRemoveFromCart:
    """Test remove_from_cart"""

    @pytest.mark.asyncio
    async def test_removes_line(self, ctx):
        await add_to_cart(ctx, product_id="p1")
        await add_to_cart(ctx, product_id="p2")

        result = await remove_from_cart(ctx, product_id="p1")

        assert result.success is True
        assert result.message == 'Successfully removed "Airpods Wireless Bluetooth Headphones" from cart'
        assert result.cart_items_count == 1

    @pytest.mark.asyncio
    async def test_not_in_cart(self, ctx):
        result = await remove_from_cart(ctx, product_id="p1")

        assert result.success is False
        assert result.message == "Error removing from cart: Item not found in cart"


class TestClearCart:
    """Test clear_cart"""

    @pytest.mark.asyncio
    async def test_clear_twice(self, ctx):
        await add_to_cart(ctx, product_id="p1")
        await add_to_cart(ctx, product_id="p2")

        first = await clear_cart(ctx)

        with patch.object(ctx.cart_store, "dispatch", wraps=ctx.cart_store.dispatch) as dispatch:
            second = await clear_cart(ctx)

        assert first.success is True
        assert first.cart_items_count == 0
        assert first.message == "Successfully cleared 2 items from cart"
        assert second.success is True
        assert second.cart_items_count == 0
        assert second.message == "Cart is already empty"
        dispatch.assert_not_called()
