"""
Cart Tools

Add, remove and clear cart items through the injected CartStore, so the
assistant and the UI share one cart.

Author: TM3
Date: 2026-10-16
"""
import logging
from typing import Optional

from shopassist.core.exceptions import ToolValidationError, error_kind_for
from shopassist.domain.cart import CartItem
from shopassist.domain.product import Product
from shopassist.domain.results import CartResult
from shopassist.services.formatting import plural
from shopassist.services.tool_context import ToolContext
from shopassist.state import cart_store

logger = logging.getLogger(__name__)


async def add_to_cart(
    ctx: ToolContext,
    product_id: Optional[str] = None,
    quantity: int = 1,
    user_id: Optional[str] = None
) -> CartResult:
    """
    Add a product to the cart, or raise the quantity of an existing line.

    Args:
        product_id: Product to add
        quantity: Units to add (positive integer)
        user_id: Optional owner for user-specific carts

    Returns:
        CartResult with the updated cart
    """
    try:
        if not product_id:
            raise ToolValidationError("Product ID is required")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ToolValidationError("Quantity must be a positive integer")

        product = Product.model_validate(await ctx.connector.get_product(product_id))

        if product.count_in_stock < quantity:
            raise ToolValidationError(f"Insufficient stock. Only {product.count_in_stock} items available")

        existing = ctx.cart_store.get_state().find(product.id or product_id)
        item = CartItem.model_validate({
            **product.model_dump(by_alias=True),
            "_id": product.id or product_id,
            "qty": existing.qty + quantity if existing else quantity,
            "userId": user_id,
        })

        cart = ctx.cart_store.dispatch(cart_store.add_to_cart(item))

        action = "updated" if existing else "added"
        return CartResult(
            success=True,
            cart=cart,
            product=item,
            cart_items_count=cart.items_count,
            cart_total=cart.total_price,
            message=(
                f'Successfully {action} "{product.name}" to cart. Quantity: {item.qty}. '
                f"Total items in cart: {cart.items_count}"
            )
        )

    except Exception as e:
        logger.error(f"Error in add_to_cart tool: {e}")
        return CartResult(
            success=False,
            message=f"Error adding to cart: {e}",
            error_kind=error_kind_for(e)
        )


async def remove_from_cart(ctx: ToolContext, product_id: Optional[str] = None) -> CartResult:
    """Remove a product line from the cart"""
    try:
        if not product_id:
            raise ToolValidationError("Product ID is required")

        item = ctx.cart_store.get_state().find(product_id)
        if not item:
            raise ToolValidationError("Item not found in cart")

        cart = ctx.cart_store.dispatch(cart_store.remove_from_cart(product_id))

        return CartResult(
            success=True,
            cart=cart,
            cart_items_count=cart.items_count,
            cart_total=cart.total_price,
            message=f'Successfully removed "{item.name}" from cart'
        )

    except Exception as e:
        logger.error(f"Error in remove_from_cart tool: {e}")
        return CartResult(
            success=False,
            message=f"Error removing from cart: {e}",
            error_kind=error_kind_for(e)
        )


async def clear_cart(ctx: ToolContext) -> CartResult:
    """Empty the cart. Clearing an empty cart dispatches nothing."""
    try:
        current = ctx.cart_store.get_state()
        items_count = current.items_count

        if items_count == 0:
            return CartResult(
                success=True,
                cart=current,
                cart_items_count=0,
                cart_total="0.00",
                message="Cart is already empty"
            )

        cart = ctx.cart_store.dispatch(cart_store.clear_cart_items())

        return CartResult(
            success=True,
            cart=cart,
            cart_items_count=0,
            cart_total="0.00",
            message=f"Successfully cleared {plural(items_count, 'item')} from cart"
        )

    except Exception as e:
        logger.error(f"Error in clear_cart tool: {e}")
        return CartResult(
            success=False,
            message=f"Error clearing cart: {e}",
            error_kind=error_kind_for(e)
        )
