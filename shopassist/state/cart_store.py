"""
Cart Store

Owns the shopper's cart and exposes a read/dispatch interface:
``get_state()`` returns the current cart, ``dispatch(action)`` applies one
of the cart actions below. Every change is written back to client storage
under the ``cart`` key so the context readers see the same blob.

Tools receive the store through ToolContext; nothing imports a global
instance.

Author: TM3
Date: 2026-10-15
"""
import logging
from typing import Any, Dict

from pydantic import ValidationError

from shopassist.core.exceptions import LocalStateError
from shopassist.domain.cart import Cart, CartItem
from shopassist.state.storage import ClientStorage

logger = logging.getLogger(__name__)

CART_KEY = "cart"

ADD_TO_CART = "cart/addToCart"
REMOVE_FROM_CART = "cart/removeFromCart"
CLEAR_CART_ITEMS = "cart/clearCartItems"


# ============================================================================
# ACTION CREATORS
# ============================================================================

def add_to_cart(item: CartItem) -> Dict[str, Any]:
    return {"type": ADD_TO_CART, "payload": item}


def remove_from_cart(product_id: str) -> Dict[str, Any]:
    return {"type": REMOVE_FROM_CART, "payload": product_id}


def clear_cart_items() -> Dict[str, Any]:
    return {"type": CLEAR_CART_ITEMS}


# ============================================================================
# REDUCER
# ============================================================================

def cart_reducer(cart: Cart, action: Dict[str, Any]) -> Cart:
    """Return the cart after ``action``; unknown actions leave it unchanged"""
    action_type = action.get("type")

    if action_type == ADD_TO_CART:
        item: CartItem = action["payload"]
        if cart.find(item.id):
            items = [item if existing.id == item.id else existing for existing in cart.cart_items]
        else:
            items = [*cart.cart_items, item]
        return cart.model_copy(update={"cart_items": items}).with_prices()

    if action_type == REMOVE_FROM_CART:
        product_id = action["payload"]
        items = [existing for existing in cart.cart_items if existing.id != product_id]
        return cart.model_copy(update={"cart_items": items}).with_prices()

    if action_type == CLEAR_CART_ITEMS:
        return cart.model_copy(update={"cart_items": []}).with_prices()

    return cart


class CartStore:
    """Cart state holder backed by client storage"""

    def __init__(self, storage: ClientStorage):
        self.storage = storage
        self._state = self._load()

    def _load(self) -> Cart:
        try:
            data = self.storage.get_json(CART_KEY)
            return Cart.model_validate(data) if data else Cart()
        except (LocalStateError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable stored cart: {e}")
            return Cart()

    def get_state(self) -> Cart:
        return self._state

    def dispatch(self, action: Dict[str, Any]) -> Cart:
        self._state = cart_reducer(self._state, action)
        self.storage.set_json(CART_KEY, self._state.to_dict())
        return self._state

