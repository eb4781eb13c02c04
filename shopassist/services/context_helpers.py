"""
Context helpers

Ambient information sent to Claude with every message: which page the
shopper is on, what is in their cart, and who is logged in. The readers
never raise; missing or unreadable state yields an explicit empty result.

Author: TM3
Date: 2026-10-16
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional
from urllib.parse import parse_qs

from shopassist.core.exceptions import LocalStateError
from shopassist.domain.cart import to_money
from shopassist.state.cart_store import CART_KEY
from shopassist.state.storage import ClientStorage

logger = logging.getLogger(__name__)

USER_INFO_KEY = "userInfo"

# path -> (page type, description)
STATIC_PAGES = {
    "/": ("home", "User is on the home page viewing product listings"),
    "/cart": ("cart", "User is viewing their shopping cart"),
    "/login": ("login", "User is on the login page"),
    "/register": ("register", "User is on the registration page"),
    "/shipping": ("shipping", "User is entering shipping information"),
    "/payment": ("payment", "User is selecting payment method"),
    "/placeorder": ("place-order", "User is reviewing their order before placing it"),
}


def _empty_cart(message: str) -> Dict[str, Any]:
    return {
        "isEmpty": True,
        "itemCount": 0,
        "items": [],
        "subtotal": "0.00",
        "message": message,
    }


def get_current_page(path: str = "/", query_string: str = "") -> Dict[str, Any]:
    """
    Classify the storefront route the shopper is on.

    Args:
        path: URL path (e.g., '/product/abc123')
        query_string: Raw query string without '?'

    Returns:
        Dict with pageType, path and any IDs/search params found
    """
    page_type = "home"
    context: Dict[str, Any] = {}

    if path in STATIC_PAGES:
        page_type, context["description"] = STATIC_PAGES[path]
    elif path.startswith("/product/"):
        page_type = "product-detail"
        context["productId"] = path.split("/product/", 1)[1]
        context["description"] = f"User is viewing product details for product ID: {context['productId']}"
    elif path.startswith("/order/"):
        page_type = "order-detail"
        context["orderId"] = path.split("/order/", 1)[1]
        context["description"] = f"User is viewing order details for order ID: {context['orderId']}"

    params = parse_qs(query_string or "")
    if "keyword" in params:
        context["searchKeyword"] = params["keyword"][0]
    if "pageNumber" in params:
        context["pageNumber"] = params["pageNumber"][0]

    return {"pageType": page_type, "path": path, **context}


def get_cart_state(storage: ClientStorage) -> Dict[str, Any]:
    """Cart contents and subtotal as stored by the storefront"""
    try:
        cart = storage.get_json(CART_KEY)
        if not cart:
            return _empty_cart("Cart is empty")

        items = cart.get("cartItems") or []
        item_count = sum(item["qty"] for item in items)
        subtotal = sum((Decimal(str(item["qty"])) * Decimal(str(item["price"])) for item in items), Decimal("0"))

        return {
            "isEmpty": len(items) == 0,
            "itemCount": item_count,
            "items": [
                {
                    "id": item.get("_id"),
                    "name": item.get("name"),
                    "quantity": item["qty"],
                    "price": item["price"],
                    "image": item.get("image"),
                    "total": item["qty"] * item["price"],
                }
                for item in items
            ],
            "subtotal": to_money(subtotal),
            "shippingAddress": cart.get("shippingAddress"),
            "paymentMethod": cart.get("paymentMethod"),
            "message": f"Cart contains {item_count} item{'' if item_count == 1 else 's'} with subtotal ${to_money(subtotal)}",
        }

    except (LocalStateError, AttributeError, KeyError, TypeError, ValueError, InvalidOperation) as e:
        logger.error(f"Error reading cart state: {e}")
        return _empty_cart("Error reading cart")


def get_user_info(storage: ClientStorage) -> Dict[str, Any]:
    """Login state of the shopper"""
    try:
        user = storage.get_json(USER_INFO_KEY)
        if not user:
            return {"isLoggedIn": False, "message": "User is not logged in"}

        return {
            "isLoggedIn": True,
            "name": user.get("name"),
            "email": user.get("email"),
            "isAdmin": bool(user.get("isAdmin", False)),
            "message": f"User is logged in as {user.get('name')}",
        }

    except (LocalStateError, AttributeError) as e:
        logger.error(f"Error reading user info: {e}")
        return {"isLoggedIn": False, "message": "Error reading user info"}


def build_context(storage: ClientStorage, path: Optional[str] = None, query_string: str = "") -> Dict[str, Any]:
    """Every helper's output, keyed the way the chat prompt expects"""
    return {
        "currentPage": get_current_page(path or "/", query_string),
        "cartState": get_cart_state(storage),
        "userInfo": get_user_info(storage),
    }
