"""
Storefront Chat Tools for Claude AI Integration

This module exposes 15 tools for shopping and store administration:
1. search_products - Catalog search with price/category/rating filters
2. find_top_rated_low_stock - Highly rated items that need restocking
3. add_to_cart / 4. remove_from_cart / 5. clear_cart - Cart actions
6. generate_review_summary / 7. get_pros_and_cons / 8. ask_about_reviews - Review data
9. get_order_history / 10. get_order_details / 11. get_order_statistics - Orders
12. update_product_details / 13. get_product_for_admin /
14. bulk_update_products / 15. update_product_stock - Admin (admin users only)

Author: TM3
Date: 2026-10-16
"""
import json
import logging
from typing import Dict, Any, List

from shopassist.domain.product import ALLOWED_UPDATE_FIELDS
from shopassist.domain.results import ToolResult
from shopassist.services import (
    admin_product_service,
    cart_service,
    order_service,
    product_service,
    review_service,
)
from shopassist.services.admin_product_service import STOCK_OPERATIONS
from shopassist.services.tool_context import ToolContext

logger = logging.getLogger(__name__)


# ============================================================================
# TOOL DEFINITIONS (Anthropic format)
# ============================================================================

_PRODUCT_ID = {"type": "string", "description": "Storefront product ID"}

_UPDATES = {
    "type": "object",
    "description": f"Fields to change. Allowed: {', '.join(ALLOWED_UPDATE_FIELDS)}",
    "properties": {
        "name": {"type": "string", "description": "Product name"},
        "price": {"type": "number", "description": "Product price"},
        "description": {"type": "string", "description": "Product description"},
        "image": {"type": "string", "description": "Product image URL"},
        "brand": {"type": "string", "description": "Product brand"},
        "category": {"type": "string", "description": "Product category"},
        "countInStock": {"type": "integer", "description": "Number of items in stock"}
    }
}

TOOLS = [
    {
        "name": "search_products",
        "description": "Search the catalog with a natural language query and optional price, category and rating filters. Returns matching products with full details.",
        "input_schema": {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search keywords (e.g., 'gaming mouse'). Empty lists every product."},
                "price_min": {"type": "number", "description": "Optional: minimum price in dollars"},
                "price_max": {"type": "number", "description": "Optional: maximum price in dollars"},
                "category": {"type": "string", "description": "Optional: exact category (e.g., 'Electronics')"},
                "min_rating": {"type": "number", "description": "Optional: minimum rating, 0-5 stars"}
            },
            "required": []
        }
    },
    {
        "name": "find_top_rated_low_stock",
        "description": "Find highly rated products whose stock is low. Use for restocking and inventory questions.",
        "input_schema": {
            "type": "object",
            "properties": {
                "min_rating": {"type": "number", "description": "Minimum rating (default: 4.0)"},
                "max_stock_level": {"type": "integer", "description": "Maximum stock to count as low (default: 10)"},
                "category": {"type": "string", "description": "Optional: category filter"}
            },
            "required": []
        }
    },
    {
        "name": "add_to_cart",
        "description": "Add a product to the shopping cart. Checks that the product exists and that enough stock is available.",
        "input_schema": {
            "type": "object",
            "properties": {
                "product_id": _PRODUCT_ID,
                "quantity": {"type": "integer", "description": "Units to add (default: 1)"},
                "user_id": {"type": "string", "description": "Optional: user ID for a user-specific cart"}
            },
            "required": ["product_id"]
        }
    },
    {
        "name": "remove_from_cart",
        "description": "Remove a product from the shopping cart.",
        "input_schema": {
            "type": "object",
            "properties": {"product_id": _PRODUCT_ID},
            "required": ["product_id"]
        }
    },
    {
        "name": "clear_cart",
        "description": "Remove every item from the shopping cart.",
        "input_schema": {"type": "object", "properties": {}, "required": []}
    },
    {
        "name": "generate_review_summary",
        "description": "Get a product's reviews to summarise sentiment, pros/cons, and what people like or dislike.",
        "input_schema": {
            "type": "object",
            "properties": {
                "product_id": _PRODUCT_ID,
                "question": {"type": "string", "description": "Optional: specific question to focus the summary"}
            },
            "required": ["product_id"]
        }
    },
    {
        "name": "get_pros_and_cons",
        "description": "Get a product's reviews to extract a short list of pros and cons.",
        "input_schema": {
            "type": "object",
            "properties": {"product_id": _PRODUCT_ID},
            "required": ["product_id"]
        }
    },
    {
        "name": "ask_about_reviews",
        "description": "Get a product's reviews to answer a specific question, e.g. 'What are the common complaints?'",
        "input_schema": {
            "type": "object",
            "properties": {
                "product_id": _PRODUCT_ID,
                "question": {"type": "string", "description": "The question to answer from the reviews"}
            },
            "required": ["product_id", "question"]
        }
    },
    {
        "name": "get_order_history",
        "description": "Get the user's order history with optional filters. Returns orders, status, spend and counts.",
        "input_schema": {
            "type": "object",
            "properties": {
                "days": {"type": "integer", "description": "Only orders from the last N days (takes precedence over dates)"},
                "start_date": {"type": "string", "description": "Only orders from this date (YYYY-MM-DD)"},
                "end_date": {"type": "string", "description": "Only orders until this date (YYYY-MM-DD)"},
                "status": {"type": "string", "enum": ["delivered", "paid", "pending"], "description": "Order status filter"}
            },
            "required": []
        }
    },
    {
        "name": "get_order_details",
        "description": "Get full details of one order: items, shipping, payment and delivery status.",
        "input_schema": {
            "type": "object",
            "properties": {"order_id": {"type": "string", "description": "Order ID"}},
            "required": ["order_id"]
        }
    },
    {
        "name": "get_order_statistics",
        "description": "Sales statistics: totals, average order value, delivery rate, top 5 products and spend for each of the last 6 months.",
        "input_schema": {
            "type": "object",
            "properties": {
                "period": {
                    "type": "string",
                    "enum": ["all", "30days", "90days", "year"],
                    "description": "Time period (default: 'all')"
                }
            },
            "required": []
        }
    },
    {
        "name": "update_product_details",
        "description": "Admin: update a product's name, price, description, image, brand, category or stock. Reports which fields changed.",
        "input_schema": {
            "type": "object",
            "properties": {
                "product_id": _PRODUCT_ID,
                "updates": _UPDATES,
                "expected_updated_at": {
                    "type": "string",
                    "description": "Optional: the product's updatedAt as last seen; the update is refused if it changed since"
                }
            },
            "required": ["product_id", "updates"]
        }
    },
    {
        "name": "get_product_for_admin",
        "description": "Admin: full product details with reviews, rating and stock status.",
        "input_schema": {
            "type": "object",
            "properties": {"product_id": _PRODUCT_ID},
            "required": ["product_id"]
        }
    },
    {
        "name": "bulk_update_products",
        "description": "Admin: apply the same changes to several products, e.g. a category or price change.",
        "input_schema": {
            "type": "object",
            "properties": {
                "product_ids": {"type": "array", "items": {"type": "string"}, "description": "Product IDs to update"},
                "updates": _UPDATES
            },
            "required": ["product_ids", "updates"]
        }
    },
    {
        "name": "update_product_stock",
        "description": "Admin: add to, subtract from, or set a product's stock level. Stock never goes below zero.",
        "input_schema": {
            "type": "object",
            "properties": {
                "product_id": _PRODUCT_ID,
                "new_stock_level": {"type": "integer", "description": "Amount to add/subtract, or the exact new level"},
                "operation": {
                    "type": "string",
                    "enum": list(STOCK_OPERATIONS),
                    "description": "'add', 'subtract' or 'set' (default)"
                }
            },
            "required": ["product_id", "new_stock_level"]
        }
    }
]

ADMIN_TOOLS = {
    "update_product_details",
    "get_product_for_admin",
    "bulk_update_products",
    "update_product_stock",
}


def tools_for(is_admin: bool) -> List[Dict[str, Any]]:
    """Tool definitions visible to a user; admin tools only for admins"""
    return [tool for tool in TOOLS if is_admin or tool["name"] not in ADMIN_TOOLS]


# ============================================================================
# TOOL REGISTRY
# ============================================================================

TOOL_FUNCTIONS = {
    "search_products": product_service.search_products,
    "find_top_rated_low_stock": product_service.find_top_rated_low_stock,
    "add_to_cart": cart_service.add_to_cart,
    "remove_from_cart": cart_service.remove_from_cart,
    "clear_cart": cart_service.clear_cart,
    "generate_review_summary": review_service.generate_review_summary,
    "get_pros_and_cons": review_service.get_pros_and_cons,
    "ask_about_reviews": review_service.ask_about_reviews,
    "get_order_history": order_service.get_order_history,
    "get_order_details": order_service.get_order_details,
    "get_order_statistics": order_service.get_order_statistics,
    "update_product_details": admin_product_service.update_product_details,
    "get_product_for_admin": admin_product_service.get_product_for_admin,
    "bulk_update_products": admin_product_service.bulk_update_products,
    "update_product_stock": admin_product_service.update_product_stock,
}


async def invoke_tool(ctx: ToolContext, tool_name: str, tool_input: Dict[str, Any]) -> ToolResult:
    """
    Run a tool and return its envelope.

    Raises:
        KeyError: unknown tool name
        TypeError: parameters that do not match the tool's signature
    """
    tool = TOOL_FUNCTIONS[tool_name]
    return await tool(ctx, **(tool_input or {}))


async def execute_tool(ctx: ToolContext, tool_name: str, tool_input: Dict[str, Any]) -> str:
    """
    Execute a tool by name with given input parameters.

    Args:
        ctx: Injected collaborators
        tool_name: Name of the tool to execute
        tool_input: Dictionary of input parameters

    Returns:
        JSON string result from the tool
    """
    if tool_name not in TOOL_FUNCTIONS:
        return json.dumps({"error": f"Tool '{tool_name}' not found"}, ensure_ascii=False)

    try:
        result = await invoke_tool(ctx, tool_name, tool_input)
        return json.dumps(result.to_dict(), ensure_ascii=False)
    except TypeError as e:
        return json.dumps({"error": f"Invalid parameters for {tool_name}: {str(e)}"}, ensure_ascii=False)
    except Exception as e:
        logger.error(f"Error executing {tool_name}: {e}", exc_info=True)
        return json.dumps({"error": f"Error executing {tool_name}: {str(e)}"}, ensure_ascii=False)
