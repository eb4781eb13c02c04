"""
Product Catalog Tools

Catalog search with client-side filters, and the top-rated/low-stock finder
built on top of it.

Author: TM3
Date: 2026-10-16
"""
import logging
from typing import Optional

from shopassist.core.exceptions import error_kind_for
from shopassist.domain.product import Product
from shopassist.domain.results import SearchProductsResult, TopRatedLowStockResult
from shopassist.services.formatting import number, plural
from shopassist.services.tool_context import ToolContext

logger = logging.getLogger(__name__)


# ============================================================================
# TOOL: search_products
# ============================================================================

async def search_products(
    ctx: ToolContext,
    query: str = "",
    price_min: Optional[float] = None,
    price_max: Optional[float] = None,
    category: Optional[str] = None,
    min_rating: Optional[float] = None
) -> SearchProductsResult:
    """
    Search the catalog by keyword, then filter client-side.

    Args:
        query: Free text matched by the storefront (empty lists everything)
        price_min: Keep products priced at or above this
        price_max: Keep products priced at or below this
        category: Keep products in this category (case-insensitive, exact)
        min_rating: Keep products rated at or above this

    Returns:
        SearchProductsResult; products keep the server's order
    """
    filters = {
        "query": query,
        "priceMin": price_min,
        "priceMax": price_max,
        "category": category,
        "minRating": min_rating,
    }
    try:
        products = [Product.model_validate(p) for p in await ctx.connector.search_products(query or "")]

        if price_min is not None:
            products = [p for p in products if p.price >= price_min]
        if price_max is not None:
            products = [p for p in products if p.price <= price_max]
        if category:
            products = [p for p in products if p.category and p.category.lower() == category.lower()]
        if min_rating is not None:
            products = [p for p in products if p.rating >= min_rating]

        # Describe the applied filters
        clauses = []
        if query:
            clauses.append(f'matching "{query}"')
        if price_min is not None or price_max is not None:
            low = f"${number(price_min)}" if price_min is not None else "$0"
            high = f"${number(price_max)}" if price_max is not None else "any price"
            clauses.append(f"priced between {low} and {high}")
        if category:
            clauses.append(f'in category "{category}"')
        if min_rating is not None:
            clauses.append(f"with {number(min_rating)}+ star rating")

        message = f"Found {plural(len(products), 'product')}"
        if clauses:
            message += " " + ", ".join(clauses)

        return SearchProductsResult(
            success=True,
            products=products,
            total_results=len(products),
            message=message,
            raw_data={"filters": filters}
        )

    except Exception as e:
        logger.error(f"Error in search_products tool: {e}")
        return SearchProductsResult(
            success=False,
            message=f"Error searching products: {e}",
            error_kind=error_kind_for(e)
        )


# ============================================================================
# TOOL: find_top_rated_low_stock
# ============================================================================

async def find_top_rated_low_stock(
    ctx: ToolContext,
    min_rating: float = 4.0,
    max_stock_level: int = 10,
    category: Optional[str] = None
) -> TopRatedLowStockResult:
    """
    Highly rated products that need restocking, best rated first.
    """
    criteria = {"minRating": min_rating, "maxStockLevel": max_stock_level, "category": category}
    category_text = f" in {category} category" if category else ""

    try:
        search = await search_products(ctx, query="", min_rating=min_rating, category=category)
        if not search.success:
            return TopRatedLowStockResult(
                success=False,
                criteria=criteria,
                message=f"Error finding top-rated low stock products: {search.message}",
                error_kind=search.error_kind
            )

        if not search.products:
            return TopRatedLowStockResult(
                success=True,
                criteria=criteria,
                message=f"No products found with rating ≥ {number(min_rating)} and stock ≤ {max_stock_level}{category_text}",
                raw_data={"criteria": criteria, "products": []}
            )

        low_stock = sorted(
            (p for p in search.products if p.count_in_stock <= max_stock_level),
            key=lambda p: p.rating,
            reverse=True
        )

        message = (
            f"Found {len(low_stock)} top-rated product{'' if len(low_stock) == 1 else 's'} "
            f"with low stock (≤ {max_stock_level} units){category_text}. "
            f"Rating threshold: ≥ {number(min_rating)} stars"
        )

        return TopRatedLowStockResult(
            success=True,
            products=low_stock,
            total_results=len(low_stock),
            criteria=criteria,
            message=message,
            raw_data={
                "criteria": criteria,
                "products": [p.to_dict() for p in low_stock],
                "allSearchResults": [p.to_dict() for p in search.products]
            }
        )

    except Exception as e:
        logger.error(f"Error in find_top_rated_low_stock tool: {e}")
        return TopRatedLowStockResult(
            success=False,
            criteria=criteria,
            message=f"Error finding top-rated low stock products: {e}",
            error_kind=error_kind_for(e)
        )
