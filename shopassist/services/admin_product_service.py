"""
Admin Product Tools

Administrator tools that change the catalog. Every mutation reads the
current product, merges the caller's allow-listed fields over it, and PUTs
the full object back; the storefront has no partial update.

1. update_product_details - Edit fields of one product, with change tracking
2. get_product_for_admin - Read-only admin view of one product
3. bulk_update_products - Same edit applied to many products, one at a time
4. update_product_stock - Add, subtract or set stock

Author: TM3
Date: 2026-10-16
"""
import logging
from typing import Optional, List, Dict, Any

from shopassist.core.exceptions import (
    ConflictError,
    StoreApiError,
    ToolValidationError,
    error_kind_for,
)
from shopassist.domain.product import (
    ALLOWED_UPDATE_FIELDS,
    Product,
    invalid_update_fields,
    merge_product_update,
)
from shopassist.domain.results import (
    AdminProductResult,
    BulkItemResult,
    BulkUpdateResult,
    FieldChange,
    ProductUpdateResult,
    StockUpdateResult,
)
from shopassist.services.formatting import money, number, plural
from shopassist.services.order_service import parse_date
from shopassist.services.tool_context import ToolContext

logger = logging.getLogger(__name__)

STOCK_OPERATIONS = ('add', 'subtract', 'set')


def validate_updates(updates: Optional[Dict[str, Any]]) -> None:
    """Reject empty updates and keys outside the allow-list"""
    if not updates:
        raise ToolValidationError("At least one field to update is required")

    invalid = invalid_update_fields(updates)
    if invalid:
        raise ToolValidationError(
            f"Invalid fields: {', '.join(invalid)}. Allowed fields: {', '.join(ALLOWED_UPDATE_FIELDS)}"
        )


def track_changes(previous: Dict[str, Any], updates: Dict[str, Any]) -> List[FieldChange]:
    """Fields whose new value differs from the value before the update"""
    return [
        FieldChange(field=field, old_value=previous.get(field), new_value=new_value)
        for field, new_value in updates.items()
        if previous.get(field) != new_value
    ]


def check_not_modified(current: Dict[str, Any], expected_updated_at: Optional[str]) -> None:
    """Fail when the product changed after the caller read it"""
    if not expected_updated_at:
        return
    current_updated_at = current.get('updatedAt')
    if not current_updated_at or parse_date(current_updated_at) != parse_date(expected_updated_at):
        raise ConflictError(
            f"Product was modified at {current_updated_at}, expected {expected_updated_at}. "
            "Reload it and try again"
        )


def valid_product_ids(product_ids: Any) -> bool:
    """A non-empty list of non-empty string ids"""
    return (
        isinstance(product_ids, list)
        and bool(product_ids)
        and all(isinstance(product_id, str) and product_id for product_id in product_ids)
    )


def next_stock_level(current: int, amount: int, operation: Optional[str]) -> int:
    """add/subtract/set; subtract never goes below zero, unknown operations set"""
    if operation == 'add':
        return current + amount
    if operation == 'subtract':
        return max(0, current - amount)
    return amount


# ============================================================================
# TOOL: update_product_details
# ============================================================================

async def update_product_details(
    ctx: ToolContext,
    product_id: Optional[str] = None,
    updates: Optional[Dict[str, Any]] = None,
    expected_updated_at: Optional[str] = None
) -> ProductUpdateResult:
    """
    Update product details as an administrator.

    Args:
        product_id: Product to update
        updates: Allow-listed fields and their new values
        expected_updated_at: Optional updatedAt the caller last saw; when it
            no longer matches, nothing is written

    Returns:
        ProductUpdateResult with before/after products and the changed fields
    """
    try:
        if not product_id:
            raise ToolValidationError("Product ID is required")
        validate_updates(updates)

        current = await ctx.connector.get_product(product_id, fresh=True)
        check_not_modified(current, expected_updated_at)

        body = merge_product_update(product_id, current, updates)
        updated = await ctx.connector.update_product(product_id, body)

        ctx.invalidate_product_cache()

        changes = track_changes(current, updates)
        product_name = updated.get('name')
        changed_fields = ", ".join(change.field for change in changes)
        message = f'Successfully updated "{product_name}" - Changed {plural(len(changes), "field")}: {changed_fields}'

        logger.info(f"Product {product_id} updated: {[c.field for c in changes]}")

        return ProductUpdateResult(
            success=True,
            product_id=product_id,
            product_name=product_name,
            updated_product=updated,
            previous_product=current,
            changes=changes,
            fields_updated=list(updates.keys()),
            message=message,
            raw_data={
                "productId": product_id,
                "updates": updates,
                "previousProduct": current,
                "updatedProduct": updated,
                "changes": [c.model_dump(by_alias=True) for c in changes]
            }
        )

    except Exception as e:
        logger.error(f"Error in update_product_details tool: {e}")
        return ProductUpdateResult(
            success=False,
            product_id=product_id or None,
            message=f"Error updating product: {e}",
            error_kind=error_kind_for(e)
        )


# ============================================================================
# TOOL: get_product_for_admin
# ============================================================================

async def get_product_for_admin(ctx: ToolContext, product_id: Optional[str] = None) -> AdminProductResult:
    """Product details, reviews and stock status for admin review"""
    try:
        if not product_id:
            raise ToolValidationError("Product ID is required")

        product = Product.model_validate(await ctx.connector.get_product(product_id))
        now = ctx.now()

        admin_data = {
            "id": product.id,
            "name": product.name,
            "price": product.price,
            "description": product.description,
            "image": product.image,
            "brand": product.brand,
            "category": product.category,
            "countInStock": product.count_in_stock,
            "rating": product.rating,
            "numReviews": product.num_reviews,
            "createdAt": product.created_at.isoformat() if product.created_at else None,
            "updatedAt": product.updated_at.isoformat() if product.updated_at else None,
            "reviews": [review.to_summary(now) for review in product.reviews],
            "salesData": {
                "averageRating": product.rating or 0,
                "totalReviews": product.num_reviews or 0,
                "stockStatus": product.stock_status,
                "stockLevel": product.count_in_stock
            }
        }

        rating_text = number(product.rating) if product.rating else "No rating"
        return AdminProductResult(
            success=True,
            product=admin_data,
            message=(
                f'Retrieved admin details for "{product.name}" - Price: {money(product.price)}, '
                f"Stock: {product.count_in_stock}, Rating: {rating_text}"
            ),
            raw_data=admin_data
        )

    except Exception as e:
        logger.error(f"Error in get_product_for_admin tool: {e}")
        return AdminProductResult(
            success=False,
            message=f"Error retrieving product details: {e}",
            error_kind=error_kind_for(e)
        )


# ============================================================================
# TOOL: bulk_update_products
# ============================================================================

async def _update_one(ctx: ToolContext, product_id: str, updates: Dict[str, Any]) -> BulkItemResult:
    """One fetch+PUT round trip; failures become a failed item, never an exception"""
    try:
        try:
            current = await ctx.connector.get_product(product_id, fresh=True)
        except StoreApiError as e:
            return BulkItemResult(product_id=product_id, success=False,
                                  message=f"Product not found - Status: {e.status_code}")

        body = merge_product_update(product_id, current, updates)
        try:
            updated = await ctx.connector.update_product(product_id, body)
        except StoreApiError as e:
            return BulkItemResult(product_id=product_id, success=False,
                                  message=f"Failed to update product - Status: {e.status_code}")

        return BulkItemResult(
            product_id=product_id,
            success=True,
            product_name=updated.get('name'),
            message=f'Successfully updated "{updated.get("name")}"'
        )

    except Exception as e:
        logger.warning(f"Bulk update of product {product_id} failed: {e}")
        return BulkItemResult(product_id=product_id, success=False, message=f"Error updating product: {e}")


async def bulk_update_products(
    ctx: ToolContext,
    product_ids: Optional[List[str]] = None,
    updates: Optional[Dict[str, Any]] = None
) -> BulkUpdateResult:
    """
    Apply the same allow-listed update to several products.

    Products are processed strictly in input order, one at a time. A
    missing or failing product is recorded in ``results`` and the batch
    continues. Overall success means at least one product was updated.
    """
    try:
        if not product_ids or not isinstance(product_ids, list):
            raise ToolValidationError("Product IDs array is required")
        if not valid_product_ids(product_ids):
            raise ToolValidationError("Every product ID must be a non-empty string")
        validate_updates(updates)

        results: List[BulkItemResult] = []
        for product_id in product_ids:
            results.append(await _update_one(ctx, product_id, updates))

        success_count = sum(1 for r in results if r.success)
        failure_count = len(results) - success_count

        if success_count > 0:
            ctx.invalidate_product_cache()

        logger.info(f"Bulk update: {success_count} ok, {failure_count} failed of {len(product_ids)}")

        return BulkUpdateResult(
            success=success_count > 0,
            product_ids=product_ids,
            updates=updates,
            results=results,
            success_count=success_count,
            failure_count=failure_count,
            total_processed=len(product_ids),
            fields_updated=list(updates.keys()),
            message=(
                f"Bulk update completed: {success_count} successful, {failure_count} failed "
                f"out of {len(product_ids)} products"
            ),
            raw_data={
                "productIds": product_ids,
                "updates": updates,
                "results": [r.model_dump(by_alias=True) for r in results],
                "summary": {
                    "successCount": success_count,
                    "failureCount": failure_count,
                    "totalProcessed": len(product_ids)
                }
            }
        )

    except Exception as e:
        logger.error(f"Error in bulk_update_products tool: {e}")
        return BulkUpdateResult(
            success=False,
            product_ids=product_ids if valid_product_ids(product_ids) else [],
            message=f"Error in bulk update: {e}",
            error_kind=error_kind_for(e)
        )


# ============================================================================
# TOOL: update_product_stock
# ============================================================================

async def update_product_stock(
    ctx: ToolContext,
    product_id: Optional[str] = None,
    new_stock_level: Optional[int] = None,
    operation: Optional[str] = "set"
) -> StockUpdateResult:
    """
    Change a product's stock level.

    Args:
        product_id: Product to restock
        new_stock_level: Amount to add/subtract, or the exact new level for 'set'
        operation: 'add', 'subtract' or 'set' (default)

    Returns:
        StockUpdateResult with old/new levels and the net change
    """
    try:
        if not product_id:
            raise ToolValidationError("Product ID is required")
        if isinstance(new_stock_level, bool) or not isinstance(new_stock_level, int) or new_stock_level < 0:
            raise ToolValidationError("Valid stock level is required")

        current = await ctx.connector.get_product(product_id, fresh=True)
        old_stock_level = current.get('countInStock') or 0
        final_stock_level = next_stock_level(old_stock_level, new_stock_level, operation)

        body = merge_product_update(product_id, current, {'countInStock': final_stock_level})
        updated = await ctx.connector.update_product(product_id, body)

        ctx.invalidate_product_cache()

        verb = {'add': 'added', 'subtract': 'subtracted'}.get(operation, 'set to')
        product_name = updated.get('name')

        return StockUpdateResult(
            success=True,
            product_id=product_id,
            product_name=product_name,
            old_stock_level=old_stock_level,
            new_stock_level=final_stock_level,
            operation=operation,
            stock_change=final_stock_level - old_stock_level,
            updated_product=updated,
            message=(
                f'Updated stock for "{product_name}" from {old_stock_level} to {final_stock_level} '
                f"({verb} {new_stock_level})"
            ),
            raw_data={
                "productId": product_id,
                "oldStockLevel": old_stock_level,
                "newStockLevel": final_stock_level,
                "operation": operation,
                "updatedProduct": updated
            }
        )

    except Exception as e:
        logger.error(f"Error in update_product_stock tool: {e}")
        return StockUpdateResult(
            success=False,
            product_id=product_id or None,
            operation=operation or None,
            message=f"Error updating product stock: {e}",
            error_kind=error_kind_for(e)
        )
