"""
Order Tools for the storefront assistant

1. get_order_history - Own orders with day/date-range/status filters
2. get_order_details - One order, fully structured
3. get_order_statistics - Totals, top products and a 6-month spend histogram

Author: TM3
Date: 2026-10-16
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, List, Dict, Tuple

from shopassist.core.exceptions import ToolValidationError, error_kind_for
from shopassist.domain.order import Order, as_utc
from shopassist.domain.results import (
    OrderHistoryResult,
    OrderDetailsResult,
    OrderStatistics,
    OrderStatisticsResult,
)
from shopassist.services.formatting import money, plural
from shopassist.services.tool_context import ToolContext

logger = logging.getLogger(__name__)

PERIOD_DAYS = {"30days": 30, "90days": 90, "year": 365}
PERIOD_LABELS = {"all": "all time", "30days": "last 30 days", "90days": "last 90 days", "year": "last year"}
TOP_PRODUCTS_LIMIT = 5
HISTOGRAM_MONTHS = 6


def parse_date(value: str) -> datetime:
    """Parse 'YYYY-MM-DD' or an ISO timestamp; naive values are UTC"""
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError as e:
        raise ToolValidationError(f"Invalid date '{value}', expected YYYY-MM-DD") from e
    return as_utc(parsed)


def filter_orders(
    orders: List[Order],
    now: datetime,
    days: Optional[int] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    status: Optional[str] = None
) -> List[Order]:
    """
    Apply the history filters. A day count wins over a date range; status
    is ANDed with whichever applies. Orders without a timestamp never match
    a date filter.
    """
    filtered = orders

    if days:
        cutoff = now - timedelta(days=days)
        filtered = [o for o in filtered if o.created_at and o.created_at >= cutoff]
    elif start_date or end_date:
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
        filtered = [
            o for o in filtered
            if o.created_at
            and (start is None or o.created_at >= start)
            and (end is None or o.created_at <= end)
        ]

    if status:
        wanted = status.lower()
        filtered = [o for o in filtered if o.status == wanted]

    return filtered


def summarize(orders: List[Order]) -> Dict[str, float]:
    """Counts and spend shared by history and statistics"""
    total_orders = len(orders)
    total_spent = sum(o.total_price for o in orders)
    delivered = sum(1 for o in orders if o.is_delivered)
    paid = sum(1 for o in orders if o.is_paid)
    return {
        "totalOrders": total_orders,
        "totalSpent": total_spent,
        "deliveredOrders": delivered,
        "paidOrders": paid,
        "pendingOrders": total_orders - paid,
        "averageOrderValue": total_spent / total_orders if total_orders > 0 else 0,
    }


def top_products(orders: List[Order], limit: int = TOP_PRODUCTS_LIMIT) -> List[Dict]:
    """Products ranked by total quantity; ties keep first-seen order"""
    counts: Dict[str, int] = {}
    for order in orders:
        for item in order.order_items:
            counts[item.name] = counts.get(item.name, 0) + item.qty

    ranked = sorted(counts.items(), key=lambda entry: entry[1], reverse=True)
    return [{"name": name, "quantity": quantity} for name, quantity in ranked[:limit]]


def _month_start(year: int, month: int, tz) -> datetime:
    # month may be out of 1..12 while walking backwards
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1, tzinfo=tz)


def month_windows(now: datetime, months: int = HISTOGRAM_MONTHS) -> List[Tuple[datetime, datetime]]:
    """[start, next_start) for the trailing ``months`` calendar months, oldest first"""
    windows = []
    for offset in range(months - 1, -1, -1):
        start = _month_start(now.year, now.month - offset, now.tzinfo)
        end = _month_start(now.year, now.month - offset + 1, now.tzinfo)
        windows.append((start, end))
    return windows


def monthly_spending(orders: List[Order], now: datetime) -> List[Dict]:
    buckets = []
    for start, end in month_windows(now):
        in_month = [o for o in orders if o.created_at and start <= o.created_at < end]
        buckets.append({
            "month": start.strftime("%b %Y"),
            "spent": sum(o.total_price for o in in_month),
            "orders": len(in_month),
        })
    return buckets


# ============================================================================
# TOOL: get_order_history
# ============================================================================

async def get_order_history(
    ctx: ToolContext,
    days: Optional[int] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    status: Optional[str] = None
) -> OrderHistoryResult:
    """
    Get the current user's orders, optionally filtered.

    Args:
        days: Only orders from the last N days (takes precedence over dates)
        start_date: Only orders on/after this date (YYYY-MM-DD)
        end_date: Only orders on/before this date (YYYY-MM-DD)
        status: 'delivered', 'paid' or 'pending' (case-insensitive)

    Returns:
        OrderHistoryResult with structured orders and summary counts
    """
    filters = {"days": days, "startDate": start_date, "endDate": end_date, "status": status}
    try:
        orders = [Order.model_validate(o) for o in await ctx.connector.get_my_orders()]
        filtered = filter_orders(orders, ctx.now(), days, start_date, end_date, status)

        summary = summarize(filtered)
        structured = [o.to_summary() for o in filtered]

        message = f"Found {plural(summary['totalOrders'], 'order')}"
        if days:
            message += f" from the last {plural(days, 'day')}"
        elif start_date or end_date:
            start_text = parse_date(start_date).date().isoformat() if start_date else "beginning"
            end_text = parse_date(end_date).date().isoformat() if end_date else "now"
            message += f" from {start_text} to {end_text}"
        if status:
            message += f' with status "{status}"'
        message += (
            f". Total spent: {money(summary['totalSpent'])}. "
            f"Delivered: {summary['deliveredOrders']}, Pending: {summary['pendingOrders']}"
        )

        return OrderHistoryResult(
            success=True,
            orders=structured,
            total_orders=summary["totalOrders"],
            total_spent=summary["totalSpent"],
            delivered_orders=summary["deliveredOrders"],
            paid_orders=summary["paidOrders"],
            pending_orders=summary["pendingOrders"],
            average_order_value=summary["averageOrderValue"],
            filters=filters,
            message=message,
            raw_data={"orders": structured, "summary": summary}
        )

    except Exception as e:
        logger.error(f"Error in get_order_history tool: {e}")
        return OrderHistoryResult(
            success=False,
            filters=filters,
            message=f"Error retrieving order history: {e}",
            error_kind=error_kind_for(e)
        )


# ============================================================================
# TOOL: get_order_details
# ============================================================================

async def get_order_details(ctx: ToolContext, order_id: Optional[str] = None) -> OrderDetailsResult:
    """Get one order with items, shipping, payment and delivery state"""
    try:
        if not order_id:
            raise ToolValidationError("Order ID is required")

        order = Order.model_validate(await ctx.connector.get_order(order_id))
        detail = order.to_detail()

        return OrderDetailsResult(
            success=True,
            order=detail,
            message=f"Retrieved details for order {order_id} - Status: {order.status}, Total: {money(order.total_price)}",
            raw_data=detail
        )

    except Exception as e:
        logger.error(f"Error in get_order_details tool: {e}")
        return OrderDetailsResult(
            success=False,
            message=f"Error retrieving order details: {e}",
            error_kind=error_kind_for(e)
        )


# ============================================================================
# TOOL: get_order_statistics
# ============================================================================

async def get_order_statistics(ctx: ToolContext, period: str = "all") -> OrderStatisticsResult:
    """
    Store-wide order statistics for a period.

    Args:
        period: 'all', '30days', '90days' or 'year'; anything else means 'all'

    Returns:
        OrderStatisticsResult with totals, top 5 products and the spend of
        each of the last 6 calendar months (empty months included)
    """
    period = period or "all"
    try:
        orders = [Order.model_validate(o) for o in await ctx.connector.get_all_orders()]
        now = ctx.now()

        if period in PERIOD_DAYS:
            cutoff = now - timedelta(days=PERIOD_DAYS[period])
            orders = [o for o in orders if o.created_at and o.created_at >= cutoff]

        summary = summarize(orders)
        statistics = OrderStatistics(
            total_orders=summary["totalOrders"],
            total_spent=summary["totalSpent"],
            average_order_value=summary["averageOrderValue"],
            delivered_orders=summary["deliveredOrders"],
            paid_orders=summary["paidOrders"],
            pending_orders=summary["pendingOrders"],
            delivery_rate=(summary["deliveredOrders"] / summary["totalOrders"]) * 100 if summary["totalOrders"] > 0 else 0,
        )
        ranking = top_products(orders)
        months = monthly_spending(orders, now)

        period_text = PERIOD_LABELS.get(period, "all time")

        return OrderStatisticsResult(
            success=True,
            period=period,
            statistics=statistics,
            top_products=ranking,
            monthly_spending=months,
            message=f"Order statistics for {period_text}: {statistics.total_orders} orders, {money(statistics.total_spent)} total spent",
            raw_data={
                "orders": [o.to_summary() for o in orders],
                "statistics": statistics.model_dump(by_alias=True),
                "topProducts": ranking,
                "monthlySpending": months
            }
        )

    except Exception as e:
        logger.error(f"Error in get_order_statistics tool: {e}")
        return OrderStatisticsResult(
            success=False,
            period=period,
            message=f"Error retrieving order statistics: {e}",
            error_kind=error_kind_for(e)
        )
