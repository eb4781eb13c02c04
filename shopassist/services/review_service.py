"""
Review Tools

Hand a product's reviews to Claude in a compact structured form, for
summaries, pros/cons extraction and free-form questions. The analysis
itself is done by the model; these tools only fetch and shape.

Author: TM3
Date: 2026-10-16
"""
import logging
from typing import Optional

from shopassist.core.exceptions import ToolValidationError, error_kind_for
from shopassist.domain.product import Product
from shopassist.domain.results import ReviewsResult
from shopassist.services.formatting import plural
from shopassist.services.tool_context import ToolContext

logger = logging.getLogger(__name__)


async def _load_reviews(ctx: ToolContext, product_id: Optional[str]):
    if not product_id:
        raise ToolValidationError("Product ID is required")

    product = Product.model_validate(await ctx.connector.get_product(product_id))
    now = ctx.now()
    reviews = [review.to_summary(now) for review in product.reviews]

    raw_product = {
        "id": product.id,
        "name": product.name,
        "rating": product.rating,
        "numReviews": product.num_reviews,
    }
    if reviews:
        raw_product.update({"price": product.price, "category": product.category})

    return product, reviews, {"product": raw_product, "reviews": reviews}


async def generate_review_summary(
    ctx: ToolContext,
    product_id: Optional[str] = None,
    question: Optional[str] = None
) -> ReviewsResult:
    """Reviews of a product, optionally framed by a question, for summarising"""
    try:
        product, reviews, raw = await _load_reviews(ctx, product_id)

        if not reviews:
            message = "This product has no reviews to analyze."
        else:
            action = "Retrieved reviews for question about" if question else "Retrieved reviews for analysis of"
            message = f'{action} "{product.name}" - {plural(len(reviews), "review")} available'

        return ReviewsResult(
            success=True,
            product_id=product_id,
            product_name=product.name,
            question=question or None,
            reviews=reviews,
            review_count=len(reviews),
            average_rating=product.rating or 0,
            message=message,
            raw_data=raw
        )

    except Exception as e:
        logger.error(f"Error in generate_review_summary tool: {e}")
        return ReviewsResult(
            success=False,
            product_id=product_id or None,
            question=question or None,
            message=f"Error retrieving reviews: {e}",
            error_kind=error_kind_for(e)
        )


async def get_pros_and_cons(ctx: ToolContext, product_id: Optional[str] = None) -> ReviewsResult:
    """Reviews of a product, for pros/cons extraction"""
    try:
        product, reviews, raw = await _load_reviews(ctx, product_id)

        if not reviews:
            message = f'No reviews available for "{product.name}" to extract pros and cons.'
        else:
            message = f'Retrieved {plural(len(reviews), "review")} for pros/cons analysis of "{product.name}"'

        return ReviewsResult(
            success=True,
            product_id=product_id,
            product_name=product.name,
            reviews=reviews,
            review_count=len(reviews),
            average_rating=product.rating or 0,
            message=message,
            raw_data=raw
        )

    except Exception as e:
        logger.error(f"Error in get_pros_and_cons tool: {e}")
        return ReviewsResult(
            success=False,
            product_id=product_id or None,
            message=f"Error retrieving reviews for pros/cons analysis: {e}",
            error_kind=error_kind_for(e)
        )


async def ask_about_reviews(
    ctx: ToolContext,
    product_id: Optional[str] = None,
    question: Optional[str] = None
) -> ReviewsResult:
    """Reviews of a product, to answer a specific question about them"""
    try:
        if product_id and not question:
            raise ToolValidationError("Question is required")

        product, reviews, raw = await _load_reviews(ctx, product_id)

        if not reviews:
            message = f'No reviews available for "{product.name}" to answer the question.'
        else:
            message = f'Retrieved {plural(len(reviews), "review")} to answer question about "{product.name}"'

        return ReviewsResult(
            success=True,
            product_id=product_id,
            product_name=product.name,
            question=question,
            reviews=reviews,
            review_count=len(reviews),
            average_rating=product.rating or 0,
            message=message,
            raw_data=raw
        )

    except Exception as e:
        logger.error(f"Error in ask_about_reviews tool: {e}")
        return ReviewsResult(
            success=False,
            product_id=product_id or None,
            question=question or None,
            message=f"Error retrieving reviews to answer question: {e}",
            error_kind=error_kind_for(e)
        )
