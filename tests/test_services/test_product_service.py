"""
Unit tests for catalog tools (search_products, find_top_rated_low_stock)

Author: TM3
Date: 2026-10-17
"""
import pytest

from shopassist.services.product_service import find_top_rated_low_stock, search_products


class TestSearchProducts:
    """Test search with client-side filters"""

    @pytest.mark.asyncio
    async def test_keyword_search(self, ctx):
        result = await search_products(ctx, query="phone")

        assert result.success is True
        assert [p.id for p in result.products] == ["p1", "p2"]
        assert result.total_results == 2
        assert result.message == 'Found 2 products matching "phone"'

    @pytest.mark.asyncio
    async def test_price_range_keeps_server_order(self, ctx):
        result = await search_products(ctx, price_min=50, price_max=600)

        assert [p.id for p in result.products] == ["p1", "p2", "p6"]
        assert result.message == "Found 3 products priced between $50 and $600"

    @pytest.mark.asyncio
    async def test_filters_are_conjunctive(self, ctx):
        result = await search_products(ctx, category="electronics", min_rating=4.5, price_max=100)

        assert [p.id for p in result.products] == ["p1"]
        assert result.message == (
            'Found 1 product priced between $0 and $100, in category "electronics", with 4.5+ star rating'
        )

    @pytest.mark.asyncio
    async def test_every_product_satisfies_filters(self, ctx):
        result = await search_products(ctx, price_min=30, min_rating=3)

        assert result.products
        for product in result.products:
            assert product.price >= 30
            assert product.rating >= 3

    @pytest.mark.asyncio
    async def test_raw_data_echoes_filters(self, ctx):
        result = await search_products(ctx, query="x", price_min=1)

        assert result.to_dict()["rawData"] == {
            "filters": {"query": "x", "priceMin": 1, "priceMax": None, "category": None, "minRating": None}
        }

    @pytest.mark.asyncio
    async def test_api_failure_is_failure_envelope(self, ctx, storefront):
        storefront.fail_search = True

        result = await search_products(ctx, query="phone")
        data = result.to_dict()

        assert data["success"] is False
        assert data["products"] == []
        assert data["totalResults"] == 0
        assert data["errorKind"] == "http"
        assert data["message"] == "Error searching products: API request failed with status 500"


class TestFindTopRatedLowStock:
    """Test the restock finder"""

    @pytest.mark.asyncio
    async def test_defaults(self, ctx):
        result = await find_top_rated_low_stock(ctx)

        assert result.success is True
        assert [p.id for p in result.products] == ["p1", "p2"]
        assert result.message == (
            "Found 2 top-rated products with low stock (≤ 10 units). Rating threshold: ≥ 4 stars"
        )
        assert len(result.raw_data["allSearchResults"]) == 3

    @pytest.mark.asyncio
    async def test_sorted_by_rating_descending(self, ctx):
        result = await find_top_rated_low_stock(ctx, min_rating=0, max_stock_level=10)

        ratings = [p.rating for p in result.products]
        assert ratings == sorted(ratings, reverse=True)
        assert all(p.count_in_stock <= 10 for p in result.products)

    @pytest.mark.asyncio
    async def test_no_candidates_is_success(self, ctx):
        result = await find_top_rated_low_stock(ctx, min_rating=5, category="Books")

        assert result.success is True
        assert result.products == []
        assert result.message == "No products found with rating ≥ 5 and stock ≤ 10 in Books category"

    @pytest.mark.asyncio
    async def test_search_failure_propagates(self, ctx, storefront):
        storefront.fail_search = True

        result = await find_top_rated_low_stock(ctx)

        assert result.success is False
        assert result.error_kind == "http"
        assert result.criteria == {"minRating": 4.0, "maxStockLevel": 10, "category": None}
