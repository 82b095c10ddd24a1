"""
Tests for offset-based pagination strategy.

Tests the page-number based pagination with count caching.
"""

import pytest

from docpager.constants import COUNT_CACHE_NAMESPACE
from docpager.exceptions import InvalidArgument
from docpager.schemas.request import OffsetPageRequest, PaginationConfig, SortDirection
from docpager.storage.pagination.offset import (
    OffsetPaginationStrategy,
    build_pagination_links,
)
from tests.mocks.store_mocks import CountingDocumentStore, make_documents


class TestOffsetPaginationStrategy:
    """Tests for OffsetPaginationStrategy."""

    @pytest.mark.asyncio
    async def test_paginate_first_page(self, gateway):
        """Test first page of five documents, two per page."""
        store = CountingDocumentStore(make_documents(1, 2, 3, 4, 5))
        strategy = OffsetPaginationStrategy(gateway)

        page = await strategy.paginate(store, {}, {"page": 1, "perPage": 2})

        assert [d["id"] for d in page.results] == [1, 2]
        assert page.page == 1
        assert page.per_page == 2
        assert page.total == 5
        assert page.total_pages == 3
        assert page.pagination.model_dump() == {"next": {"page": 2, "size": 2}}

    @pytest.mark.asyncio
    async def test_paginate_middle_page(self, article_store, gateway):
        """Test a middle page has both links."""
        strategy = OffsetPaginationStrategy(gateway)

        page = await strategy.paginate(
            article_store, {}, {"page": 2, "per_page": 3}
        )

        assert [d["id"] for d in page.results] == [4, 5, 6]
        assert page.total_pages == 4
        assert page.pagination.model_dump() == {
            "next": {"page": 3, "size": 3},
            "prev": {"page": 1, "size": 3},
        }
        assert article_store.find_calls[-1]["skip"] == 3
        assert article_store.find_calls[-1]["limit"] == 3

    @pytest.mark.asyncio
    async def test_paginate_last_page(self, article_store, gateway):
        """Test last page has a null next page and partial results."""
        strategy = OffsetPaginationStrategy(gateway)

        page = await strategy.paginate(
            article_store, {}, {"page": 4, "per_page": 3}
        )

        assert [d["id"] for d in page.results] == [10]
        assert page.pagination.next.page is None
        assert page.pagination.next.size == 3
        assert page.pagination.prev.page == 3

    @pytest.mark.asyncio
    async def test_paginate_beyond_last_page(self, article_store, gateway):
        """Test a page past the end is empty, not an error."""
        strategy = OffsetPaginationStrategy(gateway)

        page = await strategy.paginate(
            article_store, {}, {"page": 10, "per_page": 5}
        )

        assert page.results == []
        assert page.total == 10
        assert page.pagination.next.page is None
        assert page.pagination.prev.page == 9

    @pytest.mark.asyncio
    async def test_paginate_empty_store(self, gateway):
        """Test empty collection yields zero pages."""
        store = CountingDocumentStore([])
        strategy = OffsetPaginationStrategy(gateway)

        page = await strategy.paginate(store)

        assert page.results == []
        assert page.total == 0
        assert page.total_pages == 0
        assert page.pagination.model_dump() == {
            "next": {"page": None, "size": 10}
        }

    @pytest.mark.asyncio
    async def test_paginate_defaults(self, article_store, gateway):
        """Test page=1 and the configured per_page are used by default."""
        strategy = OffsetPaginationStrategy(
            gateway, PaginationConfig(default_per_page=4)
        )

        page = await strategy.paginate(article_store)

        assert page.page == 1
        assert page.per_page == 4
        assert len(page.results) == 4
        assert article_store.find_calls[-1]["sort"] is None

    @pytest.mark.asyncio
    async def test_paginate_accepts_request_model(self, article_store, gateway):
        """Test an OffsetPageRequest is used as-is."""
        strategy = OffsetPaginationStrategy(gateway)

        page = await strategy.paginate(
            article_store, None, OffsetPageRequest(page=3, per_page=4)
        )

        assert [d["id"] for d in page.results] == [9, 10]

    @pytest.mark.asyncio
    async def test_paginate_with_sort_descending(self, article_store, gateway):
        """Test sort field is applied with the id as tie-breaker."""
        strategy = OffsetPaginationStrategy(gateway)

        page = await strategy.paginate(
            article_store,
            {},
            {"page": 1, "per_page": 3, "sortField": "title", "sortDirection": -1},
        )

        assert article_store.find_calls[-1]["sort"] == [
            ("title", SortDirection.DESC),
            ("id", SortDirection.DESC),
        ]
        # "Article 9" > "Article 8" > ... > "Article 10" lexically
        assert [d["id"] for d in page.results] == [9, 8, 7]

    @pytest.mark.asyncio
    async def test_paginate_with_filter(self, gateway):
        """Test filter is passed through to both count and find."""
        store = CountingDocumentStore(
            make_documents(1, 2, 3, status="live")
            + make_documents(4, 5, status="draft")
        )
        strategy = OffsetPaginationStrategy(gateway)

        page = await strategy.paginate(store, {"status": "draft"})

        assert [d["id"] for d in page.results] == [4, 5]
        assert page.total == 2
        assert store.count_calls == [{"status": "draft"}]
        assert store.find_calls[0]["filter"] == {"status": "draft"}


class TestOffsetCountCache:
    """Tests for the total count cache."""

    @pytest.mark.asyncio
    async def test_count_cached_between_calls(self, article_store, gateway):
        """Test identical (model, filter) issues exactly one count query."""
        strategy = OffsetPaginationStrategy(gateway)

        await strategy.paginate(article_store, {"status": "live"}, {"page": 1})
        await strategy.paginate(article_store, {"status": "live"}, {"page": 2})

        assert len(article_store.count_calls) == 1
        # Page data is never cached
        assert len(article_store.find_calls) == 2

    @pytest.mark.asyncio
    async def test_count_cache_ignores_key_order(self, gateway):
        """Test logically identical filters share the cached count."""
        store = CountingDocumentStore(make_documents(1, 2, status="live", lang="en"))
        strategy = OffsetPaginationStrategy(gateway)

        await strategy.paginate(store, {"status": "live", "lang": "en"})
        await strategy.paginate(store, {"lang": "en", "status": "live"})

        assert len(store.count_calls) == 1

    @pytest.mark.asyncio
    async def test_count_cache_per_filter(self, article_store, gateway):
        """Test different filters are counted separately."""
        strategy = OffsetPaginationStrategy(gateway)

        await strategy.paginate(article_store, {"status": "live"})
        await strategy.paginate(article_store, {"status": "draft"})

        assert len(article_store.count_calls) == 2

    @pytest.mark.asyncio
    async def test_count_cache_per_model(self, gateway):
        """Test the same filter on different models does not collide."""
        articles = CountingDocumentStore(make_documents(1, 2), name="Article")
        comments = CountingDocumentStore(make_documents(1), name="Comment")
        strategy = OffsetPaginationStrategy(gateway)

        first = await strategy.paginate(articles, {})
        second = await strategy.paginate(comments, {})

        assert first.total == 2
        assert second.total == 1

    @pytest.mark.asyncio
    async def test_count_cache_expires(self, article_store, gateway, clock):
        """Test the count is queried again once the TTL has passed."""
        strategy = OffsetPaginationStrategy(gateway)

        await strategy.paginate(article_store, {})
        clock.advance(61)
        await strategy.paginate(article_store, {})

        assert len(article_store.count_calls) == 2

    @pytest.mark.asyncio
    async def test_stale_total_within_ttl(self, gateway):
        """Test a cached total is served even after the collection grows."""
        store = CountingDocumentStore(make_documents(1, 2, 3))
        strategy = OffsetPaginationStrategy(gateway)

        await strategy.paginate(store, {}, {"per_page": 2})
        store.insert({"id": 4, "title": "Article 4"})
        page = await strategy.paginate(store, {}, {"per_page": 2})

        assert page.total == 3
        assert page.total_pages == 2

    @pytest.mark.asyncio
    async def test_count_bypass(self, article_store, bypass_gateway):
        """Test every call counts when caching is disabled."""
        strategy = OffsetPaginationStrategy(bypass_gateway)

        for _ in range(3):
            await strategy.paginate(article_store, {})

        assert len(article_store.count_calls) == 3
        assert len(article_store.find_calls) == 3

    @pytest.mark.asyncio
    async def test_cached_zero_total_is_a_hit(self, gateway):
        """Test a cached total of zero does not trigger a new count."""
        store = CountingDocumentStore([])
        strategy = OffsetPaginationStrategy(gateway)

        await strategy.paginate(store, {})
        await strategy.paginate(store, {})

        assert len(store.count_calls) == 1

    @pytest.mark.asyncio
    async def test_invalid_cached_total_is_recounted(
        self, article_store, gateway, cache_store
    ):
        """Test a corrupt cached total is ignored."""
        strategy = OffsetPaginationStrategy(gateway)
        key = gateway.make_key("Article", {})
        await cache_store.put(COUNT_CACHE_NAMESPACE, key, "not-a-number", 60)

        page = await strategy.paginate(article_store, {})

        assert page.total == 10
        assert len(article_store.count_calls) == 1


class TestOffsetValidation:
    """Tests for argument validation before any I/O."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "options",
        [
            {"page": 0},
            {"page": -1},
            {"page": 1.5},
            {"page": "2"},
            {"page": True},
            {"per_page": 0},
            {"perPage": -5},
            {"per_page": 2.0},
            {"sort_direction": "sideways"},
        ],
    )
    async def test_invalid_options(self, article_store, gateway, options):
        """Test invalid options fail with InvalidArgument and no store access."""
        strategy = OffsetPaginationStrategy(gateway)

        with pytest.raises(InvalidArgument):
            await strategy.paginate(article_store, {}, options)

        assert article_store.count_calls == []
        assert article_store.find_calls == []

    @pytest.mark.asyncio
    async def test_options_must_be_mapping(self, article_store, gateway):
        """Test non-mapping options are rejected."""
        strategy = OffsetPaginationStrategy(gateway)

        with pytest.raises(InvalidArgument):
            await strategy.paginate(article_store, {}, [("page", 1)])

    @pytest.mark.asyncio
    async def test_unserializable_filter(self, article_store, gateway):
        """Test a filter that cannot be serialized fails before I/O."""
        strategy = OffsetPaginationStrategy(gateway)

        with pytest.raises(InvalidArgument):
            await strategy.paginate(article_store, {"status": object()})

        assert article_store.count_calls == []


class TestBuildPaginationLinks:
    """Tests for build_pagination_links."""

    @pytest.mark.parametrize(
        "page,total_pages,next_page,prev_page",
        [
            (1, 3, 2, None),
            (2, 3, 3, 1),
            (3, 3, None, 2),
            (1, 1, None, None),
            (1, 0, None, None),
            (5, 3, None, 4),
        ],
    )
    def test_links(self, page, total_pages, next_page, prev_page):
        """Test next is null iff page >= total_pages and prev absent iff page 1."""
        links = build_pagination_links(page, 10, total_pages)
        dumped = links.model_dump()

        assert dumped["next"] == {"page": next_page, "size": 10}
        if prev_page is None:
            assert "prev" not in dumped
        else:
            assert dumped["prev"] == {"page": prev_page, "size": 10}
