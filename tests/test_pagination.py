"""Tests for paginated scaffolds and page derivation."""

from __future__ import annotations

import pytest
from conftest import ALL_DOGS, BOXERS, DOGS_URL, make_test_provider

from ur_scaffold.errors import TransportError
from ur_scaffold.scaffold.pagination import (
    PaginatedScaffold,
    derive_last_page,
    page_range,
)


class TestDeriveLastPage:
    def test_total_pages_header(self):
        assert derive_last_page({"x-total-pages": "4"}) == 4

    def test_total_pages_wins_over_total_count(self):
        assert derive_last_page({"x-total-pages": "2", "x-total-count": "100"}, limit=5) == 2

    def test_total_count_with_configured_limit(self):
        assert derive_last_page({"x-total-count": "23"}, limit=5) == 5

    def test_total_count_with_per_page_header(self):
        assert derive_last_page({"x-total-count": "20", "x-per-page": "10"}) == 2

    def test_total_count_without_page_size_is_no_signal(self):
        assert derive_last_page({"x-total-count": "20"}) is None

    def test_zero_total_still_has_first_page(self):
        assert derive_last_page({"x-total-count": "0"}, limit=5) == 1
        assert derive_last_page({"x-total-pages": "0"}) == 1

    def test_missing_signal(self):
        assert derive_last_page({}) is None

    def test_malformed_values_ignored(self, caplog):
        assert derive_last_page({"x-total-pages": "many"}) is None
        assert derive_last_page({"x-total-pages": "-3"}) is None
        assert "malformed" in caplog.text

    def test_page_range(self):
        assert page_range(4) == [1, 2, 3, 4]
        assert page_range(1) == [1]


class TestPaginatedScaffold:
    @pytest.mark.asyncio
    async def test_gets_first_page(self, provider, transport):
        transport.expect_get(DOGS_URL + "?page=1").respond(ALL_DOGS)
        s = provider.resolve("Dogs", {"paginate": True})
        await s.wait_idle()

        assert isinstance(s, PaginatedScaffold)
        assert s.current == 1
        assert s.pagination.limit is None
        transport.verify_no_outstanding_expectation()

    @pytest.mark.asyncio
    async def test_merges_page_and_query(self, provider, transport):
        transport.expect_get(DOGS_URL + "?breed=boxer&page=1").respond(BOXERS)
        s = provider.resolve("Dogs", {"paginate": True, "query": {"breed": "boxer"}})
        await s.wait_idle()

        assert s.items == BOXERS
        transport.verify_no_outstanding_expectation()

    @pytest.mark.asyncio
    async def test_returns_array_of_pages(self, provider, transport):
        transport.when_get(DOGS_URL + "?page=1").respond(BOXERS, headers={"X-Total-Pages": "4"})
        s = provider.resolve("Dogs", {"paginate": True})
        await s.wait_idle()

        assert s.pages == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_gets_given_page(self, provider, transport):
        transport.when_get(DOGS_URL + "?page=1").respond(BOXERS, headers={"X-Total-Pages": "4"})
        s = provider.resolve("Dogs", {"paginate": True})
        await s.wait_idle()

        transport.expect_get(DOGS_URL + "?page=4").respond(ALL_DOGS, headers={"X-Total-Pages": "4"})
        records = await s.page(4)

        assert records == ALL_DOGS
        assert s.items == ALL_DOGS
        assert s.current == 4
        assert s.pages == [1, 2, 3, 4]
        transport.verify_no_outstanding_expectation()

    @pytest.mark.asyncio
    async def test_custom_page_size(self, provider, transport):
        transport.expect_get(DOGS_URL + "?limit=5&page=1").respond(
            ALL_DOGS, headers={"X-Total-Count": "23"}
        )
        s = provider.resolve("Dogs", {"paginate": {"limit": 5}})
        await s.wait_idle()

        assert s.pagination.limit == 5
        assert s.pages == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_configured_start_page(self, provider, transport):
        transport.expect_get(DOGS_URL + "?limit=5&page=3").respond([])
        s = provider.resolve("Dogs", {"paginate": {"limit": 5, "page": 3}})
        await s.wait_idle()

        assert s.current == 3
        transport.verify_no_outstanding_expectation()

    @pytest.mark.asyncio
    async def test_pages_recomputed_not_appended(self, provider, transport):
        transport.expect_get(DOGS_URL + "?page=1").respond(ALL_DOGS, headers={"X-Total-Pages": "4"})
        transport.expect_get(DOGS_URL + "?page=2").respond(ALL_DOGS, headers={"X-Total-Pages": "2"})
        s = provider.resolve("Dogs", {"paginate": True})
        await s.wait_idle()
        await s.page(2)

        assert s.pages == [1, 2]

    @pytest.mark.asyncio
    async def test_pages_kept_when_signal_absent(self, provider, transport):
        transport.expect_get(DOGS_URL + "?page=1").respond(ALL_DOGS, headers={"X-Total-Pages": "3"})
        transport.expect_get(DOGS_URL + "?page=2").respond(BOXERS)
        s = provider.resolve("Dogs", {"paginate": True})
        await s.wait_idle()
        await s.page(2)

        assert s.items == BOXERS
        assert s.pages == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_pages_unknown_before_any_signal(self, provider, transport):
        transport.when_get(DOGS_URL + "?page=1").respond(ALL_DOGS)
        s = provider.resolve("Dogs", {"paginate": True})
        await s.wait_idle()
        assert s.pages == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad", [0, -2, 1.5, True, "2"])
    async def test_invalid_page_rejected_without_request(self, provider, transport, bad):
        transport.when_get(DOGS_URL + "?page=1").respond(ALL_DOGS)
        s = provider.resolve("Dogs", {"paginate": True})
        await s.wait_idle()

        with pytest.raises(ValueError, match="positive integer"):
            s.page(bad)
        assert s.current == 1
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_page_failure_clears_loading(self, provider, transport):
        transport.when_get(DOGS_URL + "?page=1").respond(ALL_DOGS, headers={"X-Total-Pages": "2"})
        transport.when_get(DOGS_URL + "?page=2").respond(None, status=500)
        s = provider.resolve("Dogs", {"paginate": True})
        await s.wait_idle()

        task = s.page(2)
        assert s.ui.loading is True
        await s.wait_idle()
        assert task.exception() is not None
        assert s.ui.loading is False
        assert s.items == ALL_DOGS
        assert s.pages == [1, 2]

    @pytest.mark.asyncio
    async def test_page_keeps_current_when_query_cannot_compose(self, provider, transport):
        transport.when_get(DOGS_URL + "?page=1").respond(ALL_DOGS, headers={"X-Total-Pages": "4"})
        s = provider.resolve("Dogs", {"paginate": True})
        await s.wait_idle()

        s.query = {"breed": ["boxer", "pug"]}
        with pytest.raises(ValueError, match="scalars"):
            s.page(3)
        assert s.current == 1
        assert s.ui.loading is False
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_failed_newer_page_keeps_older_page_out(self, held_transport):
        provider = make_test_provider(held_transport)
        held_transport.when_get(DOGS_URL + "?breed=boxer&page=1").respond(BOXERS)
        held_transport.when_get(DOGS_URL + "?breed=boxer&page=4").respond(None, status=500)

        s = provider.resolve("Dogs", {"paginate": True, "query": {"breed": "boxer"}})
        newer = s.page(4)
        await held_transport.flush(newest_first=True)

        with pytest.raises(TransportError):
            await newer
        assert s.current == 4
        assert s.items == []
        assert s.last_error is not None
        assert s.last_error.status == 500

    @pytest.mark.asyncio
    async def test_plain_scaffold_has_no_paging(self, provider, transport):
        transport.when_get(DOGS_URL).respond(ALL_DOGS)
        s = provider.resolve("Dogs", {"paginate": False})
        await s.wait_idle()

        assert not isinstance(s, PaginatedScaffold)
        assert not hasattr(s, "page")
