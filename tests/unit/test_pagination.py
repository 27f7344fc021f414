# =============================================================================
# tests/unit/test_pagination.py
# Unit Tests for PaginatedCollectionLoader
# =============================================================================

import threading
from unittest.mock import MagicMock

import pytest


def page_payload(page, page_size=25, total=142):
    start = (page - 1) * page_size
    count = max(0, min(page_size, total - start))
    return {"data": [{"id": start + i + 1} for i in range(count)], "total": total}


@pytest.fixture
def paged_client():
    """Client whose GET returns the page implied by the offset"""
    client = MagicMock()

    def call(method, path, params=None, **kwargs):
        page = params["offset"] // params["limit"] + 1
        return page_payload(page, params["limit"])

    client.call.side_effect = call
    return client


class TestPaginatedLoaderBasics:
    """Test load/next/prev transitions"""

    def test_initial_state_is_idle(self, paged_client):
        from fieldsync_core.sync import LoadStatus, PaginatedCollectionLoader

        loader = PaginatedCollectionLoader(paged_client, "/post-delivery", page_size=25)

        assert loader.status == LoadStatus.IDLE
        assert loader.state.items == ()
        assert loader.state.page == 1
        paged_client.call.assert_not_called()

    def test_load_computes_offset(self, paged_client):
        from fieldsync_core.sync import LoadStatus, PaginatedCollectionLoader

        loader = PaginatedCollectionLoader(paged_client, "/post-delivery", page_size=25)
        loader.load(3)

        paged_client.call.assert_called_with("GET", "/post-delivery", params={"limit": 25, "offset": 50})
        assert loader.status == LoadStatus.LOADED
        assert loader.state.page == 3
        assert loader.state.total == 142
        assert loader.state.items[0]["id"] == 51
        assert not loader.state.loading

    def test_page_count_and_upper_bound(self, paged_client):
        """142 items at 25 per page -> 6 pages; next_page() at 6 stays at 6"""
        from fieldsync_core.sync import PaginatedCollectionLoader

        loader = PaginatedCollectionLoader(paged_client, "/post-delivery", page_size=25)
        loader.load(6)
        calls_before = paged_client.call.call_count

        assert loader.state.total_pages == 6
        assert len(loader.state.items) == 17
        assert loader.next_page() is False
        assert loader.state.page == 6
        assert paged_client.call.call_count == calls_before

    def test_prev_page_is_noop_at_first_page(self, paged_client):
        from fieldsync_core.sync import PaginatedCollectionLoader

        loader = PaginatedCollectionLoader(paged_client, "/post-delivery", page_size=25)
        loader.load(1)

        assert loader.prev_page() is False
        assert paged_client.call.call_count == 1

    def test_next_and_prev(self, paged_client):
        from fieldsync_core.sync import PaginatedCollectionLoader

        loader = PaginatedCollectionLoader(paged_client, "/post-delivery", page_size=25)
        loader.load(1)
        loader.next_page()
        loader.next_page()
        loader.prev_page()

        assert loader.state.page == 2

    def test_load_past_end_is_clamped(self, paged_client):
        from fieldsync_core.sync import PaginatedCollectionLoader

        loader = PaginatedCollectionLoader(paged_client, "/post-delivery", page_size=25)
        loader.load(1)
        loader.load(40)

        assert loader.state.page == 6
        paged_client.call.assert_called_with("GET", "/post-delivery", params={"limit": 25, "offset": 125})

    def test_first_load_past_end_fetches_last_page(self):
        """Before any total is known, a page past the end lands on the last real page"""
        from fieldsync_core.sync import PaginatedCollectionLoader

        client = MagicMock()
        client.call.side_effect = lambda method, path, params=None, **kw: page_payload(
            params["offset"] // params["limit"] + 1, params["limit"], total=50
        )
        loader = PaginatedCollectionLoader(client, "/post-delivery", page_size=25)

        assert loader.load(5)

        assert loader.state.page == 2
        assert loader.state.total == 50
        assert [item["id"] for item in loader.state.items] == list(range(26, 51))
        client.call.assert_called_with("GET", "/post-delivery", params={"limit": 25, "offset": 25})

    def test_shrunk_collection_reloads_last_page(self, paged_client):
        from fieldsync_core.sync import PaginatedCollectionLoader

        loader = PaginatedCollectionLoader(paged_client, "/post-delivery", page_size=25)
        loader.load(6)
        paged_client.call.side_effect = lambda method, path, params=None, **kw: page_payload(
            params["offset"] // params["limit"] + 1, params["limit"], total=60
        )

        loader.refresh()

        assert loader.state.page == 3
        assert [item["id"] for item in loader.state.items] == list(range(51, 61))

    def test_items_never_exceed_page_size(self):
        from fieldsync_core.sync import PaginatedCollectionLoader

        client = MagicMock()
        client.call.return_value = {"data": [{"id": i} for i in range(40)], "total": 40}
        loader = PaginatedCollectionLoader(client, "/post-delivery", page_size=25)
        loader.load(1)

        assert len(loader.state.items) == 25

    def test_item_factory_builds_records(self, make_post_delivery_rows):
        from fieldsync_core.models import PostDeliveryRecord
        from fieldsync_core.sync import PaginatedCollectionLoader

        client = MagicMock()
        client.call.return_value = {"data": make_post_delivery_rows(1, 3), "total": 3}
        loader = PaginatedCollectionLoader(
            client, "/post-delivery", page_size=25, item_factory=PostDeliveryRecord.from_dict
        )
        loader.load(1)

        assert all(isinstance(r, PostDeliveryRecord) for r in loader.state.items)
        assert loader.state.items[1].child_diseases == ("Jaundice",)

    def test_empty_collection_has_one_page(self):
        from fieldsync_core.sync import PaginatedCollectionLoader

        client = MagicMock()
        client.call.return_value = {"data": [], "total": 0}
        loader = PaginatedCollectionLoader(client, "/post-delivery", page_size=25)
        loader.load(1)

        assert loader.state.total_pages == 1
        assert loader.next_page() is False


class TestPaginatedLoaderFailures:
    """Test error handling"""

    def test_failure_keeps_previous_items(self, paged_client):
        from fieldsync_core.errors import ServerError
        from fieldsync_core.sync import LoadStatus, PaginatedCollectionLoader

        loader = PaginatedCollectionLoader(paged_client, "/post-delivery", page_size=25)
        loader.load(2)
        previous_items = loader.state.items

        paged_client.call.side_effect = ServerError("HTTP 500")
        assert loader.load(3) is False

        assert loader.status == LoadStatus.FAILED
        assert loader.state.error == "HTTP 500"
        assert loader.state.items == previous_items
        assert loader.state.page == 2
        assert not loader.state.loading

    def test_success_clears_error(self, paged_client):
        from fieldsync_core.errors import ServerError
        from fieldsync_core.sync import PaginatedCollectionLoader

        loader = PaginatedCollectionLoader(paged_client, "/post-delivery", page_size=25)
        good = paged_client.call.side_effect
        paged_client.call.side_effect = ServerError("HTTP 502")
        loader.load(1)
        paged_client.call.side_effect = good
        loader.refresh()

        assert loader.state.error is None
        assert len(loader.state.items) == 25

    def test_malformed_payload_is_failure(self):
        from fieldsync_core.sync import PaginatedCollectionLoader

        client = MagicMock()
        client.call.return_value = {"data": "oops", "total": 3}
        loader = PaginatedCollectionLoader(client, "/post-delivery", page_size=25)

        assert loader.load(1) is False
        assert loader.state.error.startswith("Malformed response")


class TestPaginatedLoaderSupersession:
    """Test last-requested-page-wins"""

    def test_earlier_call_finishing_last_is_discarded(self):
        """load(2) answers after load(3); the final state is page 3"""
        from fieldsync_core.sync import PaginatedCollectionLoader

        release_page_2 = threading.Event()
        page_2_started = threading.Event()

        def call(method, path, params=None, **kwargs):
            page = params["offset"] // params["limit"] + 1
            if page == 2:
                page_2_started.set()
                release_page_2.wait(timeout=5)
            return page_payload(page)

        client = MagicMock()
        client.call.side_effect = call
        loader = PaginatedCollectionLoader(client, "/post-delivery", page_size=25)

        results = {}
        slow = threading.Thread(target=lambda: results.setdefault(2, loader.load(2)))
        slow.start()
        page_2_started.wait(timeout=5)

        results[3] = loader.load(3)
        release_page_2.set()
        slow.join()

        assert results[3] is True
        assert results[2] is False
        assert loader.state.page == 3
        assert loader.state.items[0]["id"] == 51
        assert not loader.state.loading

    def test_superseded_failure_is_discarded(self):
        """A stale error never overwrites a newer successful load"""
        from fieldsync_core.errors import ServerError
        from fieldsync_core.sync import PaginatedCollectionLoader

        release = threading.Event()
        started = threading.Event()

        def call(method, path, params=None, **kwargs):
            page = params["offset"] // params["limit"] + 1
            if page == 4:
                started.set()
                release.wait(timeout=5)
                raise ServerError("HTTP 500")
            return page_payload(page)

        client = MagicMock()
        client.call.side_effect = call
        loader = PaginatedCollectionLoader(client, "/post-delivery", page_size=25)

        slow = threading.Thread(target=loader.load, args=(4,))
        slow.start()
        started.wait(timeout=5)
        loader.load(5)
        release.set()
        slow.join()

        assert loader.state.page == 5
        assert loader.state.error is None
