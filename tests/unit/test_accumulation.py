"""
Unit tests for accumulation.

Tests option validation, page size resolution, deduplication, the total
limit, last-page detection and the list/callback delivery modes.
"""

import pytest
from types import SimpleNamespace
from pydantic import BaseModel

from kappa_client.accumulation import AccumulationOptions, Accumulator, accumulate, resolve_factory
from kappa_client.runtime.errors import ArgumentError, DecodeError
from kappa_client.v5.models import User


def item(identity):
    return {"_id": identity, "name": f"item-{identity}"}


def page(ids, total=None, field="follows"):
    result = {field: [item(i) for i in ids]}
    if total is not None:
        result["_total"] = total
    return result


def make(data):
    return SimpleNamespace(id=data["_id"], name=data["name"])


def options(**kwargs):
    defaults = {"path": "channels/1/follows", "json": "follows", "create": make}
    defaults.update(kwargs)
    return AccumulationOptions(**defaults)


class TestValidation:
    """Tests for required options."""

    @pytest.mark.parametrize("missing", ["path", "json", "create"])
    def test_required_option(self, connection, session, missing):
        """Test a missing required option fails before any request."""
        with pytest.raises(ArgumentError) as exc_info:
            Accumulator(connection).run(options(**{missing: None}))
        assert exc_info.value.argument == missing
        session.get.assert_not_called()

    def test_non_positive_limit(self, connection, session):
        """Test a zero limit is rejected."""
        with pytest.raises(ArgumentError):
            Accumulator(connection).run(options(limit=0))
        session.get.assert_not_called()

    def test_negative_offset(self, connection, session):
        """Test a negative offset is rejected."""
        with pytest.raises(ArgumentError):
            Accumulator(connection).run(options(offset=-5))
        session.get.assert_not_called()


class TestPageSize:
    """Tests for page size and offset resolution."""

    def test_default_page_size(self):
        assert options().page_limit == 100

    def test_small_limit_sets_page_size(self):
        assert options(limit=20).page_limit == 20

    def test_large_limit_is_capped(self):
        assert options(limit=1000).page_limit == 100

    def test_offset_and_limit_in_query(self, connection, responses):
        """Test the first request uses the resolved page size and offset."""
        responses.add(page([]))
        Accumulator(connection).run(options(limit=20, offset=40))
        assert responses.urls[0].endswith("channels/1/follows?limit=20&offset=40")


class TestAccumulation:
    """Tests for Accumulator.run."""

    def test_collects_until_short_page(self, connection, responses):
        """Test pages of 100, 100 and 37 items yield 237 objects."""
        responses.add(page(range(0, 100)))
        responses.add(page(range(100, 200)))
        responses.add(page(range(200, 237)))
        result = Accumulator(connection).run(options())
        assert len(result) == 237
        assert [o.id for o in result] == list(range(237))
        assert len(responses.requests) == 3
        assert [u.rsplit("offset=", 1)[1] for u in responses.urls] == ["0", "100", "200"]

    def test_empty_page_stops(self, connection, responses):
        """Test an empty page yields an empty result."""
        responses.add(page([]))
        assert Accumulator(connection).run(options()) == []
        assert len(responses.requests) == 1

    def test_missing_field_is_empty_page(self, connection, responses):
        """Test a page without the array field counts as empty."""
        responses.add({"_total": 0})
        assert Accumulator(connection).run(options()) == []

    def test_total_limits_pages(self, connection, responses):
        """Test _total smaller than the page size fetches one page."""
        responses.add(page(range(100), total=50))
        result = Accumulator(connection).run(options())
        assert len(result) == 100
        assert len(responses.requests) == 1

    def test_limit_stops_within_page(self, connection, responses):
        """Test the total limit stops after exactly that many objects."""
        responses.add(page(range(0, 10)))
        result = Accumulator(connection).run(options(limit=10))
        assert [o.id for o in result] == list(range(10))
        assert len(responses.requests) == 1

    def test_limit_spanning_pages(self, connection, responses):
        """Test a limit above the page size stops midway through a later page."""
        responses.add(page(range(0, 100)))
        responses.add(page(range(100, 200)))
        result = Accumulator(connection).run(options(limit=150))
        assert len(result) == 150
        assert result[-1].id == 149
        assert len(responses.requests) == 2

    def test_deduplicates_across_pages(self, connection, responses):
        """Test an id appearing on two pages is delivered once."""
        responses.add(page(range(0, 100)))
        responses.add(page(range(99, 199)))
        responses.add(page(range(199, 210)))
        result = Accumulator(connection).run(options())
        ids = [o.id for o in result]
        assert ids == list(range(210))
        assert len(ids) == len(set(ids))

    def test_duplicates_do_not_count_towards_limit(self, connection, responses):
        """Test the limit counts distinct objects only."""
        responses.add({"follows": [item(1), item(1), item(2), item(3)]})
        result = Accumulator(connection).run(options(limit=3))
        assert [o.id for o in result] == [1, 2, 3]

    def test_503_page_ends_accumulation(self, connection, responses):
        """Test an embedded 503 page ends accumulation gracefully."""
        responses.add(page(range(100)))
        responses.add({"error": "Service Unavailable", "status": 503})
        result = Accumulator(connection).run(options())
        assert len(result) == 100

    def test_params_forwarded(self, connection, responses):
        """Test extra parameters are sent with each page."""
        responses.add(page([1]))
        Accumulator(connection).run(options(params={"direction": "asc"}))
        assert responses.requests[0]["params"] == {"direction": "asc"}


class TestCallbackMode:
    """Tests for streaming objects through a callback."""

    def test_callback_receives_items_in_order(self, connection, responses):
        """Test the callback gets each object in page order and nothing is returned."""
        responses.add(page(range(0, 100)))
        responses.add(page(range(100, 120)))
        received = []
        result = Accumulator(connection).run(options(), on_item=lambda o: received.append(o.id))
        assert result is None
        assert received == list(range(120))

    def test_callback_with_limit(self, connection, responses):
        """Test the limit applies in callback mode."""
        responses.add(page(range(0, 5)))
        received = []
        assert Accumulator(connection).run(options(limit=5), on_item=received.append) is None
        assert len(received) == 5

    def test_connection_accumulate_delegates(self, connection, responses):
        """Test Connection.accumulate drives an accumulator."""
        responses.add(page([7, 8]))
        assert [o.id for o in connection.accumulate(options())] == [7, 8]

    def test_accumulate_function(self, connection, responses):
        """Test the module-level shortcut."""
        responses.add(page([7]))
        received = []
        assert accumulate(connection, options(), received.append) is None
        assert [o.id for o in received] == [7]


class TestFactories:
    """Tests for factory resolution and nested items."""

    def test_sub_json_unwrap(self, connection, responses, user_json):
        """Test nested objects are unwrapped and built by a model class."""
        responses.add({"_total": 1, "follows": [{"created_at": "2016-12-01T00:00:00Z", "user": user_json}]})
        result = Accumulator(connection).run(options(sub_json="user", create=User))
        assert len(result) == 1
        assert isinstance(result[0], User)
        assert result[0].id == "44322889"

    def test_missing_sub_json(self, connection, responses):
        """Test a missing nested field raises DecodeError."""
        responses.add({"follows": [{"created_at": "2016-12-01T00:00:00Z"}]})
        with pytest.raises(DecodeError):
            Accumulator(connection).run(options(sub_json="user"))

    def test_non_array_field(self, connection, responses):
        """Test a non-array collection field raises DecodeError."""
        responses.add({"follows": {"_id": 1}})
        with pytest.raises(DecodeError):
            Accumulator(connection).run(options())

    def test_resolve_callable(self):
        """Test plain callables are used as is."""
        assert resolve_factory(make) is make

    def test_resolve_model_without_from_json(self):
        """Test pydantic models without from_json are validated directly."""

        class Plain(BaseModel):
            id: int

        factory = resolve_factory(Plain)
        assert factory({"id": 3}) == Plain(id=3)

    def test_resolve_from_json(self):
        """Test classes with from_json use it."""
        assert resolve_factory(User) == User.from_json
