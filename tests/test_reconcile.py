"""Tests for request reconciliation (day classification + run merging)."""

from datetime import timedelta

import pytest

from ferienhaus.domain.dates import iter_days
from ferienhaus.domain.errors import InvalidDateRangeError
from ferienhaus.domain.segments import Owner, Status, reconcile

from .helpers import PROPERTY_ID, cover_days, d, make_segment

MAX = Owner(id="user1", name="Max Mustermann")


def _run(start, end, status, existing=(), **kwargs):
    return reconcile(d(start), d(end), status, MAX, existing, property_id=PROPERTY_ID, **kwargs)


def _shape(drafts):
    return [(s.start_date.isoformat(), s.end_date.isoformat(), s.status.value) for s in drafts]


class TestNoObstruction:
    def test_empty_calendar_single_segment(self):
        drafts = _run("2025-07-10", "2025-07-20", Status.RESERVED)

        assert _shape(drafts) == [("2025-07-10", "2025-07-20", "reserved")]

    def test_draft_carries_owner_and_property(self):
        (draft,) = _run("2025-07-10", "2025-07-12", Status.CONFIRMED)

        assert draft.user_id == "user1"
        assert draft.user_name == "Max Mustermann"
        assert draft.property_id == PROPERTY_ID
        assert draft.original_request_id

    def test_single_day_request(self):
        assert _shape(_run("2025-07-10", "2025-07-10", Status.RESERVED)) == [
            ("2025-07-10", "2025-07-10", "reserved")
        ]

    def test_adjacent_committed_range_does_not_obstruct(self):
        existing = [make_segment("b1", "2025-07-01", "2025-07-09")]

        assert _shape(_run("2025-07-10", "2025-07-12", Status.RESERVED, existing)) == [
            ("2025-07-10", "2025-07-12", "reserved")
        ]


class TestObstruction:
    def test_partial_obstruction_splits_in_three(self):
        """Confirmed 07-15..07-18 by another owner splits a 07-10..07-20 request."""
        existing = [make_segment("b1", "2025-07-15", "2025-07-18", Status.CONFIRMED)]

        drafts = _run("2025-07-10", "2025-07-20", Status.CONFIRMED, existing)

        assert _shape(drafts) == [
            ("2025-07-10", "2025-07-14", "confirmed"),
            ("2025-07-15", "2025-07-18", "anfrage"),
            ("2025-07-19", "2025-07-20", "confirmed"),
        ]
        assert len({s.original_request_id for s in drafts}) == 1

    @pytest.mark.parametrize("status", list(Status))
    def test_fully_inside_committed_range(self, status):
        existing = [make_segment("b1", "2025-07-01", "2025-07-31", Status.RESERVED)]

        assert _shape(_run("2025-07-10", "2025-07-20", status, existing)) == [
            ("2025-07-10", "2025-07-20", "anfrage")
        ]

    def test_alternating_obstruction(self):
        existing = [
            make_segment("b1", "2025-07-11", "2025-07-11"),
            make_segment("b2", "2025-07-13", "2025-07-13", Status.RESERVED),
        ]

        assert _shape(_run("2025-07-10", "2025-07-14", Status.RESERVED, existing)) == [
            ("2025-07-10", "2025-07-10", "reserved"),
            ("2025-07-11", "2025-07-11", "anfrage"),
            ("2025-07-12", "2025-07-12", "reserved"),
            ("2025-07-13", "2025-07-13", "anfrage"),
            ("2025-07-14", "2025-07-14", "reserved"),
        ]

    def test_back_to_back_obstructions_merge_into_one_anfrage_run(self):
        existing = [
            make_segment("b1", "2025-07-11", "2025-07-12"),
            make_segment("b2", "2025-07-13", "2025-07-14", Status.RESERVED),
        ]

        assert _shape(_run("2025-07-10", "2025-07-15", Status.CONFIRMED, existing)) == [
            ("2025-07-10", "2025-07-10", "confirmed"),
            ("2025-07-11", "2025-07-14", "anfrage"),
            ("2025-07-15", "2025-07-15", "confirmed"),
        ]

    def test_pending_segments_never_obstruct(self):
        existing = [make_segment("b1", "2025-07-10", "2025-07-20", Status.ANFRAGE)]

        assert _shape(_run("2025-07-10", "2025-07-20", Status.CONFIRMED, existing)) == [
            ("2025-07-10", "2025-07-20", "confirmed")
        ]

    def test_own_pending_segment_does_not_obstruct(self):
        existing = [
            make_segment("b1", "2025-07-10", "2025-07-12", Status.ANFRAGE, user_id="user1", user_name="Max Mustermann")
        ]

        assert _shape(_run("2025-07-10", "2025-07-12", Status.RESERVED, existing)) == [
            ("2025-07-10", "2025-07-12", "reserved")
        ]

    def test_own_committed_segment_obstructs(self):
        existing = [
            make_segment("b1", "2025-07-10", "2025-07-12", Status.RESERVED, user_id="user1", user_name="Max Mustermann")
        ]

        assert _shape(_run("2025-07-10", "2025-07-12", Status.RESERVED, existing)) == [
            ("2025-07-10", "2025-07-12", "anfrage")
        ]

    def test_requesting_anfrage_over_obstruction_is_one_run(self):
        existing = [make_segment("b1", "2025-07-12", "2025-07-13")]

        assert _shape(_run("2025-07-10", "2025-07-15", Status.ANFRAGE, existing)) == [
            ("2025-07-10", "2025-07-15", "anfrage")
        ]

    def test_excluded_request_group_does_not_obstruct(self):
        existing = [make_segment("b1", "2025-07-10", "2025-07-12", request_id="req-1")]

        drafts = _run(
            "2025-07-10",
            "2025-07-12",
            Status.CONFIRMED,
            existing,
            request_id="req-1",
            exclude_request_id="req-1",
        )

        assert _shape(drafts) == [("2025-07-10", "2025-07-12", "confirmed")]
        assert drafts[0].original_request_id == "req-1"


class TestPartitionProperty:
    @pytest.mark.parametrize(
        "obstacles",
        [
            [],
            [("2025-07-01", "2025-07-31")],
            [("2025-07-05", "2025-07-09"), ("2025-07-20", "2025-07-22")],
            [("2025-06-20", "2025-07-03"), ("2025-07-28", "2025-08-10")],
            [("2025-07-02", "2025-07-02"), ("2025-07-04", "2025-07-04"), ("2025-07-06", "2025-07-06")],
        ],
    )
    def test_segments_partition_the_requested_range(self, obstacles):
        existing = [make_segment(f"b{i}", s, e) for i, (s, e) in enumerate(obstacles)]
        start, end = d("2025-07-01"), d("2025-07-30")

        drafts = reconcile(start, end, Status.RESERVED, MAX, existing, property_id=PROPERTY_ID)

        assert cover_days(drafts) == list(iter_days(start, end))
        for prev, nxt in zip(drafts, drafts[1:]):
            assert nxt.start_date == prev.end_date + timedelta(days=1)
            assert prev.status is not nxt.status
        for draft in drafts:
            assert draft.start_date <= draft.end_date


class TestValidation:
    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidDateRangeError):
            _run("2025-07-20", "2025-07-10", Status.RESERVED)

    def test_fresh_request_id_per_call(self):
        first = _run("2025-07-10", "2025-07-11", Status.RESERVED)
        second = _run("2025-07-10", "2025-07-11", Status.RESERVED)

        assert first[0].original_request_id != second[0].original_request_id

    def test_status_given_as_string(self):
        (draft,) = _run("2025-07-10", "2025-07-11", "confirmed")

        assert draft.status is Status.CONFIRMED
