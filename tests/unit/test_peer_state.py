"""Tests for online classification, handshake age and aggregates."""

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from wgclient.data_models import PeerRecord
from wgclient.peer_state import (
    HandshakeAge,
    HandshakeKind,
    PeerStats,
    aggregate,
    is_online,
    time_since_last_handshake,
)

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_peer(peer_id="1", *, enabled=True, seconds_ago=None, rx=0, tx=0, rx_rate=0.0, tx_rate=0.0):
    handshake = None if seconds_ago is None else NOW - timedelta(seconds=seconds_ago)
    return PeerRecord(
        id=peer_id,
        name=f"peer-{peer_id}",
        address="10.8.0.2",
        public_key="pub",
        enabled=enabled,
        latest_handshake_at=handshake,
        transfer_rx=rx,
        transfer_tx=tx,
        transfer_rx_current=rx_rate,
        transfer_tx_current=tx_rate,
    )


class TestIsOnline:
    def test_disabled_peer_is_offline_even_with_fresh_handshake(self):
        assert is_online(make_peer(enabled=False, seconds_ago=0), NOW) is False

    def test_recent_handshake_is_online(self):
        assert is_online(make_peer(seconds_ago=90), NOW) is True

    def test_stale_handshake_is_offline(self):
        assert is_online(make_peer(seconds_ago=121), NOW) is False

    def test_boundary_is_exclusive(self):
        assert is_online(make_peer(seconds_ago=120), NOW) is False
        assert is_online(make_peer(seconds_ago=119.999), NOW) is True

    def test_never_handshook_is_offline(self):
        assert is_online(make_peer(seconds_ago=None), NOW) is False


class TestTimeSinceLastHandshake:
    @pytest.mark.parametrize(
        ("seconds_ago", "expected"),
        [
            (None, HandshakeAge(HandshakeKind.NEVER)),
            (0, HandshakeAge(HandshakeKind.JUST_NOW)),
            (-30, HandshakeAge(HandshakeKind.JUST_NOW)),
            (59, HandshakeAge(HandshakeKind.JUST_NOW)),
            (60, HandshakeAge(HandshakeKind.MINUTES, 1)),
            (3599, HandshakeAge(HandshakeKind.MINUTES, 59)),
            (3600, HandshakeAge(HandshakeKind.HOURS, 1)),
            (86399, HandshakeAge(HandshakeKind.HOURS, 23)),
            (86400, HandshakeAge(HandshakeKind.DAYS, 1)),
            (86400 * 10 + 5, HandshakeAge(HandshakeKind.DAYS, 10)),
        ],
    )
    def test_buckets(self, seconds_ago, expected):
        assert time_since_last_handshake(make_peer(seconds_ago=seconds_ago), NOW) == expected

    @pytest.mark.parametrize(
        ("age", "label"),
        [
            (HandshakeAge(HandshakeKind.NEVER), "never"),
            (HandshakeAge(HandshakeKind.JUST_NOW), "just now"),
            (HandshakeAge(HandshakeKind.MINUTES, 1), "1 minute ago"),
            (HandshakeAge(HandshakeKind.HOURS, 5), "5 hours ago"),
            (HandshakeAge(HandshakeKind.DAYS, 2), "2 days ago"),
        ],
    )
    def test_describe(self, age, label):
        assert age.describe() == label


class TestAggregate:
    def test_totals(self):
        peers = [
            make_peer("1", rx=10, tx=1, rx_rate=1.5, tx_rate=0.5, seconds_ago=10),
            make_peer("2", rx=20, tx=2, rx_rate=2.0, tx_rate=1.0, seconds_ago=500),
            make_peer("3", rx=30, tx=3, enabled=False, seconds_ago=5),
        ]
        stats = aggregate(peers, NOW)

        assert stats.total_count == 3
        assert stats.active_count == 2
        assert stats.online_count == 1
        assert stats.total_traffic == 66
        assert stats.current_download_rate == pytest.approx(3.5)
        assert stats.current_upload_rate == pytest.approx(1.5)

    def test_empty_list_is_all_zero(self):
        assert aggregate([], NOW) == PeerStats()
        assert aggregate([], NOW).total_traffic == 0


class TestNaiveClock:
    def test_naive_now_is_read_as_utc(self):
        naive_now = NOW.replace(tzinfo=None)
        assert is_online(make_peer(seconds_ago=30), naive_now) is True
        assert is_online(make_peer(seconds_ago=120), naive_now) is False
        assert time_since_last_handshake(make_peer(seconds_ago=3 * 3600), naive_now) == HandshakeAge(
            HandshakeKind.HOURS, 3
        )

    def test_naive_handshake_is_read_as_utc(self):
        naive_peer = dataclasses.replace(
            make_peer(), latest_handshake_at=(NOW - timedelta(seconds=90)).replace(tzinfo=None)
        )
        assert is_online(naive_peer, NOW) is True
        assert aggregate([naive_peer], NOW.replace(tzinfo=None)).online_count == 1
