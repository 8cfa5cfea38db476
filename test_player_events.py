import json

import pytest

from conftest import YT_ORIGIN
from watchgate.services.embed import OutboundEmbedChannel
from watchgate.services.player_events import (
    LISTENING_HANDSHAKE,
    PlaybackSignal,
    PlayerEventAdapter,
    normalize_notification,
)


@pytest.mark.parametrize(
    "code, expected",
    [
        (1, PlaybackSignal.PLAYING),
        (2, PlaybackSignal.PAUSED),
        (0, PlaybackSignal.ENDED),
        (-1, PlaybackSignal.IGNORED),
        (3, PlaybackSignal.IGNORED),
        (5, PlaybackSignal.IGNORED),
    ],
)
def test_state_codes_map_to_signals(code, expected):
    assert normalize_notification({"event": "onStateChange", "info": code}) is expected


def test_ready_and_json_string_payloads():
    assert normalize_notification({"event": "onReady"}) is PlaybackSignal.READY
    raw = json.dumps({"event": "onStateChange", "data": 1})
    assert normalize_notification(raw) is PlaybackSignal.PLAYING
    assert normalize_notification(b'{"event": "onReady"}') is PlaybackSignal.READY


def test_state_code_falls_back_to_data_when_info_is_null():
    payload = {"event": "onStateChange", "info": None, "data": 1}
    assert normalize_notification(payload) is PlaybackSignal.PLAYING


@pytest.mark.parametrize(
    "payload",
    [
        None,
        42,
        "not json",
        [1, 2],
        {"event": "onStateChange"},
        {"event": "onStateChange", "info": "1"},
        {"event": "onStateChange", "info": True},
        {"event": "infoDelivery", "info": {"currentTime": 3}},
        {},
        "[" * 100000 + "]" * 100000,
        b"\x80\x81\x82",
        b"{\"event\": \"onStateChange\", \"info\": \xff}",
    ],
)
def test_malformed_payloads_are_rejected(payload):
    assert normalize_notification(payload) is None


class TestAdapter:
    def setup_method(self):
        self.embed = OutboundEmbedChannel()
        self.adapter = PlayerEventAdapter(self.embed, YT_ORIGIN)
        self.received: list[PlaybackSignal] = []

    def test_subscribe_sends_one_handshake(self):
        self.adapter.subscribe(self.received.append)
        commands = self.embed.drain()
        assert len(commands) == 1
        assert commands[0].action == "post_message"
        assert commands[0].payload == LISTENING_HANDSHAKE

    def test_untrusted_origin_is_dropped(self):
        self.adapter.subscribe(self.received.append)
        assert self.adapter.handle("https://evil.example", {"event": "onStateChange", "info": 1}) is None
        assert self.adapter.handle(None, {"event": "onStateChange", "info": 1}) is None
        assert self.received == []

    def test_ready_emitted_once_per_subscription(self):
        self.adapter.subscribe(self.received.append)
        self.adapter.handle(YT_ORIGIN, {"event": "onReady"})
        assert self.adapter.handle(YT_ORIGIN, {"event": "onReady"}) is PlaybackSignal.IGNORED
        assert self.received == [PlaybackSignal.READY]

        self.adapter.subscribe(self.received.append)
        self.adapter.handle(YT_ORIGIN, {"event": "onReady"})
        assert self.received == [PlaybackSignal.READY, PlaybackSignal.READY]

    def test_ignored_codes_produce_no_signal(self):
        self.adapter.subscribe(self.received.append)
        for code in (3, -1, 5):
            signal = self.adapter.handle(YT_ORIGIN, {"event": "onStateChange", "info": code})
            assert signal is PlaybackSignal.IGNORED
        assert self.received == []

    def test_forwards_playback_signals(self):
        self.adapter.subscribe(self.received.append)
        for code in (1, 2, 1, 0):
            self.adapter.handle(YT_ORIGIN, {"event": "onStateChange", "info": code})
        assert self.received == [
            PlaybackSignal.PLAYING,
            PlaybackSignal.PAUSED,
            PlaybackSignal.PLAYING,
            PlaybackSignal.ENDED,
        ]

    def test_nothing_delivered_after_unsubscribe(self):
        self.adapter.subscribe(self.received.append)
        self.adapter.unsubscribe()
        assert self.adapter.handle(YT_ORIGIN, {"event": "onStateChange", "info": 1}) is None
        assert self.received == []

    def test_deeply_nested_string_is_dropped(self):
        self.adapter.subscribe(self.received.append)
        nested = "[" * 100000 + "]" * 100000
        assert self.adapter.handle(YT_ORIGIN, nested) is None
        assert self.received == []
