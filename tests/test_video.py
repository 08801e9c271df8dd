"""
Video Reference and Transport Helper Tests
"""

import pytest

from clicker.contracts.base import TransportUnavailable
from clicker.video import (
    parse_video_id,
    read_duration,
    read_position,
    transport_has_media,
    transport_is_ready,
    youtube_video_id_to_url,
)

from .fixtures import FakeTransport


class TestVideoReferences:

    def test_watch_url(self):
        assert youtube_video_id_to_url("Hnn_-y59a84") == "https://www.youtube.com/watch?v=Hnn_-y59a84"

    @pytest.mark.parametrize("url,expected", [
        ("https://www.youtube.com/watch?v=Hnn_-y59a84", "Hnn_-y59a84"),
        ("https://youtube.com/watch?v=abc&t=30s", "abc"),
        ("https://youtu.be/abc123", "abc123"),
        ("https://www.youtube.com/embed/abc123", "abc123"),
        ("https://www.youtube.com/shorts/abc123", "abc123"),
        ("https://example.com/watch?v=abc", None),
        ("https://www.youtube.com/watch", None),
        ("not a url", None),
    ])
    def test_parse_video_id(self, url, expected):
        assert parse_video_id(url) == expected


class TestFallibleReads:

    def test_position(self):
        assert read_position(FakeTransport(position=3)) == 3.0

    def test_position_exception_wrapped(self):
        transport = FakeTransport()
        transport.fail_position = True
        with pytest.raises(TransportUnavailable):
            read_position(transport)

    def test_zero_duration_unavailable(self):
        with pytest.raises(TransportUnavailable):
            read_duration(FakeTransport(duration=0))

    def test_readiness_never_raises(self):
        class Exploding(FakeTransport):
            def is_ready(self):
                raise RuntimeError("gone")

        assert transport_is_ready(Exploding()) is False
        assert transport_is_ready(None) is False
        assert transport_has_media(Exploding()) is False

    def test_has_media(self):
        assert transport_has_media(FakeTransport())
        assert not transport_has_media(FakeTransport(duration=None))
