"""
Unit tests for YouTube URL normalization.
"""

import pytest

from soratv.channels.urls import normalize_youtube_url

EMBED = "https://www.youtube-nocookie.com/embed/"


@pytest.mark.unit
class TestNormalizeYouTubeUrl:

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://youtu.be/dQw4w9WgXcQ", f"{EMBED}dQw4w9WgXcQ"),
            ("https://youtu.be/dQw4w9WgXcQ?si=share", f"{EMBED}dQw4w9WgXcQ"),
            ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", f"{EMBED}dQw4w9WgXcQ"),
            ("https://m.youtube.com/watch?feature=x&v=abc", f"{EMBED}abc"),
            ("https://www.youtube.com/watch?v=", EMBED),
            ("https://www.youtube.com/live/LIVE42", f"{EMBED}LIVE42?autoplay=1"),
            (
                "https://www.youtube.com/embed/abc?mute=1",
                "https://www.youtube-nocookie.com/embed/abc?mute=1",
            ),
        ],
    )
    def test_recognized_shapes(self, url, expected):
        assert normalize_youtube_url(url) == expected

    @pytest.mark.parametrize(
        "url",
        [
            "https://youtu.be/dQw4w9WgXcQ",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://www.youtube.com/live/LIVE42",
            "https://www.youtube.com/embed/abc",
            "https://www.youtube-nocookie.com/embed/abc?autoplay=1",
        ],
    )
    def test_idempotent(self, url):
        once = normalize_youtube_url(url)
        assert normalize_youtube_url(once) == once

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/stream.m3u8",
            "https://example.com/youtube/stream.m3u8",
            "https://notyoutube.com/watch?v=abc",
            "https://www.youtube.com/@channel",
            "youtube.com/watch?v=abc",
            "https://[youtube/watch?v=x",
            "",
        ],
    )
    def test_other_urls_unchanged(self, url):
        assert normalize_youtube_url(url) == url
