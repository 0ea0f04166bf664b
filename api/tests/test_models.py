"""Tests for data models."""

import pytest

from mission_control.fallback import sample_news
from mission_control.models import (
    AggregatedNewsResponse,
    NewsItem,
    UpstreamUnavailableError,
)


def create_item(**overrides) -> NewsItem:
    """Helper to create a NewsItem."""
    values = {
        "category": "TECH",
        "headline": "Chip launch",
        "timestamp": "2024-01-01T00:00:00+00:00",
        "viral_score": 8.3,
        "url": "https://example.com/chip",
        "source": "Example",
    }
    values.update(overrides)
    return NewsItem(**values)


class TestNewsItem:
    """Tests for NewsItem serialization."""

    def test_to_dict_uses_camel_case_score(self):
        """to_dict should emit viralScore."""
        data = create_item().to_dict()

        assert data["viralScore"] == 8.3
        assert "viral_score" not in data

    def test_to_dict_omits_absent_optional_fields(self):
        """viewers and thumbnail should be omitted when unset."""
        data = create_item().to_dict()

        assert "viewers" not in data
        assert "thumbnail" not in data

    def test_to_dict_includes_viewers_for_video(self):
        """viewers and thumbnail should be emitted when set."""
        data = create_item(viewers="22.4K", thumbnail="https://img/1.jpg").to_dict()

        assert data["viewers"] == "22.4K"
        assert data["thumbnail"] == "https://img/1.jpg"

    def test_from_dict_applies_defaults(self):
        """from_dict should default url and source."""
        item = NewsItem.from_dict(
            {"category": "AI", "headline": "H", "timestamp": "t", "viralScore": 9}
        )

        assert item.url == "#"
        assert item.source == "Unknown"
        assert item.viral_score == 9.0


class TestAggregatedNewsResponse:
    """Tests for the three-bucket response."""

    def test_empty_response_has_three_buckets(self):
        """An empty response should still serialize all buckets."""
        assert AggregatedNewsResponse().to_dict() == {"global": [], "tech": [], "ai": []}

    def test_global_bucket_serializes_as_global(self):
        """global_ should be serialized under the "global" key."""
        response = AggregatedNewsResponse(global_=[create_item()])

        assert response.to_dict()["global"][0]["headline"] == "Chip launch"

    def test_from_dict_tolerates_missing_buckets(self):
        """Missing buckets should become empty lists."""
        response = AggregatedNewsResponse.from_dict({"tech": [create_item().to_dict()]})

        assert response.global_ == []
        assert response.tech == [create_item()]
        assert response.ai == []

    def test_bucket_lookup(self):
        """bucket() should resolve serialized names."""
        response = AggregatedNewsResponse(ai=[create_item()])

        assert response.bucket("ai") is response.ai
        with pytest.raises(KeyError):
            response.bucket("sports")


class TestUpstreamUnavailableError:
    """Tests for UpstreamUnavailableError."""

    def test_carries_kind_and_message(self):
        """The error should expose kind and message."""
        error = UpstreamUnavailableError(kind="video", message="timeout")

        assert error.kind == "video"
        assert error.message == "timeout"
        assert str(error) == "timeout"


class TestSampleNews:
    """Tests for the fallback payload."""

    def test_sample_has_three_cards_per_bucket(self):
        """Each bucket should hold three cards."""
        response = sample_news()

        assert len(response.global_) == 3
        assert len(response.tech) == 3
        assert len(response.ai) == 3

    def test_sample_scores_within_bounds(self):
        """Sample scores should respect the [0, 10] range."""
        response = sample_news()

        for name in ("global", "tech", "ai"):
            for item in response.bucket(name):
                assert 0 <= item.viral_score <= 10

    def test_sample_live_stream_has_viewers(self):
        """The live stream card should carry a viewer count."""
        assert sample_news().ai[0].viewers == "22.4K"
