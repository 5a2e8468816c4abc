"""Tests for the shared Annotated constraint types."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import BaseModel, ValidationError

from guild_music_engine.domain.shared.types import (
    ChannelIdField,
    DiscordSnowflake,
    DurationSeconds,
    HistoryDepth,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeFloat,
    NonNegativeInt,
    PlaylistNameStr,
    PositiveInt,
    TrackTitleStr,
    UtcDatetimeField,
    VolumeLevel,
)


def model_for(annotation):
    """Build a one-field model so each constraint can be checked in isolation."""

    class _Model(BaseModel):
        value: annotation

    return _Model


class TestNumericTypes:
    @pytest.mark.parametrize(
        ("annotation", "valid", "invalid"),
        [
            (DiscordSnowflake, [1, 2**64 - 1], [0, -5, 2**64]),
            (ChannelIdField, [123456789012345678], [0]),
            (NonNegativeInt, [0, 7], [-1]),
            (PositiveInt, [1], [0, -1]),
            (NonNegativeFloat, [0.0, 2.5], [-0.1]),
            (VolumeLevel, [0, 100], [-1, 101]),
            (DurationSeconds, [0, 86_400], [-1, 86_401]),
            (HistoryDepth, [1, 100], [0, 101]),
        ],
    )
    def test_bounds(self, annotation, valid, invalid):
        model = model_for(annotation)

        for value in valid:
            assert model(value=value).value == value
        for value in invalid:
            with pytest.raises(ValidationError):
                model(value=value)


class TestStringTypes:
    def test_non_empty(self):
        model = model_for(NonEmptyStr)

        assert model(value="x").value == "x"
        with pytest.raises(ValidationError):
            model(value="")

    def test_track_title_length(self):
        model = model_for(TrackTitleStr)

        assert len(model(value="a" * 500).value) == 500
        with pytest.raises(ValidationError):
            model(value="a" * 501)

    def test_playlist_name_length(self):
        model = model_for(PlaylistNameStr)

        assert model(value="Road Trip").value == "Road Trip"
        with pytest.raises(ValidationError):
            model(value="n" * 101)

    @pytest.mark.parametrize("url", ["https://youtu.be/x", "http://example.com"])
    def test_http_url_accepted(self, url):
        assert model_for(HttpUrlStr)(value=url).value == url

    @pytest.mark.parametrize("url", ["ftp://example.com", "youtu.be/x", "file:///etc/passwd"])
    def test_http_url_rejected(self, url):
        with pytest.raises(ValidationError):
            model_for(HttpUrlStr)(value=url)


class TestUtcDatetimeField:
    def test_naive_rejected(self):
        with pytest.raises(ValidationError):
            model_for(UtcDatetimeField)(value=datetime(2024, 1, 1))

    def test_offset_normalised_to_utc(self):
        tokyo = timezone(timedelta(hours=9))

        value = model_for(UtcDatetimeField)(value=datetime(2024, 1, 1, 9, tzinfo=tokyo)).value

        assert value == datetime(2024, 1, 1, 0, tzinfo=UTC)
        assert value.tzinfo == UTC
