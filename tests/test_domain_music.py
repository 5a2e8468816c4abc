"""
Unit Tests for the Music Domain

Tests for:
- AudioFilter / FilterPreset parsing
- FilterChain toggling, ordering and FFmpeg expressions
- Track and TrackCandidate value objects
- GuildQueue enqueue, history and volume rules
- QueueSnapshot views
- Playlist naming
"""

import random
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from guild_music_engine.domain.music.entities import GuildQueue, QueueSnapshot, Track, TrackCandidate
from guild_music_engine.domain.music.filters import AudioFilter, FilterChain, FilterPreset
from guild_music_engine.domain.music.playlist import Playlist, playlist_name_key
from guild_music_engine.domain.music.value_objects import LoopMode, PlaybackState, TrackId
from guild_music_engine.domain.shared.exceptions import InvalidOperationError, ValidationError

# =============================================================================
# Filters
# =============================================================================


class TestAudioFilter:
    """Tests for filter name parsing."""

    def test_parse_is_case_insensitive(self):
        assert AudioFilter.parse(" BassBoost ") is AudioFilter.BASSBOOST

    def test_parse_accepts_member(self):
        assert AudioFilter.parse(AudioFilter.KARAOKE) is AudioFilter.KARAOKE

    def test_parse_unknown_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            AudioFilter.parse("chorus")
        assert exc_info.value.field == "filter"

    def test_unknown_preset_raises(self):
        with pytest.raises(ValidationError):
            FilterPreset.parse("metal")


class TestFilterChain:
    """Tests for the immutable filter set."""

    def test_empty_chain_has_no_expression(self):
        chain = FilterChain()

        assert not chain
        assert chain.ffmpeg_expression is None
        assert chain.names == ()

    def test_toggle_adds_then_removes(self):
        chain = FilterChain().toggled(AudioFilter.NIGHTCORE)
        assert AudioFilter.NIGHTCORE in chain

        chain = chain.toggled(AudioFilter.NIGHTCORE)
        assert AudioFilter.NIGHTCORE not in chain
        assert len(chain) == 0

    def test_toggle_twice_is_identity(self):
        base = FilterChain(filters=(AudioFilter.TREMOLO,))

        assert base.toggled(AudioFilter.REVERSE).toggled(AudioFilter.REVERSE) == base

    def test_names_keep_insertion_order(self):
        chain = FilterChain().toggled(AudioFilter.REVERSE).toggled(AudioFilter.BASSBOOST)

        assert chain.names == ("reverse", "bassboost")

    def test_pipeline_uses_declaration_order(self):
        chain = FilterChain().toggled(AudioFilter.REVERSE).toggled(AudioFilter.BASSBOOST)

        assert chain.pipeline == (AudioFilter.BASSBOOST, AudioFilter.REVERSE)
        assert chain.ffmpeg_expression == "bass=g=20,dynaudnorm=f=200,areverse"

    def test_expression_independent_of_toggle_order(self):
        a = FilterChain().toggled(AudioFilter.VIBRATO).toggled(AudioFilter.EIGHT_D)
        b = FilterChain().toggled(AudioFilter.EIGHT_D).toggled(AudioFilter.VIBRATO)

        assert a.ffmpeg_expression == b.ffmpeg_expression

    def test_preset_replaces_whole_set(self):
        chain = FilterChain.from_preset(FilterPreset.PARTY)

        assert set(chain.filters) == {AudioFilter.BASSBOOST, AudioFilter.NIGHTCORE}

    def test_cleared(self):
        assert not FilterChain.from_preset(FilterPreset.GAMING).cleared()

    def test_chain_is_frozen(self):
        chain = FilterChain()
        with pytest.raises(PydanticValidationError):
            chain.filters = (AudioFilter.KARAOKE,)


# =============================================================================
# Value objects
# =============================================================================


class TestTrackValueObjects:
    """Tests for Track, TrackId and TrackCandidate."""

    def test_track_id_from_youtube_url(self):
        assert TrackId.from_url("https://youtu.be/dQw4w9WgXcQ").value == "dQw4w9WgXcQ"

    def test_track_id_from_other_url_is_hash(self):
        track_id = TrackId.from_url("https://example.com/song.mp3")

        assert len(track_id.value) == 16
        assert track_id == TrackId.from_url("https://example.com/song.mp3")

    def test_empty_track_id_rejected(self):
        with pytest.raises(ValueError):
            TrackId("  ")

    def test_track_rejects_non_http_url(self):
        with pytest.raises(PydanticValidationError):
            Track(id=TrackId("x"), title="x", url="ftp://example.com/x")

    def test_with_requester_keeps_original(self, sample_track):
        stamped = sample_track.with_requester(42, "alice")

        assert stamped.requested_by_id == 42
        assert stamped.requested_by_name == "alice"
        assert stamped.added_at is not None
        assert sample_track.requested_by_id is None

    def test_without_stream_drops_media_url(self, sample_track):
        assert sample_track.stream_url is not None
        assert sample_track.without_stream().stream_url is None

    def test_duration_formatting(self, make_track):
        assert make_track("a", duration=3725).duration_formatted == "1:02:05"
        assert make_track("b", duration=65).duration_formatted == "1:05"
        assert make_track("c", duration=None).duration_formatted == "Unknown"

    def test_candidate_choice_name_truncated(self):
        candidate = TrackCandidate(title="x" * 120, url="https://example.com/x")

        assert len(candidate.choice_name) == 100
        assert candidate.choice_name.endswith("...")

    def test_candidate_choice_name_includes_author(self):
        candidate = TrackCandidate(title="Song", url="https://example.com/x", author="Band")

        assert candidate.choice_name == "Song - Band"


class TestLoopMode:
    """Tests for loop mode cycling."""

    def test_cycle(self):
        assert LoopMode.OFF.next_mode() is LoopMode.TRACK
        assert LoopMode.TRACK.next_mode() is LoopMode.QUEUE
        assert LoopMode.QUEUE.next_mode() is LoopMode.OFF


class TestPlaybackState:
    """Tests for allowed state transitions."""

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            (PlaybackState.IDLE, PlaybackState.CONNECTING),
            (PlaybackState.CONNECTING, PlaybackState.PLAYING),
            (PlaybackState.PLAYING, PlaybackState.PAUSED),
            (PlaybackState.PAUSED, PlaybackState.PLAYING),
            (PlaybackState.PLAYING, PlaybackState.STOPPED),
            (PlaybackState.STOPPED, PlaybackState.CONNECTING),
        ],
    )
    def test_allowed(self, source, target):
        assert source.can_transition_to(target)

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            (PlaybackState.IDLE, PlaybackState.PLAYING),
            (PlaybackState.STOPPED, PlaybackState.PLAYING),
            (PlaybackState.PAUSED, PlaybackState.IDLE),
        ],
    )
    def test_rejected(self, source, target):
        assert not source.can_transition_to(target)


# =============================================================================
# GuildQueue
# =============================================================================


class TestGuildQueue:
    """Tests for the per-guild aggregate."""

    def test_enqueue_appends_in_order(self, sample_tracks):
        queue = GuildQueue(guild_id=1)

        position = queue.enqueue(sample_tracks[:2])
        queue.enqueue(sample_tracks[2:4])

        assert position == 0
        assert [str(t.id) for t in queue.tracks] == ["t1", "t2", "t3", "t4"]

    def test_to_front_goes_after_current(self, sample_tracks):
        queue = GuildQueue(guild_id=1, tracks=list(sample_tracks[:3]), state=PlaybackState.PLAYING)

        position = queue.enqueue([sample_tracks[3], sample_tracks[4]], to_front=True)

        assert position == 1
        assert [str(t.id) for t in queue.tracks] == ["t1", "t4", "t5", "t2", "t3"]

    def test_to_front_without_current_goes_first(self, sample_tracks):
        queue = GuildQueue(guild_id=1, tracks=[sample_tracks[0]])

        assert queue.enqueue([sample_tracks[1]], to_front=True) == 0
        assert str(queue.tracks[0].id) == "t2"

    def test_volume_is_clamped(self):
        queue = GuildQueue(guild_id=1)

        assert queue.set_volume(150) == 100
        assert queue.set_volume(-5) == 0

    def test_history_is_bounded(self, make_track):
        queue = GuildQueue(guild_id=1, history_depth=3)

        for i in range(5):
            queue.record_history(make_track(f"h{i}"))

        assert [str(t.id) for t in queue.history] == ["h2", "h3", "h4"]

    def test_history_strips_stream_url(self, sample_track):
        queue = GuildQueue(guild_id=1)

        queue.record_history(sample_track)

        assert queue.history[0].stream_url is None

    def test_shuffle_keeps_current_in_place(self, sample_tracks):
        queue = GuildQueue(guild_id=1, tracks=list(sample_tracks), state=PlaybackState.PLAYING)

        moved = queue.shuffle_upcoming(random.Random(3))

        assert moved == 4
        assert str(queue.tracks[0].id) == "t1"
        assert sorted(str(t.id) for t in queue.tracks[1:]) == ["t2", "t3", "t4", "t5"]

    def test_invalid_transition_raises(self):
        queue = GuildQueue(guild_id=1)

        with pytest.raises(InvalidOperationError):
            queue.transition_to(PlaybackState.PLAYING)

    def test_take_leading_caps_at_length(self, sample_tracks):
        queue = GuildQueue(guild_id=1, tracks=list(sample_tracks[:2]))

        assert len(queue.take_leading(5)) == 2
        assert queue.tracks == []

    def test_idle_seconds(self):
        queue = GuildQueue(guild_id=1)
        later = queue.last_activity + timedelta(seconds=30)

        assert queue.idle_seconds(later) == pytest.approx(30.0)


class TestQueueSnapshot:
    """Tests for the read-only queue view."""

    def test_idle_snapshot_has_no_current(self, sample_tracks):
        snapshot = QueueSnapshot(guild_id=1, tracks=tuple(sample_tracks[:2]))

        assert snapshot.current_track is None
        assert len(snapshot.upcoming) == 2

    def test_playing_snapshot_splits_current(self, sample_tracks):
        snapshot = QueueSnapshot(guild_id=1, tracks=tuple(sample_tracks[:3]), state=PlaybackState.PLAYING)

        assert str(snapshot.current_track.id) == "t1"
        assert [str(t.id) for t in snapshot.upcoming] == ["t2", "t3"]
        assert snapshot.total_duration_seconds == 101 + 102 + 103

    def test_snapshot_is_detached_from_queue(self, sample_tracks):
        queue = GuildQueue(guild_id=1, tracks=list(sample_tracks[:2]))
        snapshot = queue.snapshot()

        queue.clear_tracks()

        assert len(snapshot) == 2


# =============================================================================
# Playlist
# =============================================================================


class TestPlaylist:
    """Tests for the playlist model."""

    def test_name_key_is_case_insensitive(self):
        assert playlist_name_key("  Road Trip ") == playlist_name_key("road trip")

    def test_new_strips_stream_urls_and_builds_id(self, sample_track):
        created = datetime(2024, 1, 1, tzinfo=UTC)
        playlist = Playlist.new(7, " Mix ", [sample_track], created_at=created)

        assert playlist.id == f"7_{int(created.timestamp() * 1000)}"
        assert playlist.name == "Mix"
        assert playlist.tracks[0].stream_url is None
        assert playlist.track_count == 1

    def test_matches_substring(self):
        playlist = Playlist.new(7, "Summer Hits")

        assert playlist.matches("hits")
        assert not playlist.matches("winter")
