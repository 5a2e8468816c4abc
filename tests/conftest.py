import pytest
import pytest_asyncio

# ============================================================================
# Event Bus
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_event_bus():
    """Give every test its own global event bus."""
    from guild_music_engine.domain.shared.events import reset_event_bus

    reset_event_bus()
    yield
    reset_event_bus()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from guild_music_engine.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def playlist_repository(in_memory_database):
    """Create a playlist repository with in-memory database."""
    from guild_music_engine.infrastructure.persistence.repositories.playlist_repository import (
        SQLitePlaylistRepository,
    )

    return SQLitePlaylistRepository(in_memory_database)


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def make_track():
    """Factory for tracks with distinct ids and urls."""
    from tests.fakes import make_track

    return make_track


@pytest.fixture
def sample_track(make_track):
    """Create a sample track for testing."""
    return make_track("test123", title="Test Track", duration=180, author="Test Artist")


@pytest.fixture
def sample_tracks(make_track):
    """Five tracks named t1..t5."""
    return [make_track(f"t{i}", duration=100 + i) for i in range(1, 6)]


# ============================================================================
# Engine Fixtures
# ============================================================================


@pytest.fixture
def fake_transport():
    from tests.fakes import FakeTransport

    return FakeTransport()


@pytest.fixture
def fake_resolver():
    from tests.fakes import FakeResolver

    return FakeResolver()


@pytest.fixture
def event_bus():
    from guild_music_engine.domain.shared.events import get_event_bus

    return get_event_bus()


@pytest.fixture
def controller(fake_transport, event_bus):
    """A controller for guild 1 with no retry backoff."""
    from guild_music_engine.application.services.playback_controller import PlaybackController

    return PlaybackController(
        1,
        transport=fake_transport,
        event_bus=event_bus,
        retry_backoff_seconds=0.0,
    )
