"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the engine, its ports, and its background jobs.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.audio_transport import AudioTransport
    from ..application.interfaces.track_resolver import TrackResolver
    from ..application.services.idle_sweep import IdleSweepJob
    from ..application.services.music_engine import MusicEngine
    from ..application.services.playback_controller import EvictCallback, PlaybackController
    from ..application.services.playlist_service import PlaylistService
    from ..application.services.rate_limiter import RateLimiter
    from ..application.services.registry import GuildQueueRegistry
    from ..application.services.search_service import SearchService
    from ..domain.music.repository import PlaylistRepository
    from ..domain.shared.events import EventBus
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    # Persistence layer
    _database: Database | None = None
    _playlist_repository: PlaylistRepository | None = None

    # Ports
    _track_resolver: TrackResolver | None = None
    _audio_transport: AudioTransport | None = None

    # Application services
    _event_bus: EventBus | None = None
    _rate_limiter: RateLimiter | None = None
    _playlist_service: PlaylistService | None = None
    _search_service: SearchService | None = None
    _registry: GuildQueueRegistry | None = None
    _music_engine: MusicEngine | None = None

    # Background jobs
    _idle_sweep_job: IdleSweepJob | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Persistence ===

    @property
    def database(self) -> Database:
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    @property
    def playlist_repository(self) -> PlaylistRepository:
        if self._playlist_repository is None:
            from ..infrastructure.persistence.repositories.playlist_repository import (
                SQLitePlaylistRepository,
            )

            self._playlist_repository = SQLitePlaylistRepository(self.database)
        return self._playlist_repository

    # === Ports ===

    @property
    def track_resolver(self) -> TrackResolver:
        if self._track_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._track_resolver = YtDlpResolver(self.settings.audio)
        return self._track_resolver

    @property
    def audio_transport(self) -> AudioTransport:
        """Get the voice transport. Requires the bot to be set."""
        if self._audio_transport is None:
            from ..infrastructure.discord.adapters.voice_transport import (
                DiscordAudioTransport,
            )

            self._audio_transport = DiscordAudioTransport(
                self.bot, self.settings.audio, resolver=self.track_resolver
            )
        return self._audio_transport

    # === Application Services ===

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import get_event_bus

            self._event_bus = get_event_bus()
        return self._event_bus

    @property
    def rate_limiter(self) -> RateLimiter:
        if self._rate_limiter is None:
            from ..application.services.rate_limiter import RateLimiter

            self._rate_limiter = RateLimiter(self.settings.rate_limits)
        return self._rate_limiter

    @property
    def playlist_service(self) -> PlaylistService:
        if self._playlist_service is None:
            from ..application.services.playlist_service import PlaylistService

            self._playlist_service = PlaylistService(
                self.playlist_repository,
                choice_limit=self.settings.search.playlist_choice_limit,
            )
        return self._playlist_service

    @property
    def search_service(self) -> SearchService:
        if self._search_service is None:
            from ..application.services.search_service import SearchService

            self._search_service = SearchService(
                resolver=self.track_resolver,
                rate_limiter=self.rate_limiter,
                settings=self.settings.search,
            )
        return self._search_service

    def create_controller(self, guild_id: int, on_evict: EvictCallback) -> PlaybackController:
        """Controller factory handed to the registry."""
        from ..application.services.playback_controller import PlaybackController

        audio = self.settings.audio
        return PlaybackController(
            guild_id,
            transport=self.audio_transport,
            event_bus=self.event_bus,
            on_evict=on_evict,
            default_volume=audio.default_volume,
            history_depth=audio.history_depth,
            stream_open_retries=audio.stream_open_retries,
            retry_backoff_seconds=audio.stream_retry_backoff_seconds,
        )

    @property
    def registry(self) -> GuildQueueRegistry:
        if self._registry is None:
            from ..application.services.registry import GuildQueueRegistry

            self._registry = GuildQueueRegistry(self.create_controller, event_bus=self.event_bus)
        return self._registry

    @property
    def music_engine(self) -> MusicEngine:
        """Get the engine facade used by the cogs."""
        if self._music_engine is None:
            from ..application.services.music_engine import MusicEngine

            self._music_engine = MusicEngine(
                registry=self.registry,
                resolver=self.track_resolver,
                transport=self.audio_transport,
                playlists=self.playlist_service,
                search=self.search_service,
                rate_limiter=self.rate_limiter,
                settings=self.settings.audio,
            )
        return self._music_engine

    # === Background Jobs ===

    @property
    def idle_sweep_job(self) -> IdleSweepJob:
        if self._idle_sweep_job is None:
            from ..application.services.idle_sweep import IdleSweepJob

            self._idle_sweep_job = IdleSweepJob(registry=self.registry, settings=self.settings.engine)
        return self._idle_sweep_job

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources."""
        await self.database.initialize()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._idle_sweep_job is not None:
            try:
                await self._idle_sweep_job.stop()
            except Exception as exc:
                logger.warning(LogTemplates.BOT_SWEEP_STOP_ERROR, exc)

        if self._registry is not None:
            try:
                await self._registry.shutdown_all()
            except Exception as exc:
                logger.warning(LogTemplates.BOT_REGISTRY_SHUTDOWN_ERROR, exc)

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
