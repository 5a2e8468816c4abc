"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from guild_music_engine.application.interfaces.audio_transport import (
    AudioTransport,
    DisconnectHandler,
    StreamEndHandler,
    StreamHandle,
)
from guild_music_engine.application.interfaces.track_resolver import TrackResolver

__all__ = [
    "TrackResolver",
    "AudioTransport",
    "StreamHandle",
    "StreamEndHandler",
    "DisconnectHandler",
]
