"""
Application Layer

Orchestrates the per-guild playback engine on top of the domain model.

Structure:
- services/: registry, playback controllers, the engine facade, playlists and search
- interfaces/: ports for voice transport and track resolution
"""
