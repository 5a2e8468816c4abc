"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Track Validation Errors
    EMPTY_TRACK_ID = "Track ID cannot be empty"
    NO_STREAM_URL = "Track '{title}' has no stream URL"

    # Filter Validation Errors
    UNKNOWN_FILTER = "Unknown filter: {name}"
    UNKNOWN_PRESET = "Unknown filter preset: {name}"

    # Control Errors
    UNKNOWN_CUSTOM_ID = "Unknown component id: {custom_id}"
    DUPLICATE_CONTROL_HANDLER = "A handler is already registered for {action}"
    MISSING_CONTROL_HANDLERS = "No handler registered for: {actions}"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Configuration Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Audio/Stream Errors
    RESOLVER_RETURNED_NOTHING = "Resolver returned no playable tracks"
    VOICE_NOT_CONNECTED = "Not connected to voice in guild {guild_id}"

    # Authentication/Security Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Idle Sweep
    SWEEP_STARTED = "Idle sweep job started"
    SWEEP_STOPPED = "Idle sweep job stopped"
    SWEEP_ALREADY_RUNNING = "Idle sweep job is already running"
    SWEEP_CYCLE_RUNNING = "Running idle sweep over %d guilds"
    SWEEP_COMPLETED = "Idle sweep evicted %d guilds"
    SWEEP_GUILD_FAILED = "Idle sweep failed for guild %s: %r"

    # Cache Operations
    CACHE_HIT_URL = "Cache hit for URL: %s"
    CACHE_EXPIRED_CLEANED = "Cleaned %d expired cache entries"

    # Voice/Audio Operations
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_MOVED = "Moved to voice channel %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    VOICE_NOT_CONNECTED = "Not connected to voice in guild %s"
    VOICE_SELF_DEAFEN_FAILED = "Failed to self-deafen in guild %s: %r"
    VOICE_LINK_LOST = "Voice link lost in guild %s"

    # Stream Operations
    STREAM_OPENED = "Opened stream %s for '%s' in guild %s (offset=%ss, filters=%s)"
    STREAM_OPEN_FAILED = "Failed to open stream for '%s' in guild %s (attempt %d/%d): %s"
    STREAM_OPEN_GAVE_UP = "Giving up on '%s' in guild %s after %d attempts"
    STREAM_CLOSED = "Closed stream %s in guild %s"
    STREAM_ENDED = "Stream %s ended in guild %s (error: %s)"
    STREAM_STALE_EVENT = "Ignoring stale stream event %s in guild %s (current %s)"
    STREAM_CALLBACK_ERROR = "Error in stream callback for guild %s: %s"
    STREAM_NO_HANDLER = "No stream event handler set for guild %s"
    STREAM_REOPENING = "Reopening stream for '%s' in guild %s at %ss"
    STREAM_DISCARDED = "Discarding stream opened for stale generation in guild %s"

    # Playback Operations
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_FAILED = "Playback failed for '%s' in guild %s: %s"
    PLAYBACK_EXHAUSTED = "Queue exhausted in guild %s"
    PLAYBACK_SEEK = "Seeking to %ss in guild %s"
    PLAYBACK_VOLUME = "Volume set to %d in guild %s"
    PLAYBACK_CONNECT_FAILED = "Could not connect to channel %s in guild %s"

    # Track Operations
    TRACK_SKIPPED = "Skipped %d tracks in guild %s"
    TRACK_FINISHED = "Track finished: %s in guild %s (loop=%s)"
    TRACK_PREVIOUS = "Returning to previous track '%s' in guild %s"

    # Queue Operations
    QUEUE_ENQUEUED = "Enqueued %d tracks in guild %s (front=%s, shuffled=%s)"
    QUEUE_SHUFFLED = "Shuffled queue in guild %s"
    QUEUE_RESOLUTION_DISCARDED = "Discarded %d resolved tracks for guild %s after stop"

    # Loop Mode / Filters
    LOOP_MODE_CHANGED = "Loop mode changed to %s in guild %s"
    FILTERS_CHANGED = "Filters changed to %s in guild %s"

    # Registry Operations
    REGISTRY_CREATED = "Created controller for guild %s"
    REGISTRY_EVICTED = "Evicted controller for guild %s"
    REGISTRY_RETIRED_RETRY = "Controller for guild %s retired, retrying with a fresh one"
    REGISTRY_SHUTDOWN_FAILED = "Failed to shut down controller for guild %s: %r"
    GUILD_NOT_FOUND = "Guild %s not found"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"

    # Playlist Operations
    PLAYLIST_CREATED = "Created playlist %s ('%s') for owner %s with %d tracks"
    PLAYLIST_DELETED = "Deleted playlist %s ('%s') for owner %s"
    PLAYLIST_LOADED = "Loaded playlist %s into guild %s (%d tracks)"

    # Search / Rate Limiting
    SEARCH_TIMEOUT = "Autocomplete search timed out for %r"
    SEARCH_RATE_LIMITED = "Rate limited %s for user %s (retry in %.1fs)"

    # Resolution/Search
    RESOLUTION_FAILED = "Resolution failed: {error}"
    SEARCH_FAILED = "Search failed for '{query}': {error}"
    YTDLP_NO_URL_IN_INFO_DICT = "No URL found in info dict"
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    YTDLP_FAILED_INFO_TO_TRACK = "Failed to convert info to track"
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s"
    YTDLP_FAILED_SEARCH = "Failed to search for %r"
    YTDLP_FAILED_EXTRACT_PLAYLIST = "Failed to extract playlist from %s"
    YTDLP_SPOTIFY_FALLBACK = "Spotify link %s falls back to search %r"

    # Application Lifecycle
    BOT_STARTING = "Starting guild music engine in {environment} mode"
    BOT_SETUP = "Setting up bot..."
    BOT_CONTAINER_INITIALIZED = "Container initialized successfully"
    BOT_CONTAINER_INIT_FAILED = "Failed to initialize container: %s"
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"

    # Bot Cog Management
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_COGS_LOADED_SUMMARY = "Cogs loaded: %s success, %s failed"

    # Bot Command Sync
    BOT_SYNCED_GUILD = "Synced %s commands to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync to guild %s: %s"
    BOT_SYNCED_GLOBAL = "Synced %s commands globally"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync commands globally: %s"

    # Bot Error Handling
    BOT_SLASH_COMMAND_ERROR = "Slash command error in '%s': %s"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"
    BOT_SWEEP_STOP_ERROR = "Error stopping idle sweep job: %s"
    BOT_REGISTRY_SHUTDOWN_ERROR = "Error shutting down guild controllers: %s"

    # Component Interactions
    CONTROL_UNKNOWN = "Ignoring unknown component id %r"
    CONTROL_HANDLER_FAILED = "Control handler for %s failed"
    NOTIFY_FAILED = "Failed to post notification in channel %s: %r"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in Discord interactions.
    Keep them concise, friendly, and include appropriate emoji.
    """

    # Play / Queue
    PLAY_ADDED_ONE = "🎵 Added **{title}** to the queue (position {position})."
    PLAY_ADDED_MANY = "📋 Added **{count}** tracks to the queue."
    PLAY_NOW_PLAYING = "🎵 Now playing: **{title}** [{duration}]"
    PLAY_NO_RESULTS = "❌ No results found for your search!"
    PLAY_CANCELLED = "⏹️ Playback was stopped before your request finished."
    PLAY_FAILED_NOTICE = "⚠️ Could not play **{title}**, moving on."

    # Action Messages
    ACTION_SKIPPED = "⏭️ Skipped {count} track(s)."
    ACTION_PREVIOUS = "⏮️ Playing the previous track."
    ACTION_STOPPED = "⏹️ Stopped playback and cleared the queue."
    ACTION_PAUSED = "⏸️ Paused playback."
    ACTION_RESUMED = "▶️ Resumed playback."
    ACTION_SHUFFLED = "🔀 Shuffled the queue."
    ACTION_LOOP_MODE_SET = "🔁 Loop mode set to: **{mode}**"
    ACTION_VOLUME_SET = "🔊 Volume set to **{volume}%**"
    ACTION_SEEKED = "⏩ Jumped to **{position}**."
    ACTION_FILTER_ON = "🎛️ Enabled filter **{name}**."
    ACTION_FILTER_OFF = "🎛️ Disabled filter **{name}**."
    ACTION_FILTERS_CLEARED = "🎛️ Cleared all filters."
    ACTION_PRESET_APPLIED = "🎛️ Applied preset **{name}**: {filters}"

    # Playlist Messages
    PLAYLIST_CREATED = "✅ Created playlist **{name}**."
    PLAYLIST_SAVED = "✅ Saved {count} tracks to playlist **{name}**."
    PLAYLIST_DELETED = "🗑️ Deleted playlist **{name}**."
    PLAYLIST_LOADED = "📋 Added **{count}** tracks from playlist **{name}**."
    PLAYLIST_DUPLICATE = "❌ You already have a playlist named **{name}**."
    PLAYLIST_NOT_FOUND = "❌ No playlist named **{name}**."
    PLAYLIST_NONE = "You don't have any playlists yet."
    PLAYLIST_LIST_ENTRY = "**{name}** · {count} songs · created {created}"
    PLAYLIST_EMPTY = "❌ That playlist has no tracks."
    PLAYLIST_INVALID_NAME = "❌ Playlist names must be 1-{max_length} characters."

    # Error Messages
    ERROR_COMMAND_FAILED_SEE_LOGS = "❌ Command failed. See logs."
    ERROR_COULD_NOT_JOIN_VOICE = "I couldn't join your voice channel."
    ERROR_INVALID_TIMESTAMP = "❌ Invalid timestamp. Use `90`, `1:30` or `1:02:03`."
    ERROR_INVALID_FILTER = "❌ Unknown filter or preset."
    ERROR_RATE_LIMITED = "⏳ Slow down! Try again in {retry_after:.1f}s."
    ERROR_MISSING_PERMISSIONS = "❌ You don't have permission to use this command."

    # State Messages
    STATE_NOTHING_PLAYING = "Nothing is playing."
    STATE_ALREADY_PAUSED = "Playback is already paused."
    STATE_ALREADY_PLAYING = "Playback is already running."
    STATE_QUEUE_EMPTY = "Queue is empty."
    STATE_NO_HISTORY = "There is no previous track."
    STATE_NOT_ENOUGH_TRACKS_TO_SHUFFLE = "Not enough tracks to shuffle."
    STATE_NEED_TO_BE_IN_VOICE = "You need to be in a voice channel first."
    STATE_SERVER_ONLY = "This command can only be used in a server."
    STATE_VERIFY_VOICE_FAILED = "Could not verify your voice state."

    # Embed Titles
    EMBED_NOW_PLAYING = "🎵 Now Playing"
    EMBED_QUEUE = "📋 Queue ({total_tracks} tracks) · Page {page}/{total_pages}"
    EMBED_PLAYLISTS = "📂 Your Playlists"
    EMBED_SEARCH_RESULTS = "🔍 Search results for: {query}"
    EMBED_FILTERS = "🎛️ Active filters: {filters}"
