"""Centralized message constants for error messages, log lines, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Track Validation Errors
    EMPTY_LOCATOR = "Track locator needs a URL or a search query"
    DIRECT_LOCATOR_WITHOUT_URL = "Direct track locators must carry a URL"
    EMPTY_QUERY = "Please provide a URL or search query."

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_SOUND_URL = "Sound '{name}' must point to an http(s) URL"

    # Voice Transport Errors
    GUILD_NOT_FOUND = "Guild {guild_id} is not available"
    CHANNEL_NOT_VOICE = "Channel {channel_id} is not a voice channel"
    NO_VOICE_ENDPOINT = "No voice channel to join"
    VOICE_CONNECT_TIMEOUT = "Timed out joining the voice channel"
    VOICE_NO_PERMISSION = "I don't have permission to join that voice channel"
    VOICE_CONNECT_FAILED = "Could not join the voice channel: {error}"
    VOICE_DISCONNECT_FAILED = "Could not leave the voice channel: {error}"
    VOICE_NOT_CONNECTED = "Not connected to a voice channel"
    UNSUPPORTED_SESSION = "Cannot attach a player to a {kind}"

    # Audio/Stream Errors
    PLAYBACK_START_FAILED = "Could not start playback: {error}"
    NO_STREAM_URL = "No audio stream found for {target}"
    NO_SEARCH_RESULTS = "No YouTube results found for: {query}"
    YTDLP_ERROR = "yt-dlp error: {error}"
    YTDLP_EMPTY_RESULT = "yt-dlp returned no data"

    # Spotify Errors
    SPOTIFY_NOT_CONFIGURED = "Spotify credentials are not configured"
    SPOTIFY_TOKEN_FAILED = "Failed to get Spotify token: {error}"
    SPOTIFY_REQUEST_FAILED = "Spotify request failed: {error}"
    SPOTIFY_BAD_RESPONSE = "Failed to parse Spotify response"

    # Startup Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Playback Driver
    SESSION_NOT_FOUND = "No session for guild %s"
    PLAYBACK_ALREADY_PLAYING = "Guild %s is already playing, nothing to advance"
    PLAYBACK_STARTING = "Starting '%s' in guild %s"
    PLAYBACK_STARTED = "Now playing '%s' in guild %s (stream %s)"
    PLAYBACK_START_FAILED = "Could not start '%s' in guild %s: %s"
    PLAYBACK_START_UNEXPECTED = "Unexpected error starting '%s' in guild %s"
    PLAYBACK_FINISHED = "Finished '%s' in guild %s"
    PLAYBACK_STREAM_ERROR = "Stream for '%s' in guild %s failed: %s"
    PLAYBACK_SKIPPING = "Skipping '%s' in guild %s"
    PLAYBACK_SKIP_DEFERRED = "Skip of '%s' in guild %s deferred until the stream starts"
    PLAYBACK_DEFERRED_SKIP = "Applying deferred skip of '%s' in guild %s"
    TERMINAL_EVENT_STALE = "Ignoring terminal event for stale stream %s in guild %s"
    INVARIANT_HEALED = "Session %s state was inconsistent (%s); resetting playback"
    NOTIFY_FAILED = "Failed to post notification for '%s'"
    SESSION_LEFT = "Left voice in guild %s"

    # Transport
    TRANSPORT_OPENED = "Opened voice session in channel %s for guild %s"
    TRANSPORT_STALE = "Voice session for guild %s is closed, reopening"
    TRANSPORT_CLOSED = "Closed voice session for guild %s"
    TRANSPORT_CLOSE_FAILED = "Failed to close voice session for guild %s: %s"

    # Idle Teardown
    IDLE_TIMER_ARMED = "Idle timer armed for guild %s (%ss)"
    IDLE_TIMER_NOOP = "Idle timer fired for guild %s but the session is busy or closed"
    IDLE_TEARDOWN = "Guild %s idle for %ss, disconnecting"
    TIMER_ACTION_FAILED = "Timer action '%s' failed"

    # Queue
    QUEUE_ENQUEUED = "Enqueued %s track(s) in guild %s (play_next=%s, queue length %s)"
    QUEUE_CLEARED = "Cleared %s track(s) in guild %s"
    SOUND_QUEUED = "Queued sound '%s' in guild %s"

    # Providers
    PROVIDER_RESOLVING = "Resolving '%s' with provider %s"
    PROVIDER_RESOLVED = "Resolved %s track(s) for '%s' via %s"
    PLAY_LOOKUP_FAILED = "Lookup for '%s' failed: %s"
    YTDLP_EXTRACT_FAILED = "yt-dlp extraction failed for %s: %s"
    YTDLP_STREAM_RESOLVED = "Resolved audio stream for %s"
    SPOTIFY_TOKEN_REFRESHED = "Spotify access token refreshed (expires in %ss)"
    SPOTIFY_TOKEN_FAILED = "Spotify token request failed: %s"
    SPOTIFY_REQUEST_FAILED = "Spotify request %s failed: %s"
    SPOTIFY_NOT_FOUND = "Spotify returned nothing for %s (HTTP %s)"

    # Voice Connection
    GUILD_NOT_FOUND = "Guild %s not found"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_MOVED = "Moved to voice channel %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_CONNECTION_TIMEOUT = "Timed out connecting to voice channel %s"
    VOICE_NO_PERMISSION = "No permission to join voice channel %s"
    VOICE_CLIENT_ERROR = "Voice client error: %s"
    VOICE_STALE_CLEANUP = "Cleaning up stale voice client in guild %s"
    VOICE_STALE_CLEANUP_FAILED = "Stale voice client cleanup failed in guild %s: %s"

    # Audio Player
    STREAM_STARTED = "Stream %s started in guild %s"
    STREAM_STOPPED = "Stream stopped in guild %s (force=%s)"
    STREAM_ENDED = "Stream %s ended in guild %s (%s)"
    TERMINAL_CALLBACK_FAILED = "Terminal event handler failed for guild %s"

    # Views
    VIEW_DISABLE_FAILED = "Could not disable view buttons: %s"

    # Container
    CONTAINER_PROVIDERS_READY = "Providers ready: %s (default %s)"
    CONTAINER_SOUNDS_LOADED = "Loaded %s soundboard clip(s)"
    CONTAINER_DRIVER_SHUTDOWN_FAILED = "Failed shutting down playback driver: %r"

    # Bot Lifecycle
    BOT_STARTING = "Starting discord-jukebox (environment=%s)"
    BOT_STARTING_RUN = "Connecting to Discord"
    BOT_STOPPED = "Bot stopped"
    BOT_KEYBOARD_INTERRUPT = "Interrupted, shutting down"
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SETUP = "Running bot setup"
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_CONTAINER_INITIALIZED = "Container initialized"
    BOT_CONTAINER_INIT_FAILED = "Container initialization failed: %s"
    BOT_COG_LOADED = "Loaded cog %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_COMMAND_ERROR = "Command '%s' failed: %s"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Could not send error message to the channel"
    BOT_READY = "Logged in as %s (ID: %s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guild(s)"
    BOT_SHUTTING_DOWN = "Shutting down"
    BOT_SHUTDOWN_TIMEOUT = "Shutdown did not finish within %ss"
    BOT_SHUTDOWN_COMPLETE = "Shutdown complete"
    BOT_CONTAINER_SHUTDOWN = "Container shut down"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error shutting down container: %s"


class DiscordUIMessages:
    """Text posted to Discord channels."""

    # Playback notices
    NOW_PLAYING_HEADER = "🎵 **Now playing**"
    SKIPPING_TRACK = "❌ Skipping **{title}**: {reason}"

    # play
    PLAY_USAGE = (
        "Please provide a URL or search query.\n"
        "Usage: `{prefix}play [{next_flag}] [{provider_flag} <{available}>] <url or search terms>`\n"
        "Default provider: **{default}**"
    )
    PLAY_PROVIDER_NAME_REQUIRED = "`{flag}` requires a provider name. Available: {available}"
    PLAY_QUERY_REQUIRED = "Please provide a URL or search query after the provider flag."
    LOOKING_UP = "🔍 Looking up{where}: `{query}`..."
    LOOKUP_ON = " on **{provider}**"
    NO_RESULTS = "❌ No results found for that query."
    LABEL_ADDED = "📋 **Added to queue**"
    LABEL_PLAYING_NEXT = "▶️ **Playing next**"
    STARTING_PLAYBACK = "✅ **Starting playback** (via {provider})\n{line}"
    STARTING_COLLECTION = "✅ **Starting playback** — {collection} with {count} tracks (via {provider})"
    QUEUED_COLLECTION = "📋 **Added {count} tracks** from {collection} to the queue (via {provider})"
    QUEUED_COLLECTION_NEXT = "▶️ **Queued next — {count} tracks** from {collection} (via {provider})"

    # queue
    NOTHING_PLAYING_EMPTY_QUEUE = "ℹ️ Nothing is playing and the queue is empty."
    QUEUE_EMPTY_LINE = "_The queue is empty._"
    QUEUE_PAGE_HEADER = "📋 **Queue** — Page {page} / {total_pages}"

    # skip / clear
    NOTHING_PLAYING = "❌ Nothing is playing right now."
    SKIPPED_REMAINING = "⏭️ Skipped. **{remaining}** {tracks} remaining in queue."
    SKIPPED_QUEUE_EMPTY = "⏭️ Skipped. Queue is now empty."
    QUEUE_ALREADY_EMPTY = "ℹ️ The queue is already empty."
    QUEUE_CLEARED = "🗑️ Cleared **{cleared}** {tracks} from the queue."

    # voice
    JOINED = "Joined the voice channel!"
    LEFT = "Left the voice channel."
    NOT_IN_VOICE = "I'm not in a voice channel."
    ALIVE = "I'm alive!"

    # sounds
    SOUND_NOT_FOUND = "Sound not found."
    SOUND_PLAYING = "🔊 Playing **{name}**!"
    SOUNDS_EMPTY = "No sounds are configured."
    SOUNDS_HEADER = "🔊 **Available Sounds** — Page {page} / {total_pages}"

    # errors
    STATE_SERVER_ONLY = "This command only works in a server."
    VIEW_OWNER_ONLY = "Only the person who ran the command can use these buttons."
    ERROR_GENERIC = "❌ Error: {error}"
    ERROR_UNEXPECTED = "❌ Something went wrong running that command."
