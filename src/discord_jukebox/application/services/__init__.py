"""Application services: playback driver, queue API, provider routing and sounds."""
