"""Music domain: tracks, queue items, per-guild session state and the session registry."""
