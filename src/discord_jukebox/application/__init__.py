"""
Application Layer

Orchestrates the domain model and the outside world.

Structure:
- interfaces/: Port interfaces for infrastructure adapters (voice session,
  audio player, stream resolver, track providers)
- services/: The playback driver, the public queue API, provider routing and
  the sound library
"""
