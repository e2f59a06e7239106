"""Shared domain primitives: exceptions, messages, constrained types and timers."""
