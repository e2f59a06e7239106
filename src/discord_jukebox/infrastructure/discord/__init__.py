"""Discord integration: bot, cogs, guards and voice adapters."""
