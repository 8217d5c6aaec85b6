"""Telegram and filesystem adapters for the core ports."""
