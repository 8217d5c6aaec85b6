"""Core domain package for the relay.

Core contains classification, deduplication, gating, routing and paced
delivery without any Telegram or filesystem-specific code, keeping the
business logic portable.
"""
