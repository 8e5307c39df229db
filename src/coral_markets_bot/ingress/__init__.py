"""Inbound surfaces: HTTP events, administrative HTTP and Telegram commands."""
