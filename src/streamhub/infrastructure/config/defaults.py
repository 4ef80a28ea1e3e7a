"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "streamhub",
    "environment": "dev",
    "http": {
        "timeout_seconds": 15.0,
        "follow_redirects": True,
        "user_agent": "StreamHub/0.1.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "aggregator": {
        "base_url": "https://pstream.vercel.app",
        "enabled": True,
    },
    "subtitles": {
        "base_url": "http://localhost:3000",
    },
    "player": {
        "controls_hide_seconds": 3.0,
        "max_retries": 3,
        "close_key": "Escape",
        "controls_key": "Space",
        "probe_timeout_seconds": 5.0,
    },
    "api": {
        "host": "127.0.0.1",
        "port": 7700,
    },
}
