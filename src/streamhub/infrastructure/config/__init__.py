from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, PlayerConfig

__all__ = ["AppConfig", "EnvOverrides", "PlayerConfig", "load_config"]
