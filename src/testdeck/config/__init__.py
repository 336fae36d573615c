#
# config/__init__.py
#
"""
Configuration handling sub-package for testdeck.

Exports the loading function and core configuration models.
"""

from .loader import DEFAULT_CONFIG_NAME, load_config
from .models import GlobalConfig, RunnerConfig, SessionConfig, TestdeckConfig

__all__ = [
    "DEFAULT_CONFIG_NAME",
    "GlobalConfig",
    "RunnerConfig",
    "SessionConfig",
    "TestdeckConfig",
    "load_config",
]

# 🔼⚙️
