#
# src/testdeck/__init__.py
#
"""
testdeck: an interactive console for browsing, running and watching unit tests.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("testdeck")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = ["__version__"]

# 🔼⚙️
