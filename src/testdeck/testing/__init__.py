#
# src/testdeck/testing/__init__.py
#
"""
Test discovery and execution sub-package for testdeck.
"""
from .channel import OutputChannel
from .discovery import RegexTestDiscoverer
from .factory import get_profile
from .profiles import RunnerProfile
from .protocols import OutputChunk, RunHandle, TestDiscoverer
from .runner import ExecutionPipeline

__all__ = [
    "ExecutionPipeline",
    "OutputChannel",
    "OutputChunk",
    "RegexTestDiscoverer",
    "RunHandle",
    "RunnerProfile",
    "TestDiscoverer",
    "get_profile",
]

# 🔼⚙️
