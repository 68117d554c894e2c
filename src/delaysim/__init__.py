"""
Delay Simulator - configurable response latency for mock servers.

This package samples artificial response delays from statistical
distributions, optionally looked up by key in externally maintained
distribution files.
"""

__version__ = "1.0.0"
