# ============================================================================
# VERSION - HEARTBEAT
# ============================================================================
"""
Version information for the heartbeat package.

This is the single source of truth for the package version.
"""
__version__ = "0.3.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))
