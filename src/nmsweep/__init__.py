"""nmsweep - find and remove stale node_modules directories."""

__version__ = "0.1.0"
