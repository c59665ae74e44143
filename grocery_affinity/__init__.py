"""Product affinity graphs from grocery orders."""

__version__ = "0.1.0"
