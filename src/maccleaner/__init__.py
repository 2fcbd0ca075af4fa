"""maccleaner - reclaim disk space from caches, logs and docker leftovers."""

__version__ = "0.1.0"
