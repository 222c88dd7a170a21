"""
shadowcache - Backend Stores

Exports the always-available in-process store.

Memcached and Redis stores are lazy-loaded via factory.py so that their client
libraries are only required when selected.
"""

from .memory import MemoryStore

__all__ = [
    "MemoryStore",
]
