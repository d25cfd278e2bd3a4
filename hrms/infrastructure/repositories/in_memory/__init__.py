"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .identity_store import InMemoryIdentityStore

__all__ = ["InMemoryIdentityStore"]
