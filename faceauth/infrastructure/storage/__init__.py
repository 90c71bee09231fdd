"""Identity store implementations."""
from .memory import InMemoryIdentityStore

__all__ = ["InMemoryIdentityStore"]
