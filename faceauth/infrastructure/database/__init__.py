"""SQLAlchemy-backed identity store."""
from .store import SqlAlchemyIdentityStore

__all__ = ["SqlAlchemyIdentityStore"]
