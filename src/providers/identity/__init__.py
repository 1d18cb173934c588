"""Identity store implementations (IIdentityStore)."""

from src.providers.identity.sqlite_identity_store import SQLiteIdentityStore

__all__ = ["SQLiteIdentityStore"]
