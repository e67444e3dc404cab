"""Session store infrastructure for the admin's authenticated session.

Provides pluggable session storage backends:
- File backend persisting the token between CLI invocations
- In-memory backend for tests and embedding
"""

from parking_admin.infra.session.store import (
    FileSessionStore,
    InMemorySessionStore,
    SessionStore,
    SessionStoreError,
    SessionUser,
)

__all__ = [
    "SessionStore",
    "FileSessionStore",
    "InMemorySessionStore",
    "SessionStoreError",
    "SessionUser",
]
