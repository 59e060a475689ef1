"""Engine, session factory and the request-scoped session dependency."""

from aioffice.db.session import (
    async_session,
    build_engine,
    build_session_factory,
    engine,
    get_db,
)

__all__ = [
    "async_session",
    "build_engine",
    "build_session_factory",
    "engine",
    "get_db",
]
