"""Studio session module."""
from studio.session import StudioSession, session, get_session

__all__ = ["StudioSession", "session", "get_session"]
