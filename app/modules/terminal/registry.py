"""Thread-safe registry of terminal_id -> TerminalSession, bounded in size and idle time."""
import threading
import time
import logging

from app.config import settings
from app.modules.terminal.session import TerminalSession

logger = logging.getLogger(__name__)
_lock = threading.Lock()
_registry: dict[str, TerminalSession] = {}


def _evict_expired(now: float) -> None:
    ttl = settings.terminal_session_ttl_seconds
    for session_id in [sid for sid, s in _registry.items() if now - s.last_active > ttl]:
        del _registry[session_id]
        logger.debug(f"Evicted idle terminal {session_id}")


def register(session: TerminalSession) -> None:
    with _lock:
        _evict_expired(time.monotonic())
        while len(_registry) >= settings.terminal_max_sessions:
            oldest = min(_registry.values(), key=lambda s: s.last_active)
            del _registry[oldest.id]
            logger.info(f"Terminal registry full, dropped {oldest.id}")
        _registry[session.id] = session
        logger.debug(f"Registered terminal {session.id} for user {session.owner_id}")


def get_session(session_id: str, owner_id: str) -> TerminalSession | None:
    """Session if it exists and belongs to owner_id"""
    with _lock:
        session = _registry.get(session_id)
    if session is None or session.owner_id != owner_id:
        return None
    return session


def unregister(session_id: str) -> None:
    with _lock:
        _registry.pop(session_id, None)
        logger.debug(f"Unregistered terminal {session_id}")


def clear() -> None:
    with _lock:
        _registry.clear()
