from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)
_warned_keys: set[str] = set()
_warned_lock = threading.Lock()


def warn_once(key: str, message: str) -> None:
    """Log ``message`` as a warning the first time ``key`` is seen."""
    with _warned_lock:
        if key in _warned_keys:
            return
        _warned_keys.add(key)
    logger.warning(message)


def reset_warnings() -> None:
    """Forget the keys seen by ``warn_once`` (used by tests)."""
    with _warned_lock:
        _warned_keys.clear()


__all__ = ["reset_warnings", "warn_once"]
