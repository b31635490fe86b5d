"""Process-start hook.

``start`` turns low-level faults into logged reports: it enables
``faulthandler`` for hard crashes and wraps ``sys.excepthook`` and
``threading.excepthook`` so uncaught exceptions are logged before the
previous hook runs. It installs at most once per process.
"""

from __future__ import annotations

import faulthandler
import logging
import sys
import threading
from types import TracebackType

from .config import BridgeConfig, configure_logging, set_config

logger = logging.getLogger(__name__)

_install_lock = threading.Lock()
_installed = False


def start(config: BridgeConfig | None = None) -> bool:
    """Configure logging and install the fault hook.

    Args:
        config: Optional configuration. Defaults to ``BridgeConfig.from_env()``.

    Returns:
        True on the first call, False when the hook was already installed.
    """
    global _installed
    with _install_lock:
        if _installed:
            logger.debug("start() called again; hook already installed.")
            return False
        resolved = config if config is not None else BridgeConfig.from_env()
        set_config(resolved)
        configure_logging(resolved)
        if resolved.install_fault_hook:
            _install_fault_hook()
        _installed = True
    logger.info("sheetbridge started (fault hook: %s).", resolved.install_fault_hook)
    return True


def is_started() -> bool:
    return _installed


def _install_fault_hook() -> None:
    if not faulthandler.is_enabled():
        faulthandler.enable()
    previous_excepthook = sys.excepthook
    previous_thread_hook = threading.excepthook

    def _excepthook(
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        logger.critical("Uncaught exception", exc_info=(exc_type, exc, tb))
        previous_excepthook(exc_type, exc, tb)

    def _thread_excepthook(args: threading.ExceptHookArgs) -> None:
        if args.exc_value is not None:
            logger.critical(
                "Uncaught exception in thread %s",
                args.thread.name if args.thread is not None else "<unknown>",
                exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
            )
        previous_thread_hook(args)

    sys.excepthook = _excepthook
    threading.excepthook = _thread_excepthook
