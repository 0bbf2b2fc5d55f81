"""Cancellation bridge between an awaiting tool call and a worker thread.

The blocking database work runs in a thread. When the awaiting task is
cancelled, `CancellationHandle.cancel` asks the live driver connection to abort
its in-flight call and flags the worker, which stops at its next suspension
point (connection open, statement execution, row fetch).
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import threading
from typing import Any, TypeVar

from fastmcp.utilities.logging import get_logger

from oracle_mcp.exceptions import QueryCancelledError

_logger = get_logger(__name__)

R = TypeVar("R")


class CancellationHandle:
    """Thread-safe cancellation flag tied to at most one driver connection."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._driver_connection: Any | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def attach(self, driver_connection: Any) -> None:
        """Bind the raw DBAPI connection that `cancel` should interrupt."""
        with self._lock:
            self._driver_connection = driver_connection
            already_cancelled = self._cancelled
        if already_cancelled:
            self._interrupt(driver_connection)

    def detach(self) -> None:
        with self._lock:
            self._driver_connection = None

    def cancel(self) -> None:
        """Flag cancellation and abort the attached driver call, if any."""
        with self._lock:
            self._cancelled = True
            driver_connection = self._driver_connection
        if driver_connection is not None:
            self._interrupt(driver_connection)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            msg = "Operation was cancelled."
            raise QueryCancelledError(msg)

    @staticmethod
    def _interrupt(driver_connection: Any) -> None:
        # python-oracledb exposes cancel(); sqlite3 exposes interrupt()
        for name in ("cancel", "interrupt"):
            method = getattr(driver_connection, name, None)
            if callable(method):
                try:
                    method()
                except Exception:  # noqa: BLE001 - best-effort abort
                    _logger.debug("Driver %s() failed", name, exc_info=True)
                return
        _logger.debug("Driver connection %r cannot be interrupted", type(driver_connection))


async def run_cancellable(func: Callable[[CancellationHandle], R]) -> R:
    """Run ``func(handle)`` in a worker thread, propagating task cancellation."""
    handle = CancellationHandle()
    try:
        return await asyncio.to_thread(func, handle)
    except asyncio.CancelledError:
        _logger.info("Tool call cancelled; aborting outstanding driver work")
        handle.cancel()
        raise
