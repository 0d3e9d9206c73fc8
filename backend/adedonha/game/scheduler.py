from __future__ import annotations

import logging
from typing import Callable

from flask_socketio import SocketIO


logger = logging.getLogger(__name__)

TimerCallback = Callable[[str, "TimerHandle"], None]


class TimerHandle:
    """Cancellation token for a scheduled room timer."""

    def __init__(self, room_id: str) -> None:
        self.room_id = room_id
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class SocketIOScheduler:
    """Per-room timers on Flask-SocketIO background tasks.

    Callbacks receive the room id and their handle, never the room itself,
    so they must look the room up again and check the handle is still the
    one the room is waiting on.
    """

    def __init__(self, socketio: SocketIO) -> None:
        self._socketio = socketio

    def every(self, room_id: str, interval: float, callback: TimerCallback) -> TimerHandle:
        handle = TimerHandle(room_id)

        def _runner() -> None:
            while True:
                self._socketio.sleep(interval)
                if handle.cancelled:
                    break
                _run(callback, room_id, handle)

        self._socketio.start_background_task(_runner)
        return handle

    def later(self, room_id: str, delay: float, callback: TimerCallback) -> TimerHandle:
        handle = TimerHandle(room_id)

        def _runner() -> None:
            self._socketio.sleep(delay)
            if handle.cancelled:
                return
            _run(callback, room_id, handle)

        self._socketio.start_background_task(_runner)
        return handle


def _run(callback: TimerCallback, room_id: str, handle: TimerHandle) -> None:
    try:
        callback(room_id, handle)
    except Exception:
        # One room's failure must not kill the worker or touch other rooms.
        logger.exception("[timer-error] room=%s", room_id)
