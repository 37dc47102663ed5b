"""Process-wide event broadcasting between tagged listeners."""

from __future__ import annotations

import threading
from typing import Any, Callable, Hashable

__all__ = ["InterruptEmit", "NoticeCenter"]

_CO_VARARGS = 0x04


class InterruptEmit(RuntimeError):
    """Raised by a listener to stop the remaining listeners of an event."""

    def __init__(self, message: str = "InterruptEmit") -> None:
        super().__init__(message)


def _check_callable(func: Callable, args: tuple) -> None:
    """Raise TypeError when ``func`` plainly cannot take ``args`` positionally."""
    target: Any = func
    bound = 0
    if hasattr(target, "__func__") and hasattr(target, "__self__"):
        target = target.__func__
        bound = 1
    code = getattr(target, "__code__", None)
    if code is None:
        # Builtins, partials and callable objects are not inspected.
        return
    positional = code.co_argcount - bound
    defaults = len(getattr(target, "__defaults__", None) or ())
    kw_defaults = getattr(target, "__kwdefaults__", None) or {}
    has_varargs = bool(code.co_flags & _CO_VARARGS)
    required_kwonly = code.co_kwonlyargcount - len(kw_defaults)
    count = len(args)
    if (
        count < positional - defaults
        or (count > positional and not has_varargs)
        or required_kwonly > 0
    ):
        raise TypeError(f"listener {func!r} cannot take {count} argument(s)")


class _Dispatcher:
    """Listeners of a single event, in the order they were added."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._listeners: list[tuple[Hashable, Callable]] = []

    def add(self, tag: Hashable, func: Callable) -> None:
        with self._lock:
            self._listeners.append((tag, func))

    def remove(self, tag: Hashable) -> bool:
        """Drop every listener with ``tag``; True when none are left."""
        with self._lock:
            self._listeners = [(t, f) for t, f in self._listeners if t != tag]
            return not self._listeners

    def emit(self, safe: bool, args: tuple) -> int:
        # Work on a copy so listeners may add or remove listeners freely.
        with self._lock:
            listeners = list(self._listeners)
        if safe:
            for _, func in listeners:
                _check_callable(func, args)
        count = 0
        for _, func in listeners:
            try:
                func(*args)
            except InterruptEmit:
                count += 1
                break
            count += 1
        return count


class NoticeCenter:
    """Maps event names to listeners and broadcasts events to them."""

    _instance: NoticeCenter | None = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._dispatchers: dict[str, _Dispatcher] = {}

    @staticmethod
    def instance() -> NoticeCenter:
        """The shared process-wide center."""
        with NoticeCenter._instance_lock:
            if NoticeCenter._instance is None:
                NoticeCenter._instance = NoticeCenter()
            return NoticeCenter._instance

    def _dispatcher(self, event: str, create: bool = False) -> _Dispatcher | None:
        with self._lock:
            dispatcher = self._dispatchers.get(event)
            if dispatcher is None and create:
                dispatcher = self._dispatchers[event] = _Dispatcher()
            return dispatcher

    def _drop_dispatcher(self, event: str, dispatcher: _Dispatcher) -> None:
        with self._lock:
            if self._dispatchers.get(event) is dispatcher:
                del self._dispatchers[event]

    def add_listener(self, tag: Hashable, event: str, func: Callable[..., Any]) -> None:
        """Register ``func`` for ``event`` under ``tag``."""
        self._dispatcher(event, create=True).add(tag, func)

    def del_listener(self, tag: Hashable, event: str | None = None) -> None:
        """Remove the listeners of ``tag`` for ``event``, or for every event."""
        if event is None:
            with self._lock:
                for name, dispatcher in list(self._dispatchers.items()):
                    if dispatcher.remove(tag):
                        del self._dispatchers[name]
            return
        dispatcher = self._dispatcher(event)
        if dispatcher is None:
            return
        if dispatcher.remove(tag):
            self._drop_dispatcher(event, dispatcher)

    def emit_event(self, event: str, *args: Any) -> int:
        """Call every listener of ``event``; returns how many were called."""
        return self._emit(False, event, args)

    def emit_event_safe(self, event: str, *args: Any) -> int:
        """Like :meth:`emit_event`, but first checks that every listener accepts ``args``.

        Raises TypeError, before any listener runs, when one cannot.
        """
        return self._emit(True, event, args)

    def _emit(self, safe: bool, event: str, args: tuple) -> int:
        dispatcher = self._dispatcher(event)
        if dispatcher is None:
            return 0
        return dispatcher.emit(safe, args)

    def clear_all(self) -> None:
        """Forget every listener of every event."""
        with self._lock:
            self._dispatchers.clear()