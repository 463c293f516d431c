"""Publish/subscribe channels for loop notifications.

Each event kind owns an ordered list of subscriptions. Emitting calls every
handler synchronously, in registration order. Subscribing returns a
Subscription whose dispose() unregisters the handler.
"""

from typing import Callable, Iterable, Optional


class Subscription:
    """Disposer for one handler registration."""

    def __init__(self, channel: "EventChannel", handler: Callable):
        self.channel = channel
        self.handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def dispose(self):
        """Unregister the handler. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self.channel._remove(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()

    def __repr__(self):
        state = "active" if self._active else "disposed"
        return f"<Subscription {self.channel.name} {state}>"


class EventChannel:
    """Ordered handler list for a single kind of event."""

    def __init__(self, name: str):
        self.name = name
        self._subscriptions: list[Subscription] = []

    def subscribe(self, handler: Callable) -> Subscription:
        """Register a handler. The same handler may be registered twice."""
        if not callable(handler):
            raise TypeError(f"Handler for {self.name!r} must be callable, got {handler!r}")
        sub = Subscription(self, handler)
        self._subscriptions.append(sub)
        return sub

    __call__ = subscribe

    def unsubscribe(self, handler: Callable) -> bool:
        """Remove the earliest registration of handler, if any."""
        for sub in self._subscriptions:
            if sub.handler == handler:
                sub.dispose()
                return True
        return False

    def _remove(self, sub: Subscription):
        self._subscriptions.remove(sub)

    def emit(self, *args):
        """Call every handler with args.

        Iterates a snapshot: handlers added or disposed while emitting take
        effect on the next emit.
        """
        for sub in tuple(self._subscriptions):
            sub.handler(*args)

    @property
    def handler_count(self) -> int:
        return len(self._subscriptions)

    def clear(self):
        for sub in tuple(self._subscriptions):
            sub.dispose()


class EventHub:
    """Registered event channels keyed by event kind."""

    def __init__(self, kinds: Optional[Iterable[str]] = None):
        self._channels: dict[str, EventChannel] = {}
        for kind in kinds or ():
            self.register(kind)

    def register(self, kind: str) -> EventChannel:
        if kind in self._channels:
            raise ValueError(f"Event kind {kind!r} is already registered")
        channel = EventChannel(kind)
        self._channels[kind] = channel
        return channel

    def channel(self, kind: str) -> EventChannel:
        try:
            return self._channels[kind]
        except KeyError:
            raise KeyError(f"Unknown event kind {kind!r}") from None

    def subscribe(self, kind: str, handler: Callable) -> Subscription:
        return self.channel(kind).subscribe(handler)

    def emit(self, kind: str, *args):
        self.channel(kind).emit(*args)

    @property
    def kinds(self) -> list[str]:
        return list(self._channels)
