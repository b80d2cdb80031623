"""Per-instance publish/subscribe"""

__all__ = ["Listener", "EVENT_METHODS"]

_self = object()


class Listener:
    """A registered event callback.

    The Listener returned by on() is also the handle that un() accepts to
    remove exactly that registration.

    Args:
        name: (str) Event name
        callback: (callable) Called as callback(context, *args, **kwargs)
        context: (object) Receiver passed to the callback
    """

    __slots__ = ("name", "callback", "context")

    def __init__(self, name, callback, context):
        self.name = name
        self.callback = callback
        self.context = context

    def __repr__(self):
        callback = getattr(self.callback, "__qualname__", self.callback)
        return f"Listener<{self.name}:{callback}>"


def _on(self, name, callback, context=_self):
    """Subscribe callback to the event name.

    Args:
        name: (str) Event name
        callback: (callable) Listener callback
        context: (object) Receiver for the callback, defaults to self

    Returns:
        (Listener | None) Handle for un(), None if name or callback is missing
    """
    if not name or callback is None:
        return None
    listener = Listener(name, callback, self if context is _self else context)
    self._event_table().setdefault(name, []).append(listener)
    return listener


def _un(self, name=None, selector=None):
    """Remove listeners.

    With no arguments every event is cleared. With only a name, every
    listener of that event is removed. A Listener selector removes that
    registration; any other selector removes listeners whose callback
    equals it. A Listener selector without a name is looked up under its
    own event name; a callback selector without a name removes nothing.

    Returns:
        (int) Number of listeners removed
    """
    table = self._event_table()
    if name is None and isinstance(selector, Listener):
        name = selector.name
    elif name is None and selector is not None:
        return 0
    if name is None:
        removed = sum(len(listeners) for listeners in table.values())
        table.clear()
        return removed

    listeners = table.get(name)
    if not listeners:
        return 0
    if selector is None:
        del table[name]
        return len(listeners)

    if isinstance(selector, Listener):
        kept = [listener for listener in listeners if listener is not selector]
    else:
        kept = [listener for listener in listeners if listener.callback != selector]
    removed = len(listeners) - len(kept)
    if kept:
        table[name] = kept
    else:
        del table[name]
    return removed


def _fire(self, name, *args, **kwargs):
    """Call every listener of name in registration order.

    Listeners are snapshotted before dispatch, so subscribing or removing
    listeners from inside a callback only affects later fires.

    Returns:
        (int) Number of listeners called
    """
    listeners = self._event_table().get(name)
    if not listeners:
        return 0
    snapshot = tuple(listeners)
    for listener in snapshot:
        listener.callback(listener.context, *args, **kwargs)
    return len(snapshot)


def _listeners(self, name):
    """(tuple[Listener]) Current listeners of name."""
    return tuple(self._event_table().get(name, ()))


EVENT_METHODS = {"on": _on, "un": _un, "fire": _fire, "listeners": _listeners}
