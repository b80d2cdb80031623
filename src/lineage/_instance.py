"""Instances produced by a Class"""

import types
from collections.abc import Mapping

import lineage


__all__ = ["Instance", "CORE_METHODS"]


class Instance:
    """An object constructed from a Class.

    Methods are not stored on the instance. Attribute lookups that miss
    the instance fields are resolved through the Class chain and returned
    bound to this instance. Fields set by the initializer shadow methods
    of the same name.

    Args:
        cls: (Class) The Class that constructed this instance
        ident: (int | None) Registry identifier for tracking Classes

    Attributes:
        cls: (Class) The Class that constructed this instance
        id: (int | None) Registry identifier, None when not tracked
    """

    __slots__ = ("_cls", "_superclass", "_id", "_disposed", "_events", "__dict__")

    def __init__(self, cls, ident=None):
        self._cls = cls
        self._superclass = cls.parent
        self._id = ident
        self._disposed = False
        self._events = None

    def __getattr__(self, name):
        if name.startswith("__") or name in Instance.__slots__:
            raise AttributeError(name)
        method = self._cls.lookup(name)
        if method is None:
            raise AttributeError(f"{self!r} has no field or method '{name}'")
        return types.MethodType(method, self)

    def __repr__(self):
        if self._id is None:
            return f"Instance<{self._cls.name}>"
        return f"Instance<{self._cls.name}#{self._id}>"

    @property
    def cls(self):
        """(Class) The Class that constructed this instance."""
        return self._cls

    @property
    def id(self):
        """(int | None) Registry identifier, None when not tracked."""
        return self._id

    @property
    def superclass(self):
        """(Class | None) Parent of this instance's Class, None once disposed."""
        return self._superclass

    @property
    def is_disposed(self):
        """(bool) Whether dispose() was called on this instance."""
        return self._disposed

    def instance_of(self, cls):
        """(bool) Whether cls is this instance's Class or one of its ancestors."""
        return self._cls is cls or self._cls.derives_from(cls)

    def _detach(self):
        self._superclass = None
        self._disposed = True

    def _event_table(self):
        if self._events is None:
            self._events = {}
        return self._events


_RESERVED = frozenset(name for name in dir(Instance) if not name.startswith("__"))


def default_init(self, config=None, **fields):
    """Copy every key of config and every keyword argument onto self.

    Used when no Class in the chain defines an init method.

    Raises:
        ConfigError: If config is not a mapping or a key is reserved
    """
    if config is not None and not isinstance(config, Mapping):
        raise lineage.ConfigError(
            f"{self.cls!r} initializer expects a mapping, got {type(config).__name__}"
        )
    values = dict(config or {})
    values.update(fields)
    for key, value in values.items():
        if not isinstance(key, str) or key in _RESERVED:
            raise lineage.ConfigError(f"Config key {key!r} cannot be set on {self.cls!r}", key)
        setattr(self, key, value)


def _get_super(self, name, cls=None):
    """Return a callable running the parent Class's version of a method.

    The parent is the parent of this instance's Class, or the parent of
    cls when given, so a method defined on an intermediate Class can reach
    past itself regardless of the instance's own Class.

    Args:
        name: (str) Method name
        cls: (Class | None) Class whose parent should be used

    Returns:
        (callable) Forwards its arguments to the parent method bound to self

    Raises:
        LifecycleError: If this instance was disposed
        UsageError: If there is no parent Class
        AttributeError: If the parent chain has no such method
    """
    if self._disposed:
        raise lineage.LifecycleError(f"{self!r} used after disposal", self)
    if cls is None:
        owner, parent = self._cls, self._superclass
    else:
        if not self.instance_of(cls):
            raise lineage.UsageError(f"{self!r} is not an instance of {cls!r}")
        owner, parent = cls, cls.parent
    if parent is None:
        raise lineage.UsageError(f"{owner!r} has no parent class")
    method = parent.lookup(name)
    if method is None:
        raise AttributeError(f"{parent!r} has no method '{name}'")

    def super_method(*args, **kwargs):
        if self._disposed:
            raise lineage.LifecycleError(f"{self!r} used after disposal", self)
        return method(self, *args, **kwargs)

    super_method.__name__ = name
    return super_method


CORE_METHODS = {"get_super": _get_super}
