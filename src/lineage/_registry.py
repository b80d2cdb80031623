"""Per-class bookkeeping of live instances"""

import itertools
import logging
import types

import lineage


__all__ = ["InstanceRegistry", "REGISTRY_METHODS"]

logger = logging.getLogger(__name__)


class InstanceRegistry:
    """Live instances of one Class, keyed by generated identifiers.

    Identifiers come from a counter starting at 1 that only moves forward,
    so an identifier is never handed out twice, even after its instance
    was removed.

    Args:
        owner: (Class) The Class whose instances are tracked

    Attributes:
        owner: (Class) The Class whose instances are tracked
    """

    __slots__ = ("owner", "_counter", "_instances")

    def __init__(self, owner):
        self.owner = owner
        self._counter = itertools.count(1)
        self._instances = {}

    def __repr__(self):
        return f"InstanceRegistry<{self.owner.name} live={len(self._instances)}>"

    def __len__(self):
        return len(self._instances)

    def __contains__(self, ident):
        return ident in self._instances

    def __iter__(self):
        return iter(list(self._instances))

    def assign_id(self):
        """Return the next identifier for this Class."""
        return next(self._counter)

    def register(self, ident, instance):
        """Track instance under ident."""
        self._instances[ident] = instance
        logger.debug(f"Registered {instance!r} in {self.owner!r}")

    def lookup(self, ident):
        """(Instance | None) Instance registered under ident."""
        return self._instances.get(ident)

    def remove(self, ident):
        """Stop tracking the instance under ident.

        Returns:
            (Instance | None) The removed instance, None if ident is unknown
        """
        instance = self._instances.pop(ident, None)
        if instance is not None:
            logger.debug(f"Removed {instance!r} from {self.owner!r}")
        return instance

    def all(self):
        """(Mapping) Read-only live view of {id: instance}."""
        return types.MappingProxyType(self._instances)

    def dispose(self, instance):
        """Remove instance and sever its link to the inheritance chain.

        Raises:
            LifecycleError: If the instance was already disposed
        """
        if instance.is_disposed:
            raise lineage.LifecycleError(f"{instance!r} used after disposal", instance)
        self.remove(instance.id)
        instance._detach()
        logger.debug(f"Disposed {instance!r}")


def _dispose(self):
    """Remove this instance from its Class and detach it from the parent chain."""
    if self.cls.registry is None:
        raise lineage.UsageError(f"{self.cls!r} does not track instances")
    self.cls.registry.dispose(self)


REGISTRY_METHODS = {"dispose": _dispose}
